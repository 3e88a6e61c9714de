import logging

from cassandra import ConsistencyLevel, DriverException
from cassandra.cluster import Cluster, NoHostAvailable
from cassandra.query import SimpleStatement

logger = logging.getLogger(__name__)


class WordCountSetupError(Exception):
    """Base class for errors that abort the setup run."""


class ClusterConnectionError(WordCountSetupError):
    pass


class SchemaLookupError(WordCountSetupError):
    pass


class PropagationInterrupted(WordCountSetupError):
    pass


class InsertError(WordCountSetupError):
    def __init__(self, message, key=None, inserted=0):
        super().__init__(message)
        self.key = key
        self.inserted = inserted


class ClusterClient:
    """Single-node connection to a Cassandra cluster.

    Owns one Cluster and one Session for the whole run; every statement
    goes through here so the bootstrap and seed steps never touch the
    driver directly.
    """

    def __init__(self, host, port):
        self.host = host
        self.port = port
        self.cluster = None
        try:
            self.cluster = Cluster([host], port=port)
            self.session = self.cluster.connect()
        except (DriverException, NoHostAvailable, OSError) as e:
            if self.cluster is not None:
                self.cluster.shutdown()
            raise ClusterConnectionError(
                f"Could not connect to Cassandra at {host}:{port}: {e}"
            ) from e

        logger.info("Connected to Cassandra at %s:%s", host, port)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def keyspace_exists(self, name):
        """Check the cluster schema metadata for a keyspace"""
        try:
            self.cluster.refresh_schema_metadata()
        except DriverException as e:
            raise SchemaLookupError(f"Could not describe keyspace {name}: {e}") from e
        return name in self.cluster.metadata.keyspaces

    def table_exists(self, keyspace, table):
        """Check the cluster schema metadata for a table"""
        if not self.keyspace_exists(keyspace):
            return False
        return table in self.cluster.metadata.keyspaces[keyspace].tables

    def ring_size(self, keyspace):
        """Number of nodes in the ring holding the keyspace"""
        # SimpleStrategy places the keyspace on every node of the ring
        return len(self.cluster.metadata.all_hosts())

    def wait_for_schema_agreement(self, timeout):
        return self.cluster.control_connection.wait_for_schema_agreement(
            wait_time=timeout
        )

    def set_keyspace(self, name):
        self.session.set_keyspace(name)

    def execute(self, query, consistency_level=ConsistencyLevel.ONE):
        statement = SimpleStatement(query, consistency_level=consistency_level)
        return self.session.execute(statement)

    def prepare(self, query):
        return self.session.prepare(query)

    def execute_prepared(self, prepared, values, consistency_level=ConsistencyLevel.ONE):
        bound = prepared.bind(values)
        bound.consistency_level = consistency_level
        return self.session.execute(bound)

    def close(self):
        """Shut down the cluster connection"""
        self.cluster.shutdown()
        logger.info("Connection closed")
