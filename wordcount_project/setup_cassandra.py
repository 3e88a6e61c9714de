import logging
import time

from cassandra import AlreadyExists, DriverException
from cassandra.cluster import NoHostAvailable

import config
from config import SchemaNames
from database import PropagationInterrupted

logger = logging.getLogger(__name__)

CREATED = "created"
EXISTS = "exists"
FAILED = "failed"

CREATE_KEYSPACE = (
    "CREATE KEYSPACE {keyspace} WITH replication = "
    "{{'class': 'SimpleStrategy', 'replication_factor' : 1}}"
)
CREATE_INPUT_TABLE = (
    "CREATE TABLE {keyspace}.{table} (user_id text, category_id text, "
    "sub_category_id text, title text, body text, "
    "PRIMARY KEY (user_id, category_id, sub_category_id))"
)
CREATE_TITLE_INDEX = "CREATE INDEX title on {table}(title)"
CREATE_OUTPUT_TABLE = (
    "CREATE TABLE {keyspace}.{table} (row_id text, word text, count_num text, "
    "PRIMARY KEY (row_id, word))"
)


def await_propagation(client, keyspace, sleep=time.sleep):
    """
    Block while a new keyspace spreads through the ring.

    Waits PROPAGATION_DELAY_PER_NODE for every node in the ring; this is a
    fixed backoff, not a check that the nodes actually agree.
    """
    ring_size = client.ring_size(keyspace)
    delay = config.PROPAGATION_DELAY_PER_NODE * ring_size
    logger.info("Waiting %.1fs for %s to reach %d node(s)", delay, keyspace, ring_size)

    try:
        sleep(delay)
    except KeyboardInterrupt as e:
        raise PropagationInterrupted(
            f"Interrupted while waiting for {keyspace} to propagate"
        ) from e


def await_schema_agreement(client, keyspace, sleep=time.sleep,
                           timeout=config.SCHEMA_AGREEMENT_TIMEOUT):
    """
    Ask the driver to wait until every node reports the same schema version.

    Falls back to the fixed per-node wait when agreement is not reached
    within the timeout.
    """
    try:
        agreed = client.wait_for_schema_agreement(timeout)
    except KeyboardInterrupt as e:
        raise PropagationInterrupted(
            f"Interrupted while waiting for {keyspace} to propagate"
        ) from e

    if agreed:
        logger.info("Schema agreement reached for %s", keyspace)
        return

    logger.warning("No schema agreement after %.1fs, falling back to fixed wait", timeout)
    await_propagation(client, keyspace, sleep=sleep)


def _already_exists(error):
    # Cassandra reports an existing index as a plain invalid request
    return isinstance(error, AlreadyExists) or "already exist" in str(error).lower()


def _create(client, label, query):
    """Run one DDL statement, absorbing failures so the next one still runs"""
    logger.info("Setting up %s", label)
    try:
        client.execute(query)
    except (DriverException, NoHostAvailable) as e:
        if _already_exists(e):
            logger.warning("%s already exists, skipping: %s", label, e)
            return EXISTS
        logger.error("Failed to create %s", label, exc_info=True)
        return FAILED

    logger.info("Created %s", label)
    return CREATED


def setup_keyspace(client, names, waiter=await_propagation):
    if client.keyspace_exists(names.keyspace):
        logger.info("Keyspace %s already exists", names.keyspace)
        return EXISTS

    logger.info("Setting up keyspace %s", names.keyspace)
    try:
        client.execute(CREATE_KEYSPACE.format(keyspace=names.keyspace))
    except AlreadyExists:
        # created by someone else between the lookup and the create
        logger.warning("Keyspace %s appeared before it could be created", names.keyspace)
        return EXISTS

    waiter(client, names.keyspace)
    return CREATED


def setup_tables(client, names):
    return {
        "input table": _create(
            client,
            f"table {names.keyspace}.{names.input_table}",
            CREATE_INPUT_TABLE.format(keyspace=names.keyspace, table=names.input_table),
        ),
        "title index": _create(
            client,
            f"index title on {names.input_table}",
            CREATE_TITLE_INDEX.format(table=names.input_table),
        ),
        "output table": _create(
            client,
            f"table {names.keyspace}.{names.output_table}",
            CREATE_OUTPUT_TABLE.format(keyspace=names.keyspace, table=names.output_table),
        ),
    }


def ensure_schema(client, names=None, waiter=await_propagation):
    """
    Make sure the keyspace, both tables and the title index exist.

    Safe to run again against a fully or partially initialized cluster:
    existing objects are reported as "exists" and other table/index
    failures as "failed" without stopping the run. Keyspace lookup
    failures propagate.

    Returns a dict mapping each schema object to created/exists/failed.
    """
    names = names or SchemaNames()

    outcome = {"keyspace": setup_keyspace(client, names, waiter)}
    client.set_keyspace(names.keyspace)
    outcome.update(setup_tables(client, names))
    return outcome


def check_schema(client, names=None):
    """Report which of the keyspace and tables are present"""
    names = names or SchemaNames()
    return {
        names.keyspace: client.keyspace_exists(names.keyspace),
        names.input_table: client.table_exists(names.keyspace, names.input_table),
        names.output_table: client.table_exists(names.keyspace, names.output_table),
    }
