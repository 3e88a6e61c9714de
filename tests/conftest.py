import pytest
from cassandra import AlreadyExists, InvalidRequest

from config import SchemaNames


class FakeClient:
    """In-memory stand-in for ClusterClient that records every call."""

    def __init__(self, keyspaces=(), tables=(), ring_size=1, agreement=True):
        self.keyspaces = set(keyspaces)
        self.tables = set(tables)
        self.indexes = set()
        self._ring_size = ring_size
        self.agreement = agreement
        self.calls = []
        self.rows = {}
        self.errors = {}
        self.fail_insert_at = None
        self.insert_error = None
        self.lookup_error = None
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def keyspace_exists(self, name):
        self.calls.append(("describe_keyspace", name))
        if self.lookup_error is not None:
            raise self.lookup_error
        return name in self.keyspaces

    def table_exists(self, keyspace, table):
        return f"{keyspace}.{table}" in self.tables

    def ring_size(self, keyspace):
        self.calls.append(("describe_ring", keyspace))
        return self._ring_size

    def wait_for_schema_agreement(self, timeout):
        self.calls.append(("schema_agreement", timeout))
        return self.agreement

    def set_keyspace(self, name):
        self.calls.append(("set_keyspace", name))

    def execute(self, query, consistency_level=None):
        self.calls.append(("execute", query))
        for prefix, error in self.errors.items():
            if query.startswith(prefix):
                raise error

        words = query.split()
        if query.startswith("CREATE KEYSPACE"):
            if words[2] in self.keyspaces:
                raise AlreadyExists(keyspace=words[2])
            self.keyspaces.add(words[2])
        elif query.startswith("CREATE TABLE"):
            keyspace, table = words[2].split(".")
            if words[2] in self.tables:
                raise AlreadyExists(keyspace=keyspace, table=table)
            self.tables.add(words[2])
        elif query.startswith("CREATE INDEX"):
            if words[2] in self.indexes:
                raise InvalidRequest(f"Index {words[2]} already exists")
            self.indexes.add(words[2])

    def prepare(self, query):
        self.calls.append(("prepare", query))
        return query

    def execute_prepared(self, prepared, values, consistency_level=None):
        self.calls.append(("execute_prepared", tuple(values)))
        if self.fail_insert_at is not None and self.count("execute_prepared") == self.fail_insert_at:
            raise self.insert_error
        self.rows[tuple(values[:3])] = tuple(values[3:])

    def close(self):
        self.closed = True

    def count(self, op):
        return sum(1 for call in self.calls if call[0] == op)

    def executed(self, prefix=""):
        return [q for op, q in self.calls if op == "execute" and q.startswith(prefix)]


@pytest.fixture
def names():
    return SchemaNames("test_wordcount", "inputs", "output_words")


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def make_client():
    return FakeClient
