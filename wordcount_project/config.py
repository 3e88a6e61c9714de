# config.py - Cassandra connection + word count schema configuration

import os
from dataclasses import dataclass

# Cassandra settings
CASSANDRA_HOST = os.getenv("CASSANDRA_HOST")
CASSANDRA_PORT = os.getenv("CASSANDRA_PORT")
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 9042

# Schema names read by the word count job
KEYSPACE = os.getenv("WORDCOUNT_KEYSPACE", "cql3_worldcount")
INPUT_TABLE = os.getenv("WORDCOUNT_INPUT_TABLE", "inputs")
OUTPUT_TABLE = os.getenv("WORDCOUNT_OUTPUT_TABLE", "output_words")

# Schema propagation
PROPAGATION_DELAY_PER_NODE = 1.0  # seconds
SCHEMA_AGREEMENT_TIMEOUT = 10.0

# Seed key space, upper bounds exclusive
USER_RANGE = (1, 444)
CATEGORY_RANGE = (1, 5)
SUB_CATEGORY_RANGE = (1, 4)

# Logging
LOG_LEVEL = os.getenv("WORDCOUNT_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class SchemaNames:
    keyspace: str = KEYSPACE
    input_table: str = INPUT_TABLE
    output_table: str = OUTPUT_TABLE
