import argparse
import logging
import sys

from cassandra import DriverException
from cassandra.cluster import NoHostAvailable

import config
from config import SchemaNames
from database import ClusterClient, ClusterConnectionError, WordCountSetupError
from seed import SeedLoader
from setup_cassandra import await_propagation, await_schema_agreement, check_schema, ensure_schema

logger = logging.getLogger("wordcount_setup")

WAITERS = {
    "fixed": await_propagation,
    "agreement": await_schema_agreement,
}


def print_banner():
    print("\n" + "=" * 60)
    print("  Word Count Setup")
    print("=" * 60 + "\n")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Create the word count keyspace and tables, then load sample rows."
    )
    parser.add_argument("--host", default=config.CASSANDRA_HOST,
                        help=f"Cassandra node to connect to (default {config.DEFAULT_HOST})")
    parser.add_argument("--port", type=int, default=config.CASSANDRA_PORT,
                        help=f"native protocol port (default {config.DEFAULT_PORT})")
    parser.add_argument("--keyspace", default=config.KEYSPACE)
    parser.add_argument("--input-table", default=config.INPUT_TABLE)
    parser.add_argument("--output-table", default=config.OUTPUT_TABLE)
    parser.add_argument("--wait-mode", choices=sorted(WAITERS), default="fixed",
                        help="how to wait for a new keyspace to reach every node")

    group = parser.add_mutually_exclusive_group()
    group.add_argument("--schema-only", action="store_true",
                       help="create the schema but do not insert sample rows")
    group.add_argument("--check", action="store_true",
                       help="only report whether the keyspace and tables exist")

    parser.add_argument("--log-level", type=str.upper, default=config.LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def resolve_address(args):
    if args.host is None or args.port is None:
        logger.warning("Cassandra host or port is not defined, using default")
    host = args.host or config.DEFAULT_HOST
    port = int(args.port) if args.port is not None else config.DEFAULT_PORT
    return host, port


def run_check(client, names):
    present = check_schema(client, names)
    for name, found in present.items():
        print(f"  {'✓' if found else '✗'} {name}")
    return 0 if all(present.values()) else 1


def run_setup(client, names, waiter, schema_only=False):
    print("--- Setting Up Schema ---")
    outcome = ensure_schema(client, names, waiter=waiter)
    for obj, state in outcome.items():
        print(f"  {obj}: {state}")

    if schema_only:
        print("\n✓ Schema ready (seeding skipped)")
        return 0

    print("\n--- Loading Sample Data ---")
    inserted = SeedLoader(client, names).seed_data()
    print(f"\n✓ Setup complete! {inserted} rows in {names.keyspace}.{names.input_table}")
    return 0


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(format=config.LOG_FORMAT, level=args.log_level)

    print_banner()

    names = SchemaNames(args.keyspace, args.input_table, args.output_table)
    host, port = resolve_address(args)

    try:
        client = ClusterClient(host, port)
    except ClusterConnectionError as e:
        print(f"Error connecting to Cassandra: {e}")
        print("\nMake sure Cassandra is running!")
        sys.exit(1)

    try:
        with client:
            if args.check:
                status = run_check(client, names)
            else:
                status = run_setup(client, names, WAITERS[args.wait_mode], args.schema_only)
    except (WordCountSetupError, DriverException, NoHostAvailable):
        logger.exception("Word count setup failed")
        sys.exit(1)

    sys.exit(status)


if __name__ == "__main__":
    main()
