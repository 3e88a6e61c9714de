import logging

from cassandra import ConsistencyLevel, DriverException
from cassandra.cluster import NoHostAvailable

import config
from config import SchemaNames
from corpus import BODIES, TITLES
from database import InsertError

logger = logging.getLogger(__name__)

INSERT_INPUT = (
    "INSERT INTO {table} (user_id, category_id, sub_category_id, title, body) "
    "values (?, ?, ?, ?, ?)"
)


def seed_rows():
    """
    Yield every input row as (user_id, category_id, sub_category_id, title, body).

    Category is the outer loop, then user, then sub category. Rows that
    share a category share its title and body.
    """
    for category in range(*config.CATEGORY_RANGE):
        for user in range(*config.USER_RANGE):
            for sub_category in range(*config.SUB_CATEGORY_RANGE):
                yield (
                    str(user),
                    str(category),
                    str(sub_category),
                    TITLES[category],
                    BODIES[category],
                )


def expected_row_count():
    return (
        len(range(*config.USER_RANGE))
        * len(range(*config.CATEGORY_RANGE))
        * len(range(*config.SUB_CATEGORY_RANGE))
    )


class SeedLoader:
    def __init__(self, client, names=None):
        self.client = client
        self.names = names or SchemaNames()

    def seed_data(self):
        """
        Insert the sample corpus into the input table.

        One prepared statement, one execution per row at consistency ONE.
        The first failed insert stops the run and is raised as InsertError.
        """
        query = INSERT_INPUT.format(table=self.names.input_table)
        prepared = self.client.prepare(query)

        total = expected_row_count()
        logger.info("Inserting %d rows into %s", total, self.names.input_table)

        inserted = 0
        category = None
        for row in seed_rows():
            if row[1] != category:
                category = row[1]
                logger.info("  category %s (%d/%d rows so far)", category, inserted, total)

            try:
                self.client.execute_prepared(prepared, row, ConsistencyLevel.ONE)
            except (DriverException, NoHostAvailable) as e:
                raise InsertError(
                    f"Insert failed for key {row[:3]} after {inserted} rows: {e}",
                    key=row[:3],
                    inserted=inserted,
                ) from e
            inserted += 1

        logger.info("Inserted %d rows into %s", inserted, self.names.input_table)
        return inserted
