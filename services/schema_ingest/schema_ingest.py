"""Schema ingest entry point.

Loads the configured schema document once and upserts the derived catalog,
without starting the API server.

Usage:
    python -m services.schema_ingest.schema_ingest
"""

import asyncio
import sys

from services.schema_ingest.SchemaIngestor import SchemaDocumentError, SchemaIngestor
from shared.clients.schema.SchemaSourceInterface import SchemaSourceError
from shared.clients.schema.SchemaSourceManager import SchemaSourceManager
from shared.clients.store.StoreClientManager import StoreClientManager
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging


async def main() -> int:
    """Run one ingestion pass. Returns the process exit code."""
    logger = setup_logging()
    config = HelperConfig(logger=logger)
    store_client = StoreClientManager(helper_config=config).get_client()
    schema_source = SchemaSourceManager(helper_config=config).get_client()

    try:
        await store_client.boot()
        if not await store_client.do_healthcheck():
            logger.error("Store '%s' is not usable. Aborting.", store_client.get_engine_name())
            return 1
        await schema_source.boot()

        logger.info("Loading schema from %s...", schema_source.get_location())
        try:
            text = await schema_source.do_fetch_schema()
            result = SchemaIngestor(helper_config=config, store_client=store_client).ingest_text(text)
        except (SchemaSourceError, SchemaDocumentError) as e:
            logger.error("Schema ingest failed: %s", e)
            return 1
        logger.info("Processed %d attributes.", result.attributes, color="green")
        return 0
    finally:
        await schema_source.close()
        await store_client.close()


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
