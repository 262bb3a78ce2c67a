import asyncio

from services.schema_ingest.SchemaIngestor import SchemaIngestor
from shared.clients.schema.SchemaSourceInterface import SchemaSourceInterface
from shared.clients.store.StoreClientInterface import StoreClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.catalog import IngestResult, ModelWithAttributes


class SchemaService:
    """Loads the schema document into the catalog and serves the catalog to the UI."""

    def __init__(
        self,
        helper_config: HelperConfig,
        store_client: StoreClientInterface,
        schema_source: SchemaSourceInterface,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._schema_source = schema_source
        self._ingestor = SchemaIngestor(helper_config=helper_config, store_client=store_client)

    async def load_schema(self) -> IngestResult:
        """Fetch the schema document and ingest it.

        Returns:
            IngestResult: Counts of stored models and attributes.

        Raises:
            SchemaSourceError: If the document cannot be read.
            SchemaDocumentError: If the document is not a schema.
        """
        self.logging.info("Loading schema from %s...", self._schema_source.get_location())
        text = await self._schema_source.do_fetch_schema()
        # the store is synchronous
        return await asyncio.to_thread(self._ingestor.ingest_text, text)

    def list_models(self) -> list[ModelWithAttributes]:
        return self._ingestor.list_catalog()
