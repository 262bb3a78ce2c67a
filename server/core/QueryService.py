from services.query_transcoder.QueryTranscoder import query_from_text, query_to_text
from shared.clients.store.StoreClientInterface import StoreClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.query import StructuredQuery
from shared.models.saved_query import SavedQuery, SavedQueryListItem


class QueryService:
    """Transcodes filter builder queries and manages saved query documents."""

    def __init__(
        self,
        helper_config: HelperConfig,
        store_client: StoreClientInterface,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._store_client = store_client

    ##########################################
    ############## TRANSCODE #################
    ##########################################

    def generate(self, query: StructuredQuery) -> str:
        """Render a structured query as query document text.

        Args:
            query (StructuredQuery): The filter builder selection.

        Returns:
            str: Marker line followed by the YAML document.
        """
        attributes = [query_filter.attribute for query_filter in query.filters]
        if len(set(attributes)) != len(attributes):
            self.logging.warning(
                "QueryService.generate: duplicate attributes in query for model '%s'; later filters win.",
                query.model,
            )
        self.logging.debug(
            "QueryService.generate: function='%s', model='%s', filters=%d",
            query.function, query.model, len(query.filters),
        )
        return query_to_text(query)

    def parse(self, query_string: str) -> StructuredQuery:
        """Load query document text back into a structured query.

        Raises:
            QueryDocumentError: If the text is not a query document.
        """
        query = query_from_text(query_string)
        self.logging.debug(
            "QueryService.parse: function='%s', model='%s', filters=%d",
            query.function, query.model, len(query.filters),
        )
        return query

    ##########################################
    ############ SAVED QUERIES ###############
    ##########################################

    def list_saved(self) -> list[SavedQueryListItem]:
        return self._store_client.do_list_queries()

    def get_saved(self, query_id: int) -> SavedQuery:
        return self._store_client.do_get_query(query_id)

    def create_saved(self, name: str, query_string: str) -> int:
        query_id = self._store_client.do_create_query(name, query_string)
        self.logging.info("Saved query '%s' created with id %d.", name, query_id)
        return query_id

    def update_saved(self, query_id: int, name: str, query_string: str) -> None:
        self._store_client.do_update_query(query_id, name, query_string)
        self.logging.info("Saved query %d updated.", query_id)

    def delete_saved(self, query_id: int) -> None:
        self._store_client.do_delete_query(query_id)
        self.logging.info("Saved query %d deleted.", query_id)
