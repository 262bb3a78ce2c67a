from abc import abstractmethod

from shared.clients.ClientInterface import ClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.catalog import ModelWithAttributes
from shared.models.saved_query import SavedQuery, SavedQueryListItem


class SavedQueryNotFoundError(LookupError):
    """Raised when a saved query id does not exist."""


class SavedQueryConflictError(ValueError):
    """Raised when a saved query name is already taken."""


class StoreClientInterface(ClientInterface):
    """Persistence for the model/attribute catalog and for saved query documents.

    Upserts are atomic per row. Data operations are synchronous; callers on the
    event loop hand them to a worker thread.
    """

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        return "store"

    ##########################################
    ############### CATALOG ##################
    ##########################################

    @abstractmethod
    def do_upsert_model(self, model_id: str, name: str) -> None:
        """Insert a model or replace the name of an existing one.

        Args:
            model_id (str): Opaque model identifier from the schema file.
            name (str): Derived display name.
        """
        pass

    @abstractmethod
    def do_upsert_attribute(self, attribute_id: str, model_id: str, name: str, original_key: str) -> None:
        """Insert an attribute or replace an existing one with the same id.

        Args:
            attribute_id (str): Opaque attribute identifier from the schema file.
            model_id (str): Identifier of the owning model.
            name (str): Derived display name.
            original_key (str): The dotted path the name was derived from.
        """
        pass

    @abstractmethod
    def do_list_models_with_attributes(self) -> list[ModelWithAttributes]:
        """Return every model that owns at least one attribute, with its attribute names.

        Returns:
            list[ModelWithAttributes]: Sorted by model name, attributes sorted by name.
        """
        pass

    ##########################################
    ############ SAVED QUERIES ###############
    ##########################################

    @abstractmethod
    def do_list_queries(self) -> list[SavedQueryListItem]:
        """Return id and name of every saved query, sorted by name."""
        pass

    @abstractmethod
    def do_get_query(self, query_id: int) -> SavedQuery:
        """Return one saved query.

        Raises:
            SavedQueryNotFoundError: If no query has this id.
        """
        pass

    @abstractmethod
    def do_create_query(self, name: str, query_string: str) -> int:
        """Store a new query document and return its id.

        Raises:
            SavedQueryConflictError: If the name is already in use.
        """
        pass

    @abstractmethod
    def do_update_query(self, query_id: int, name: str, query_string: str) -> None:
        """Replace name and document of an existing query and refresh updated_at.

        Raises:
            SavedQueryNotFoundError: If no query has this id.
            SavedQueryConflictError: If the new name belongs to another query.
        """
        pass

    @abstractmethod
    def do_delete_query(self, query_id: int) -> None:
        """Delete a saved query.

        Raises:
            SavedQueryNotFoundError: If no query has this id.
        """
        pass
