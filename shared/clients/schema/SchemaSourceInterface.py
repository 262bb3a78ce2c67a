from abc import abstractmethod

from shared.clients.ClientInterface import ClientInterface
from shared.helper.HelperConfig import HelperConfig


class SchemaSourceError(Exception):
    """Raised when the schema document cannot be read from its source."""


class SchemaSourceInterface(ClientInterface):
    """Delivers the raw text of the schema definition file."""

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        return "schema"

    @abstractmethod
    def get_location(self) -> str:
        """Returns a human-readable location of the schema (path or URL) for log messages."""
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    @abstractmethod
    async def do_fetch_schema(self) -> str:
        """Read the complete schema document.

        Returns:
            str: The undecoded schema text.

        Raises:
            SchemaSourceError: If the source cannot be read.
        """
        pass
