import httpx

from shared.clients.schema.SchemaSourceInterface import SchemaSourceError, SchemaSourceInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig


class SchemaSourceHttp(SchemaSourceInterface):
    """Downloads the schema document from a URL, e.g. an artifact store."""

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._url = self.get_config_val("URL", default=None, val_type="string")
        self._api_key = self.get_config_val("API_KEY", default="", val_type="string")
        self._client: httpx.AsyncClient | None = None

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Http"

    def get_location(self) -> str:
        return self._url

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="URL", val_type="string", default=None),
            EnvConfig(env_key="API_KEY", val_type="string", default=""),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        if self._api_key:
            return {"Authorization": f"Bearer {self._api_key}"}
        return {}

    ##########################################
    ############## LIFECYCLE #################
    ##########################################

    async def boot(self) -> None:
        self._client = httpx.AsyncClient(timeout=self.timeout)

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def do_healthcheck(self) -> bool:
        try:
            response = await self.do_request(method="HEAD")
        except httpx.HTTPError as exc:
            self.logging.warning("Schema URL '%s' is not reachable: %s", self._url, exc)
            return False
        return response.is_success

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_request(self, method: str = "GET") -> httpx.Response:
        """Send a request to the schema URL with the auth header applied.

        Raises:
            RuntimeError: If boot() has not been called.
        """
        if self._client is None:
            raise RuntimeError("HTTP client not initialised. Call boot() before making requests.")
        return await self._client.request(method, self._url, headers=self._get_auth_header())

    async def do_fetch_schema(self) -> str:
        try:
            response = await self.do_request(method="GET")
        except httpx.HTTPError as exc:
            raise SchemaSourceError(f"Failed to download schema from '{self._url}': {exc}") from exc
        if not response.is_success:
            self.logging.error(
                "Schema download from %s failed with status %d: %s",
                self._url,
                response.status_code,
                response.text,
            )
            raise SchemaSourceError(f"Schema download from '{self._url}' failed with status {response.status_code}")
        return response.text
