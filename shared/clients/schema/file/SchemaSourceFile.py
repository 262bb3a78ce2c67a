import asyncio
from pathlib import Path

from shared.clients.schema.SchemaSourceInterface import SchemaSourceError, SchemaSourceInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig


class SchemaSourceFile(SchemaSourceInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._path = Path(self.get_config_val("PATH", default="../example/DBSchemaFile.cdm", val_type="string"))
        self._encoding = self.get_config_val("ENCODING", default="utf-8", val_type="string")

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "File"

    def get_location(self) -> str:
        return str(self._path)

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="PATH", val_type="string", default="../example/DBSchemaFile.cdm"),
            EnvConfig(env_key="ENCODING", val_type="string", default="utf-8"),
        ]

    ##########################################
    ############## LIFECYCLE #################
    ##########################################

    async def boot(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def do_healthcheck(self) -> bool:
        return self._path.is_file()

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_fetch_schema(self) -> str:
        try:
            return await asyncio.to_thread(self._path.read_text, encoding=self._encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise SchemaSourceError(f"Failed to read schema file '{self._path}': {exc}") from exc
