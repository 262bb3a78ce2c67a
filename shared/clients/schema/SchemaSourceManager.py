from shared.helper.HelperConfig import HelperConfig
from shared.clients.schema.SchemaSourceInterface import SchemaSourceInterface


class SchemaSourceManager:
    """Manager class to instantiate the configured schema source."""

    def __init__(self, helper_config: HelperConfig):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self.client = self._initialize_client()

    def _get_engine_from_env(self) -> str:
        """Read the schema source engine from env configuration ("file" or "http", default "file")."""
        engine = self.helper_config.get_string_val("SCHEMA_ENGINE", default="file")
        return engine.strip().lower().capitalize()

    def _initialize_client(self) -> SchemaSourceInterface:
        """Instantiate the schema source for the configured engine.

        Raises:
            ValueError: If the engine is unsupported or cannot be imported.
        """
        engine = self._get_engine_from_env()
        class_name = f"SchemaSource{engine}"
        try:
            module = __import__(
                f"shared.clients.schema.{engine.lower()}.{class_name}",
                fromlist=[class_name],
            )
            client_class = getattr(module, class_name)
        except (ImportError, AttributeError) as e:
            raise ValueError("Unsupported schema engine '%s'. Error: %s" % (engine, e))
        client = client_class(helper_config=self.helper_config)
        self.logging.debug("Instantiated schema source for engine: %s", engine)
        return client

    def get_client(self) -> SchemaSourceInterface:
        """Return the instantiated schema source."""
        return self.client
