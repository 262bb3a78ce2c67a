from pydantic import BaseModel


class EnvConfig(BaseModel):
    """
    One configuration value a client needs from the environment.

    Attributes:
        env_key (str): The raw key, without the "{CLIENT_TYPE}_{ENGINE}_" prefix (e.g. "PATH").
        val_type (str): One of "string", "number", "bool" and "list".
        default (str | int | float | bool | list | None): Fallback value. None marks the value as required.
    """

    env_key: str
    val_type: str
    default: str | int | float | bool | list | None = None
