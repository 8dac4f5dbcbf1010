from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

REQUIRED_FIELDS = (
    "api_host",
    "consumer_key",
    "consumer_secret",
    "account_id",
    "token_key",
    "token_secret",
)

# camelCase keys from older config files
_LEGACY_KEYS = {
    "netsuiteApiHost": "api_host",
    "consumerKey": "consumer_key",
    "consumerSecret": "consumer_secret",
    "netsuiteAccountId": "account_id",
    "netsuiteTokenKey": "token_key",
    "netsuiteTokenSecret": "token_secret",
    "netsuiteQueryLimit": "query_limit",
    "useTLS": "use_tls",
}


class Credentials(BaseSettings):
    """
    Connection and token-based auth settings for one NetSuite account.

    Every field can be supplied from the environment with the NETSUITE_
    prefix (NETSUITE_API_HOST, NETSUITE_TOKEN_KEY, ...). Construction never
    fails on missing values; call require_complete() before using them.
    """

    model_config = SettingsConfigDict(env_prefix="NETSUITE_", extra="ignore")

    api_host: str = ""
    consumer_key: str = ""
    consumer_secret: str = ""
    account_id: str = ""
    token_key: str = ""
    token_secret: str = ""
    query_limit: int = 10
    use_tls: bool = True
    timeout: Optional[float] = None

    @property
    def scheme(self) -> str:
        return "https" if self.use_tls else "http"

    def missing_fields(self) -> list:
        return [name for name in REQUIRED_FIELDS if not getattr(self, name)]

    def require_complete(self) -> "Credentials":
        missing = self.missing_fields()
        if missing:
            raise ConfigurationError(
                f"NetSuite REST API missing one or more keys: {','.join(missing)}"
            )
        return self

    @classmethod
    def from_env(cls) -> "Credentials":
        return cls()

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "Credentials":
        data = {}
        for key, value in values.items():
            if key == "testEnv":
                data["use_tls"] = not value
                continue
            if value is None:
                continue
            data[_LEGACY_KEYS.get(key, key)] = value
        try:
            return _MappingCredentials(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid NetSuite credentials: {e}") from e


class _MappingCredentials(Credentials):
    """Credentials taken only from explicit values; the environment is never read."""

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        return (init_settings,)


def resolve_credentials(config: Union[Credentials, Mapping[str, Any]]) -> Credentials:
    """Accepts Credentials or a plain mapping and returns validated Credentials."""
    if isinstance(config, Credentials):
        creds = config
    elif isinstance(config, Mapping):
        creds = Credentials.from_mapping(config)
    else:
        raise ConfigurationError(f"Unsupported credentials type: {type(config).__name__}")
    return creds.require_complete()
