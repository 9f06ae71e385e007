"""Credential configuration for the courier clients."""
from __future__ import annotations

import logging
import os
from typing import Any, Iterable, Mapping

import voluptuous as vol

from .const import CONF_KEYS, ENV_MAPPING
from .exceptions import ConfigError

_LOGGER = logging.getLogger(__name__)

CONFIG_SCHEMA = vol.Schema(
    {vol.Optional(key): vol.Any(None, str) for key in CONF_KEYS},
    extra=vol.ALLOW_EXTRA,
)


def _validate(config: Mapping[str, Any]) -> dict:
    try:
        return CONFIG_SCHEMA(dict(config))
    except vol.Invalid as err:
        raise ConfigError(f"Invalid configuration: {err}") from err


class ConfigManager:
    """Holds the six provider credentials.

    Values are resolved in order: defaults (all None), environment
    variables, then the explicit mapping passed in. Later sources win.
    """

    def __init__(
        self,
        config: Mapping[str, Any] | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self._config = {key: None for key in CONF_KEYS}
        self._load_from_environment(os.environ if environ is None else environ)
        if config is not None:
            self.set_config(config)

    def _load_from_environment(self, environ: Mapping[str, str]) -> None:
        for key, env_key in ENV_MAPPING.items():
            value = environ.get(env_key)
            if value:
                self._config[key] = value
                _LOGGER.debug("Loaded %s from environment", env_key)

    def set_config(self, config: Mapping[str, Any]) -> None:
        self._config.update(_validate(config))

    def get(self, key: str, default: Any = None) -> Any:
        value = self._config.get(key)
        return default if value is None else value

    def get_all(self) -> dict:
        return dict(self._config)

    def has(self, key: str) -> bool:
        return self._config.get(key) is not None

    def validate_required(self, keys: Iterable[str]) -> None:
        """Raise ConfigError listing every key in keys that is empty."""
        missing = [key for key in keys if not self.get(key)]
        if missing:
            raise ConfigError(
                f"Missing required configuration: {', '.join(missing)}"
            )
