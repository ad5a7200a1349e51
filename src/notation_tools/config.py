"""
Persisted user configuration for notation.

The user config lives at ~/.config/notation/config.json. Only a handful of
top-level keys are understood; unknown keys produce a warning and are ignored.

The file is read at most once per process through a ConfigLoader, which
caches either the loaded Config or the ConfigError raised while loading.
"""

import json
import logging
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock
from typing import Any, Callable, cast

from notation_tools.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"

# User-level config location
USER_CONFIG_DIR = Path.home() / ".config" / "notation"
USER_CONFIG_PATH = USER_CONFIG_DIR / CONFIG_FILENAME

# JSON key -> Config attribute
KNOWN_KEYS = {
    "insecureRegistries": "insecure_registries",
    "credentialsStore": "credentials_store",
    "credentialHelpers": "credential_helpers",
    "signatureFormat": "signature_format",
}


@dataclass
class Config:
    """Settings loaded from the user config file."""

    insecure_registries: list[str] = field(default_factory=list)
    credentials_store: str = ""
    credential_helpers: dict[str, str] = field(default_factory=dict)
    signature_format: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: str = "<memory>") -> "Config":
        """
        Build a Config from decoded JSON.

        Args:
            data: Decoded top-level JSON object
            source: Where the data came from (used in warnings and errors)

        Returns:
            Config populated from the known keys

        Raises:
            ConfigError: If a known key holds a value of the wrong type
        """
        for key in data:
            if key not in KNOWN_KEYS:
                warnings.warn(f"Unknown config key '{key}' in {source}", stacklevel=3)

        config = cls()

        if "insecureRegistries" in data:
            registries = data["insecureRegistries"]
            if registries is None:
                registries = []
            if not isinstance(registries, list) or not all(
                isinstance(r, str) for r in registries
            ):
                raise _type_error("insecureRegistries", "a list of strings", source)
            config.insecure_registries = list(registries)

        if "credentialsStore" in data:
            store = data["credentialsStore"]
            if store is None:
                store = ""
            if not isinstance(store, str):
                raise _type_error("credentialsStore", "a string", source)
            config.credentials_store = store

        if "credentialHelpers" in data:
            helpers = data["credentialHelpers"]
            if helpers is None:
                helpers = {}
            if not isinstance(helpers, dict) or not all(
                isinstance(v, str) for v in helpers.values()
            ):
                raise _type_error("credentialHelpers", "an object of strings", source)
            config.credential_helpers = dict(helpers)

        if "signatureFormat" in data:
            signature_format = data["signatureFormat"]
            if signature_format is None:
                signature_format = ""
            if not isinstance(signature_format, str):
                raise _type_error("signatureFormat", "a string", source)
            config.signature_format = signature_format

        return config


def _type_error(key: str, expected: str, source: str) -> ConfigError:
    return ConfigError(
        f"Config key '{key}' must be {expected}",
        context={"file": source},
    )


def load_config(path: Path | None = None) -> Config:
    """
    Load the user configuration file.

    A missing file is not an error: an empty Config is returned.

    Args:
        path: Config file to read (default: USER_CONFIG_PATH)

    Returns:
        Loaded configuration

    Raises:
        ConfigError: If the file cannot be read or is not a valid config document
    """
    if path is None:
        path = USER_CONFIG_PATH

    try:
        with open(path, "rb") as f:
            raw = f.read()
    except FileNotFoundError:
        logger.debug("No config file at %s, using empty config", path)
        return Config()
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
        raise ConfigError(
            f"Invalid JSON in {path}: {e}",
            suggestions=["Fix the syntax error or remove the file"],
        ) from e

    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file {path} must contain a JSON object",
            context={"got": type(data).__name__},
        )

    return Config.from_dict(data, str(path))


class ConfigLoader:
    """
    Load configuration at most once.

    The first call to load_once() runs the load function; its result or its
    failure is cached and handed back on every later call without touching
    the underlying store again. Any exception from the load function is
    cached as a ConfigError.
    """

    def __init__(self, load: Callable[[], Config] | None = None):
        self._load = load or load_config
        self._lock = Lock()
        self._loaded = False
        self._result: Config | ConfigError | None = None

    @property
    def loaded(self) -> bool:
        """True once the underlying load has run."""
        return self._loaded

    def load_once(self) -> Config:
        """
        Return the cached configuration, loading it on first use.

        Raises:
            ConfigError: The cached error from the first load, if it failed
        """
        if not self._loaded:
            with self._lock:
                if not self._loaded:
                    try:
                        self._result = self._load()
                    except ConfigError as e:
                        self._result = e
                    except Exception as e:
                        error = ConfigError(f"Failed to load configuration: {e}")
                        error.__cause__ = e
                        self._result = error
                    self._loaded = True

        if isinstance(self._result, ConfigError):
            raise self._result
        return cast(Config, self._result)


# Process-wide loader
_config_loader = ConfigLoader()


def get_config_loader() -> ConfigLoader:
    """Return the process-wide config loader."""
    return _config_loader


def load_config_once() -> Config:
    """Load the user configuration through the process-wide loader."""
    return _config_loader.load_once()


def clear_config_cache() -> None:
    """
    Forget the cached configuration.

    Useful for testing or after the config file has been rewritten.
    """
    global _config_loader
    _config_loader = ConfigLoader()
