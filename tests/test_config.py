"""Tests for persisted user configuration."""

import json
import threading

import pytest

from notation_tools.config import (
    Config,
    ConfigLoader,
    clear_config_cache,
    get_config_loader,
    load_config,
    load_config_once,
)
from notation_tools.exceptions import ConfigError


class TestConfigDataclass:
    """Test configuration dataclass defaults."""

    def test_config_defaults(self):
        """Config starts out empty."""
        config = Config()
        assert config.insecure_registries == []
        assert config.credentials_store == ""
        assert config.credential_helpers == {}
        assert config.signature_format == ""

    def test_from_dict(self):
        """Known JSON keys map onto the dataclass fields."""
        config = Config.from_dict(
            {
                "insecureRegistries": ["localhost:5000"],
                "credentialsStore": "desktop",
                "credentialHelpers": {"registry.example": "pass"},
                "signatureFormat": "cose",
            }
        )
        assert config.insecure_registries == ["localhost:5000"]
        assert config.credentials_store == "desktop"
        assert config.credential_helpers == {"registry.example": "pass"}
        assert config.signature_format == "cose"

    def test_from_dict_null_collections(self):
        """JSON null for list/object keys is treated as empty."""
        config = Config.from_dict({"insecureRegistries": None, "credentialHelpers": None})
        assert config.insecure_registries == []
        assert config.credential_helpers == {}

    def test_from_dict_null_strings(self):
        """JSON null for string keys is treated as empty."""
        config = Config.from_dict({"credentialsStore": None, "signatureFormat": None})
        assert config.credentials_store == ""
        assert config.signature_format == ""

    def test_null_does_not_hide_other_keys(self):
        """A null key next to a set one keeps the set value."""
        config = Config.from_dict({"credentialsStore": None, "signatureFormat": "cose"})
        assert config.signature_format == "cose"

    def test_unknown_key_warns(self):
        """Unknown keys are ignored with a warning."""
        with pytest.warns(UserWarning, match="Unknown config key 'colour'"):
            config = Config.from_dict({"colour": "blue", "signatureFormat": "jws"})
        assert config.signature_format == "jws"

    @pytest.mark.parametrize(
        "data",
        [
            {"signatureFormat": 1},
            {"credentialsStore": ["a"]},
            {"insecureRegistries": "localhost:5000"},
            {"insecureRegistries": [1, 2]},
            {"credentialHelpers": {"registry": 3}},
        ],
    )
    def test_wrong_types_rejected(self, data):
        """Known keys holding the wrong type raise ConfigError."""
        with pytest.raises(ConfigError):
            Config.from_dict(data)


class TestLoadConfig:
    """Test reading the config file."""

    def test_missing_file_gives_empty_config(self, tmp_path):
        """A missing file is not an error."""
        config = load_config(tmp_path / "absent.json")
        assert config == Config()

    def test_reads_file(self, tmp_path):
        """Values are read from the given file."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"signatureFormat": "cose"}))
        assert load_config(path).signature_format == "cose"

    def test_default_path(self, write_user_config):
        """Without a path the user config location is used."""
        write_user_config({"signatureFormat": "cose"})
        assert load_config().signature_format == "cose"

    def test_invalid_json(self, tmp_path):
        """Malformed JSON raises ConfigError."""
        path = tmp_path / "config.json"
        path.write_text("{\"signatureFormat\": ")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(path)

    def test_deeply_nested_json(self, tmp_path):
        """JSON nested beyond the decoder limit raises ConfigError."""
        path = tmp_path / "config.json"
        path.write_text("[" * 200_000)
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(path)

    def test_invalid_encoding(self, tmp_path):
        """Bytes that are not text raise ConfigError."""
        path = tmp_path / "config.json"
        path.write_bytes(b"\x80\x81\x82")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_not_an_object(self, tmp_path):
        """A top-level JSON array is rejected."""
        path = tmp_path / "config.json"
        path.write_text("[]")
        with pytest.raises(ConfigError, match="JSON object"):
            load_config(path)

    def test_unreadable_path(self, tmp_path):
        """A path that cannot be read as a file raises ConfigError."""
        with pytest.raises(ConfigError, match="Cannot read config file"):
            load_config(tmp_path)


class TestConfigLoader:
    """Test once-per-process loading."""

    def test_loads_once(self):
        """The load function runs on first use only."""
        calls = []

        def load():
            calls.append(1)
            return Config(signature_format="cose")

        loader = ConfigLoader(load)
        assert not loader.loaded

        first = loader.load_once()
        second = loader.load_once()

        assert loader.loaded
        assert first is second
        assert len(calls) == 1

    def test_caches_error(self):
        """A failed load re-raises the same error without retrying."""
        calls = []

        def load():
            calls.append(1)
            raise ConfigError("broken")

        loader = ConfigLoader(load)
        with pytest.raises(ConfigError) as first:
            loader.load_once()
        with pytest.raises(ConfigError) as second:
            loader.load_once()

        assert first.value is second.value
        assert len(calls) == 1
        assert loader.loaded

    def test_wraps_other_exceptions(self):
        """Failures other than ConfigError are cached as a chained ConfigError."""
        calls = []

        def load():
            calls.append(1)
            raise OSError("device not ready")

        loader = ConfigLoader(load)
        with pytest.raises(ConfigError, match="device not ready") as first:
            loader.load_once()
        with pytest.raises(ConfigError) as second:
            loader.load_once()

        assert isinstance(first.value.__cause__, OSError)
        assert first.value is second.value
        assert len(calls) == 1
        assert loader.loaded

    def test_concurrent_first_access(self):
        """Threads racing on first access still trigger a single load."""
        calls = []
        barrier = threading.Barrier(8)

        def load():
            calls.append(1)
            return Config()

        loader = ConfigLoader(load)
        results = []

        def worker():
            barrier.wait()
            results.append(loader.load_once())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(calls) == 1
        assert len(results) == 8
        assert all(r is results[0] for r in results)

    def test_default_load_reads_user_config(self, write_user_config):
        """The default load function reads the user config file."""
        write_user_config({"signatureFormat": "cose"})
        assert ConfigLoader().load_once().signature_format == "cose"


class TestProcessLoader:
    """Test the process-wide loader."""

    def test_load_config_once_caches(self, write_user_config):
        """Later file changes are not seen until the cache is cleared."""
        write_user_config({"signatureFormat": "cose"})
        assert load_config_once().signature_format == "cose"

        write_user_config({"signatureFormat": "jws"})
        assert load_config_once().signature_format == "cose"

    def test_clear_config_cache(self, write_user_config):
        """Clearing the cache makes the next load read the file again."""
        write_user_config({"signatureFormat": "cose"})
        assert load_config_once().signature_format == "cose"

        write_user_config({"signatureFormat": "jws"})
        clear_config_cache()
        assert load_config_once().signature_format == "jws"

    def test_get_config_loader_is_stable(self):
        """The same loader is returned until the cache is cleared."""
        loader = get_config_loader()
        assert get_config_loader() is loader
        clear_config_cache()
        assert get_config_loader() is not loader
