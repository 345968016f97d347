"""Tests for configuration loading."""

import dataclasses

import pytest
from pydantic import ValidationError

from config import Settings, load_settings
from web_app.server import ServerConfig, split_address


class TestSettings:
    """Test settings sources."""

    def test_defaults(self):
        settings = load_settings()

        assert settings.storage.path == "./"
        assert settings.storage.backend == "sqlite"
        assert settings.server.address == ":8080"
        assert settings.server.timeout.write == 15
        assert settings.server.timeout.read == 15
        assert settings.server.timeout.idle == 60
        assert settings.server.cooldown == 5
        assert settings.hasher.name == "md5"
        assert settings.validate_urls is False

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("YAUS_SERVER__ADDRESS", "127.0.0.1:9000")
        monkeypatch.setenv("YAUS_SERVER__TIMEOUT__IDLE", "30")
        monkeypatch.setenv("YAUS_STORAGE__PATH", "/var/lib/yaus")
        monkeypatch.setenv("YAUS_LOG_LEVEL", "DEBUG")

        settings = load_settings()

        assert settings.server.address == "127.0.0.1:9000"
        assert settings.server.timeout.idle == 30
        assert settings.server.timeout.write == 15
        assert settings.storage.path == "/var/lib/yaus"
        assert settings.log_level == "DEBUG"

    def test_yaml_file(self, monkeypatch, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "storage:\n"
            "  path: /data\n"
            "server:\n"
            "  address: ':9090'\n"
            "  timeout:\n"
            "    write: 3\n"
            "hasher:\n"
            "  name: base62\n"
            "  length: 8\n"
        )
        monkeypatch.setenv("YAUS_CONFIG_FILE", str(config_file))

        settings = load_settings()

        assert settings.storage.path == "/data"
        assert settings.server.address == ":9090"
        assert settings.server.timeout.write == 3
        assert settings.server.timeout.read == 15
        assert settings.hasher.name == "base62"
        assert settings.hasher.length == 8

    def test_environment_overrides_yaml(self, monkeypatch, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("server:\n  address: ':9090'\n")
        monkeypatch.setenv("YAUS_CONFIG_FILE", str(config_file))
        monkeypatch.setenv("YAUS_SERVER__ADDRESS", ":7070")

        assert load_settings().server.address == ":7070"

    def test_invalid_timeout(self):
        with pytest.raises(ValidationError):
            Settings(server={"timeout": {"read": 0}})

    def test_server_config(self):
        settings = Settings(server={"address": "localhost:1234", "cooldown": 2})

        config = settings.server_config()

        assert config == ServerConfig(
            address="localhost:1234",
            write_timeout=15,
            read_timeout=15,
            idle_timeout=60,
            cooldown=2,
        )


class TestServerConfig:
    """Test the immutable server configuration."""

    def test_immutable(self):
        config = ServerConfig()

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.address = ":9999"

    def test_host_and_port(self):
        config = ServerConfig(address="127.0.0.1:8081")

        assert config.host == "127.0.0.1"
        assert config.port == 8081

    def test_rejects_bad_values(self):
        with pytest.raises(ValueError):
            ServerConfig(address="localhost")
        with pytest.raises(ValueError):
            ServerConfig(cooldown=0)
        with pytest.raises(ValueError):
            ServerConfig(read_timeout=-1)


class TestSplitAddress:
    """Test listen address parsing."""

    @pytest.mark.parametrize(
        "address,expected",
        [
            (":8080", ("0.0.0.0", 8080)),
            ("localhost:80", ("localhost", 80)),
            ("[::1]:8080", ("::1", 8080)),
            ("127.0.0.1:0", ("127.0.0.1", 0)),
        ],
    )
    def test_valid(self, address, expected):
        assert split_address(address) == expected

    @pytest.mark.parametrize("address", ["8080", "host:http", ":70000", ""])
    def test_invalid(self, address):
        with pytest.raises(ValueError):
            split_address(address)
