"""Tests for perch.config — AppConfig defaults and immutability."""

from dataclasses import FrozenInstanceError, replace

import pytest

from perch.config import AppConfig


class TestAppConfig:
    def test_defaults(self) -> None:
        config = AppConfig()
        assert config.host == "127.0.0.1"
        assert config.port == 8000
        assert config.debug is False
        assert config.workers == 0
        assert config.template_dir == "templates"
        assert config.max_content_length == 16 * 1024 * 1024
        assert config.log_level == "info"
        assert config.log_format == "text"
        assert config.access_log is False

    def test_custom(self) -> None:
        config = AppConfig(host="0.0.0.0", port=80, debug=True)
        assert (config.host, config.port, config.debug) == ("0.0.0.0", 80, True)

    def test_frozen(self) -> None:
        config = AppConfig()
        with pytest.raises(FrozenInstanceError):
            config.port = 9000  # type: ignore[misc]

    def test_replace(self) -> None:
        config = replace(AppConfig(), access_log=True)
        assert config.access_log is True
