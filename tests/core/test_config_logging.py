"""Tests for Settings validation and the JSON log formatter."""
import json
import logging
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from storefront.core.config import Settings, settings
from storefront.core.logging import JsonFormatter, configure_logging


class TestSettings:
    def test_public_base_url_strips_trailing_slash(self):
        assert Settings(base_url="https://shop.example/").public_base_url == "https://shop.example"

    def test_public_base_url_defaults_to_localhost_port(self):
        assert Settings(base_url="", port=8080).public_base_url == "http://localhost:8080"

    @pytest.mark.parametrize("ttl", [0, -5])
    def test_ttl_must_be_positive(self, ttl):
        with pytest.raises(ValidationError):
            Settings(download_token_ttl_min=ttl)

    def test_currency_normalized(self):
        assert Settings(currency=" inr ").currency == "INR"

    def test_cors_origins_list(self):
        assert Settings(cors_origins="http://a, ,http://b").cors_origins_list == ["http://a", "http://b"]


class TestJsonFormatter:
    def _record(self, **extra) -> logging.LogRecord:
        record = logging.LogRecord("storefront.test", logging.INFO, __file__, 1, "order_created", None, None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_whitelisted_extra_fields(self):
        payload = json.loads(JsonFormatter().format(self._record(order_id="order_1", amount=19900, secret="x")))
        assert payload["message"] == "order_created"
        assert payload["level"] == "INFO"
        assert payload["order_id"] == "order_1"
        assert payload["amount"] == 19900
        assert "secret" not in payload

    def test_exception_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            import sys

            record = self._record()
            record.exc_info = sys.exc_info()
        payload = json.loads(JsonFormatter().format(record))
        assert "RuntimeError: boom" in payload["exception"]

    def test_base_url_has_its_own_field(self):
        payload = json.loads(JsonFormatter().format(self._record(base_url="http://shop.test")))
        assert payload["base_url"] == "http://shop.test"
        assert "path" not in payload


class TestConfigureLogging:
    def setup_method(self):
        root = logging.getLogger()
        self._saved = (root.level, list(root.handlers))

    def teardown_method(self):
        root = logging.getLogger()
        root.setLevel(self._saved[0])
        root.handlers = self._saved[1]

    def test_level_from_settings(self):
        with patch.object(settings, "log_level", "warning"), patch.object(settings, "log_file", None):
            configure_logging()
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_unknown_level_falls_back_to_info(self):
        with patch.object(settings, "log_level", "chatty"), patch.object(settings, "log_file", None):
            configure_logging()
        assert logging.getLogger().level == logging.INFO
