"""
Tests for YAML-driven ledger settings (ledger_config).

Covers:
- The shipped default file matches DEFAULT_SETTINGS
- LEDGER_CONFIG_TRACE emitted on load
- Checksums identify the loaded content
- Unknown keys, bad types and out-of-range values rejected
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

import pytest
import yaml

from ledger_config import DEFAULT_CONFIG_PATH, DEFAULT_SETTINGS, get_active_config
from ledger_config.loader import (
    ConfigValidationError,
    compute_checksum,
    load_yaml_file,
    parse_settings,
)


def _write(tmp_path, data):
    path = tmp_path / "settings.yaml"
    path.write_text(yaml.safe_dump(data))
    return path


class TestDefaultSettings:
    def test_default_file_exists(self):
        assert DEFAULT_CONFIG_PATH.exists()

    def test_default_file_matches_code_defaults(self):
        settings = get_active_config()
        assert replace(settings, checksum="") == DEFAULT_SETTINGS

    def test_checksum_identifies_file(self):
        settings = get_active_config()
        assert settings.checksum == compute_checksum(load_yaml_file(DEFAULT_CONFIG_PATH))
        assert len(settings.checksum) == 64

    def test_config_trace_logged(self, captured_logs):
        settings = get_active_config()

        traces = [r for r in captured_logs() if r["message"] == "LEDGER_CONFIG_TRACE"]
        assert traces[0]["checksum"] == settings.checksum
        assert traces[0]["config_path"] == str(DEFAULT_CONFIG_PATH)

    def test_as_dict(self):
        data = DEFAULT_SETTINGS.as_dict()
        assert data["low_stock_ratio"] == "1.5"
        assert data["allow_overpayment"] is True


class TestOverrides:
    def test_partial_file_keeps_other_defaults(self, tmp_path):
        path = _write(tmp_path, {"payments": {"allow_overpayment": False}})

        settings = get_active_config(path)

        assert settings.allow_overpayment is False
        assert settings.currency_suffix == "DA"

    def test_decimal_ratio_parsed(self):
        settings = parse_settings({"stock": {"low_stock_ratio": 2.5}})
        assert settings.low_stock_ratio == Decimal("2.5")

    def test_empty_mapping_is_defaults(self):
        assert replace(parse_settings({}), checksum="") == DEFAULT_SETTINGS

    def test_different_content_different_checksum(self):
        first = parse_settings({"reporting": {"top_n": 3}})
        second = parse_settings({"reporting": {"top_n": 4}})
        assert first.checksum != second.checksum


class TestValidation:
    @pytest.mark.parametrize(
        "data, fragment",
        [
            ({"colors": {}}, "unknown section"),
            ({"ledger": {"currency": "DZD"}}, "unknown key ledger.currency"),
            ({"ledger": "DZD"}, "must be a mapping"),
            ({"payments": {"allow_overpayment": "yes"}}, "allow_overpayment"),
            ({"ledger": {"currency_code": "DINAR"}}, "3-letter"),
            ({"ledger": {"currency_suffix": "  "}}, "currency_suffix"),
            ({"ledger": {"money_places": 3}}, "unknown key ledger.money_places"),
            ({"stock": {"low_stock_ratio": "0.5"}}, "low_stock_ratio"),
            ({"stock": {"low_stock_ratio": "abc"}}, "not a number"),
            ({"reporting": {"top_n": 0}}, "top_n"),
        ],
    )
    def test_rejected(self, data, fragment):
        with pytest.raises(ConfigValidationError) as exc_info:
            parse_settings(data, source="test.yaml")

        assert exc_info.value.source == "test.yaml"
        assert any(fragment in e for e in exc_info.value.errors)
        assert exc_info.value.code == "CONFIG_VALIDATION_ERROR"

    def test_is_value_error(self):
        assert issubclass(ConfigValidationError, ValueError)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "absent.yaml")
