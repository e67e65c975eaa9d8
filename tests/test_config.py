"""
Tests for the configuration loader.
"""
import pytest
from decimal import Decimal
from pathlib import Path

from crewcost.config import CrewCostConfig, get_config, reload_config, ConfigurationError


class TestCrewCostConfig:
    """Tests for CrewCostConfig class."""

    def test_load_default_config(self):
        config = get_config()
        assert config.version == "1.0.0"
        assert config.database_url.startswith("sqlite")

    def test_auth_settings(self):
        config = get_config()
        assert config.session_cookie_name == "crewcost_session"
        assert config.min_password_length == 6
        assert config.session_max_age > 0

    def test_money_settings(self):
        config = get_config()
        assert config.default_currency == "USD"
        assert config.get_currency_symbol("USD") == "$"
        assert config.get_currency_symbol("usd") == "$"
        assert config.get_currency_symbol("CHF") is None

    def test_percentage_tolerance_is_decimal(self):
        tolerance = get_config().percentage_tolerance
        assert isinstance(tolerance, Decimal)
        assert tolerance == Decimal("0.01")

    def test_report_defaults(self):
        config = get_config()
        assert config.daily_window == 7
        assert config.top_categories == 5

    def test_receipt_settings(self):
        config = get_config()
        assert config.receipt_public_prefix == "/receipts"
        assert "image/png" in config.receipt_content_types
        assert config.receipt_max_bytes == 10 * 1024 * 1024

    def test_mapping_access(self):
        config = get_config()
        assert "money" in config
        assert config["reports"]["daily_window"] == 7
        assert config.get("missing", "fallback") == "fallback"

    def test_singleton(self):
        assert get_config() is get_config()

    def test_reload_returns_new_instance(self):
        first = get_config()
        second = reload_config()
        assert first is not second
        assert second.version == first.version


class TestConfigFiles:

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            CrewCostConfig(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("money: [unclosed\n")
        with pytest.raises(ConfigurationError):
            CrewCostConfig(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError):
            CrewCostConfig(path)

    def test_defaults_for_missing_sections(self, tmp_path):
        path = tmp_path / "minimal.yaml"
        path.write_text("version: '2.0'\n")
        config = CrewCostConfig(path)
        assert config.version == "2.0"
        assert config.percentage_tolerance == Decimal("0.01")
        assert config.daily_window == 7
        assert config.default_currency == "USD"

    def test_env_var_selects_file(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("version: 'from-env'\n")
        monkeypatch.setenv("CREWCOST_CONFIG", str(path))
        assert CrewCostConfig().version == "from-env"

    def test_explicit_path_wins_over_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CREWCOST_CONFIG", str(tmp_path / "ignored.yaml"))
        default = Path(__file__).parent.parent / "crewcost_config.yaml"
        assert CrewCostConfig(default).version == "1.0.0"
