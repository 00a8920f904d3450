"""Tests for configuration management."""

from pathlib import Path

import pytest
import yaml

from tech_rate_calculator.config import (
    Config,
    LoggingConfig,
    PolicyConfig,
    ReportConfig,
    load_config,
    load_policy_config,
    save_config,
)

EXAMPLE_CONFIG = Path(__file__).parent.parent / "config" / "config.example.yaml"


def test_policy_config_defaults():
    """Test PolicyConfig default values."""
    policy = PolicyConfig()
    assert policy.payroll_tax_rate == 0.0765
    assert policy.unemployment_insurance == {"WI": 430.0, "IL": 507.93}
    assert policy.fallback_jurisdiction == "IL"
    assert policy.target_margin_percent == 20.0
    assert policy.healthy_margin_percent == 20.0
    assert policy.utilization_offsets == [-10.0, -5.0, 0.0, 5.0, 10.0]
    assert policy.headcount_candidates == [1, 2, 3, 4, 5, 20, 100]


def test_logging_config_defaults():
    """Test LoggingConfig default values."""
    config = LoggingConfig()
    assert config.level == "INFO"
    assert config.file is None
    assert config.console_output is True


def test_report_config_defaults():
    """Test ReportConfig default values."""
    config = ReportConfig()
    assert config.currency == "USD"
    assert config.company_name == ""


def test_config_validation():
    """Test configuration validation."""
    config = Config()
    assert config.policy.payroll_tax_rate == 0.0765
    assert config.logging.level == "INFO"
    assert config.report.currency == "USD"


def test_invalid_log_level():
    """Test invalid log level raises ValueError."""
    with pytest.raises(ValueError):
        LoggingConfig(level="LOUD")


def test_log_level_case_insensitive():
    """Test log level is normalized to upper case."""
    assert LoggingConfig(level="debug").level == "DEBUG"


def test_invalid_payroll_tax_rate():
    """Test payroll tax rate must be a fraction."""
    with pytest.raises(ValueError):
        PolicyConfig(payroll_tax_rate=7.65)


def test_invalid_target_margin():
    """Test a 100% target margin is rejected."""
    with pytest.raises(ValueError):
        PolicyConfig(target_margin_percent=100)


def test_headcount_candidates_validation():
    """Test headcounts must be positive and ascending."""
    with pytest.raises(ValueError):
        PolicyConfig(headcount_candidates=[0, 1, 2])
    with pytest.raises(ValueError):
        PolicyConfig(headcount_candidates=[5, 2, 1])


def test_unemployment_lookup():
    """Test jurisdiction lookup with fallback."""
    policy = PolicyConfig(unemployment_insurance={"wi": 430.0, "IL": 507.93})
    assert policy.unemployment_for("WI") == 430.0
    assert policy.unemployment_for(" il ") == 507.93
    assert policy.unemployment_for("TX") == 507.93
    assert policy.unemployment_for("") == 507.93


def test_load_config_missing_file(tmp_path):
    """Test loading a missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_load_example_config():
    """Test the shipped example config loads."""
    data = load_config(EXAMPLE_CONFIG)
    assert data["policy"]["unemployment_insurance"]["WI"] == 430.0
    assert data["logging"]["level"] == "INFO"
    assert data["report"]["currency"] == "USD"


def test_load_empty_config(tmp_path):
    """Test an empty file yields defaults."""
    path = tmp_path / "empty.yaml"
    path.write_text("")
    data = load_config(path)
    assert data["policy"]["payroll_tax_rate"] == 0.0765


def test_save_and_load_config(tmp_path):
    """Test saving and reloading configuration."""
    path = tmp_path / "sub" / "config.yaml"
    save_config({"policy": {"payroll_tax_rate": 0.08}, "report": {"company_name": "Acme HVAC"}}, path)
    assert path.exists()
    data = load_config(path)
    assert data["policy"]["payroll_tax_rate"] == 0.08
    assert data["report"]["company_name"] == "Acme HVAC"


def test_load_policy_config_explicit_path(tmp_path):
    """Test policy loading from an explicit nested file."""
    path = tmp_path / "policy.yaml"
    path.write_text(yaml.dump({"policy": {"target_margin_percent": 30.0}}))
    assert load_policy_config(path).target_margin_percent == 30.0


def test_load_policy_config_flat_file(tmp_path):
    """Test policy loading from a flat file."""
    path = tmp_path / "policy.yaml"
    path.write_text(yaml.dump({"healthy_margin_percent": 25.0}))
    assert load_policy_config(path).healthy_margin_percent == 25.0


def test_load_policy_config_invalid_falls_back(tmp_path, monkeypatch):
    """Test an invalid policy file falls back to defaults."""
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "policy.yaml"
    path.write_text(yaml.dump({"payroll_tax_rate": 5}))
    assert load_policy_config(path).payroll_tax_rate == 0.0765
