"""Configuration management for the Technician Rate Calculator."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


logger = logging.getLogger(__name__)


class PolicyConfig(BaseModel):
    """Statutory rates and analysis constants used by the engine."""

    payroll_tax_rate: float = Field(
        default=0.0765,
        ge=0.0,
        le=1.0,
        description="Employer payroll tax (FICA) as a fraction of wage",
    )
    unemployment_insurance: Dict[str, float] = Field(
        default_factory=lambda: {"WI": 430.0, "IL": 507.93},
        description="Annual unemployment insurance per technician by jurisdiction",
    )
    fallback_jurisdiction: str = Field(
        default="IL",
        description="Jurisdiction whose constant applies when the configured one is unknown",
    )
    target_margin_percent: float = Field(
        default=20.0,
        ge=0.0,
        lt=100.0,
        description="Margin used for the suggested billing rate",
    )
    healthy_margin_percent: float = Field(
        default=20.0,
        description="Margins at or above this are reported as healthy",
    )
    utilization_offsets: List[float] = Field(
        default=[-10.0, -5.0, 0.0, 5.0, 10.0],
        description="Percentage-point shifts for the utilization sensitivity table",
    )
    headcount_candidates: List[int] = Field(
        default=[1, 2, 3, 4, 5, 20, 100],
        description="Technician counts for the scalability table",
    )

    @field_validator("unemployment_insurance")
    @classmethod
    def upper_case_jurisdictions(cls, v: Dict[str, float]) -> Dict[str, float]:
        """Jurisdiction codes are matched case-insensitively."""
        return {key.strip().upper(): amount for key, amount in v.items()}

    @field_validator("fallback_jurisdiction")
    @classmethod
    def upper_case_fallback(cls, v: str) -> str:
        """Jurisdiction codes are matched case-insensitively."""
        return v.strip().upper()

    @field_validator("headcount_candidates")
    @classmethod
    def validate_headcounts(cls, v: List[int]) -> List[int]:
        """Headcounts must be positive and ascending."""
        if any(count < 1 for count in v):
            raise ValueError("Headcount candidates must be at least 1")
        if v != sorted(v):
            raise ValueError("Headcount candidates must be in ascending order")
        return v

    def unemployment_for(self, jurisdiction: str) -> float:
        """Look up the unemployment insurance constant for a jurisdiction."""
        code = (jurisdiction or "").strip().upper()
        if code in self.unemployment_insurance:
            return self.unemployment_insurance[code]

        logger.warning(
            f"No unemployment insurance constant for jurisdiction {jurisdiction!r}, "
            f"using {self.fallback_jurisdiction}"
        )
        return self.unemployment_insurance.get(self.fallback_jurisdiction, 0.0)


class LoggingConfig(BaseModel):
    """Logging configuration settings."""

    level: str = Field(
        default="INFO",
        description="Logging level",
    )
    file: Optional[str] = Field(
        default=None,
        description="Log file path",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    console_output: bool = Field(
        default=True,
        description="Enable console output",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Level must be one of {valid_levels}")
        return v.upper()


class ReportConfig(BaseModel):
    """Report rendering settings."""

    currency: str = Field(
        default="USD",
        description="Currency label for reports",
    )
    company_name: str = Field(
        default="",
        description="Optional company name for report headers",
    )


class Config(BaseModel):
    """Main configuration model."""

    policy: PolicyConfig = Field(default_factory=PolicyConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)


def load_config(config_path: Path) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Dictionary containing configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.debug(f"Loading configuration from {config_path}")

    with open(config_path, "r") as f:
        config_data = yaml.safe_load(f) or {}

    config = Config(**config_data)

    return config.model_dump()


def save_config(config_data: Dict[str, Any], config_path: Path) -> None:
    """Save configuration to YAML file.

    Args:
        config_data: Configuration dictionary
        config_path: Path to save configuration file
    """
    config = Config(**config_data)

    config_path.parent.mkdir(parents=True, exist_ok=True)

    logger.debug(f"Saving configuration to {config_path}")

    with open(config_path, "w") as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)

    logger.info(f"Configuration saved to {config_path}")


def load_policy_config(config_path: Optional[Path] = None) -> PolicyConfig:
    """Load the policy section from YAML.

    Searches an explicit path, then ``config/policy.yaml`` relative to the
    working directory and the repository root. Falls back to the built-in
    defaults when nothing is found or a file fails to validate.

    Args:
        config_path: Optional explicit path to a policy YAML file

    Returns:
        PolicyConfig populated from the first usable file (or defaults)
    """
    search_paths = []
    if config_path:
        search_paths.append(config_path)

    search_paths.append(Path("config/policy.yaml"))
    _pkg_root = Path(__file__).parent.parent.parent
    search_paths.append(_pkg_root / "config" / "policy.yaml")

    for path in search_paths:
        if path.exists():
            logger.debug(f"Loading policy config from {path}")
            try:
                with open(path, "r") as f:
                    data = yaml.safe_load(f) or {}
                return PolicyConfig(**data.get("policy", data))
            except Exception as exc:
                logger.warning(f"Failed to load policy config from {path}: {exc}")

    logger.warning("No policy.yaml found; using built-in policy defaults")
    return PolicyConfig()
