"""Configuration management for loan-wizard."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loan_wizard.exceptions import ConfigurationError

DEFAULT_STORAGE_SLOT = "vehicleloan_applications"


@dataclass
class CollaboratorConfig:
    """Decisioning agent endpoint configuration."""

    base_url: str = "http://localhost:8000"
    calculator_agent_id: str = "69a03c4946d462ee9ae7050a"
    processor_agent_id: str = "69a03c49c5e9762927678a57"
    api_key: str | None = None
    timeout_seconds: float = 120.0

    @property
    def endpoint(self) -> str:
        """Get the agent invocation URL."""
        return f"{self.base_url.rstrip('/')}/agent/invoke"

    def headers(self) -> dict[str, str]:
        """Build request headers for the agent endpoint."""
        headers = {"accept": "application/json"}
        if self.api_key:
            headers["x-api-key"] = self.api_key
        return headers


@dataclass
class StorageConfig:
    """Local persistence configuration."""

    path: Path = field(default_factory=lambda: Path("applications.json"))
    slot: str = DEFAULT_STORAGE_SLOT


@dataclass
class LoanWizardConfig:
    """Main configuration for loan-wizard."""

    collaborators: CollaboratorConfig = field(default_factory=CollaboratorConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    log_level: str = "INFO"
    log_format: str = "standard"
    show_sample_data: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Return a printable view of the configuration (API key masked)."""
        return {
            "collaborators": {
                "endpoint": self.collaborators.endpoint,
                "calculator_agent_id": self.collaborators.calculator_agent_id,
                "processor_agent_id": self.collaborators.processor_agent_id,
                "api_key": "***" if self.collaborators.api_key else None,
                "timeout_seconds": self.collaborators.timeout_seconds,
            },
            "storage": {
                "path": str(self.storage.path),
                "slot": self.storage.slot,
            },
            "log_level": self.log_level,
            "log_format": self.log_format,
            "show_sample_data": self.show_sample_data,
        }

    @classmethod
    def from_env(cls) -> "LoanWizardConfig":
        """Create config from environment variables."""
        import os

        timeout_str = os.getenv("LOAN_AGENT_TIMEOUT", "120")
        try:
            timeout = float(timeout_str)
        except ValueError as exc:
            raise ConfigurationError(f"LOAN_AGENT_TIMEOUT must be a number, got {timeout_str!r}") from exc
        if timeout <= 0:
            raise ConfigurationError(f"LOAN_AGENT_TIMEOUT must be positive, got {timeout}")

        defaults = CollaboratorConfig()
        collaborators = CollaboratorConfig(
            base_url=os.getenv("LOAN_AGENT_BASE_URL", defaults.base_url),
            calculator_agent_id=os.getenv("LOAN_CALC_AGENT_ID", defaults.calculator_agent_id),
            processor_agent_id=os.getenv("LOAN_SUBMIT_AGENT_ID", defaults.processor_agent_id),
            api_key=os.getenv("LOAN_AGENT_API_KEY") or None,
            timeout_seconds=timeout,
        )

        storage = StorageConfig(
            path=Path(os.getenv("LOAN_STORAGE_PATH", "applications.json")),
            slot=os.getenv("LOAN_STORAGE_SLOT", DEFAULT_STORAGE_SLOT),
        )

        return cls(
            collaborators=collaborators,
            storage=storage,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
            show_sample_data=os.getenv("SHOW_SAMPLE_DATA", "false").lower() == "true",
        )
