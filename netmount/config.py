from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_config_file() -> Path:
    return Path.home() / ".config" / "netmount" / "netmount.conf"


class Settings(BaseSettings):
    # Input files
    config_file: Path = Field(default_factory=_default_config_file)
    mount_info_file: Path = Path("/proc/self/mountinfo")

    # Timing
    probe_timeout_ms: int = Field(default=150, gt=0)  # TCP probe before each mount
    mount_timeout_seconds: float = Field(default=120.0, ge=0)  # 0 = wait forever

    # Output
    verbose: bool = False  # Show raw diagnostics instead of generic messages
    color: bool = True

    # Logging (stderr, never mixed into the report)
    log_level: str = "WARNING"
    log_file_path: Optional[str] = None
    log_retention_days: int = 7

    model_config = SettingsConfigDict(
        env_prefix="NETMOUNT_", env_file="settings.env", extra="ignore"
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level

    @property
    def probe_timeout_seconds(self) -> float:
        return self.probe_timeout_ms / 1000.0

    @property
    def mount_timeout(self) -> Optional[float]:
        """Mount timeout in seconds, or None when mounts may run unbounded."""
        if self.mount_timeout_seconds <= 0:
            return None
        return self.mount_timeout_seconds

    @property
    def log_directory(self) -> Optional[Path]:
        if not self.log_file_path:
            return None
        return Path(self.log_file_path).parent
