"""Application settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


def _default_config_dir() -> Path:
    return Path.home() / ".config" / "ttrak"


class Settings(BaseSettings):
    """Application settings."""

    config_dir: Path = Field(
        default_factory=_default_config_dir,
        description="Directory holding config.yml and data.json",
    )

    verbose: int = Field(
        default=0,
        description="Verbosity level (0=off, 1=INFO, 2+=DEBUG)",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional path to write logs to file",
    )

    model_config = {
        "env_prefix": "TTRAK_",
    }

    @property
    def data_path(self) -> Path:
        """Path to the task collection."""
        return self.config_dir / "data.json"

    @property
    def config_path(self) -> Path:
        """Path to the configuration file."""
        return self.config_dir / "config.yml"
