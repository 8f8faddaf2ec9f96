"""Configuration and logging setup."""
import os
import sys
from pathlib import Path
from typing import Optional
import yaml
from loguru import logger
from pydantic import BaseModel


def get_home_dir() -> Path:
    """Get the directory holding devnet state and config."""
    return Path(os.getenv(
        "BLOCK_STAKING_HOME",
        os.path.join(os.path.expanduser("~"), ".block-staking")
    ))


class StakingConfig(BaseModel):
    """Command line configuration."""
    home: Path
    log_level: str = "INFO"
    state_file: str = "devnet.json"

    @property
    def state_path(self) -> Path:
        return self.home / self.state_file

    @classmethod
    def load(cls, home: Optional[Path] = None) -> "StakingConfig":
        """Build config from defaults, the environment and ``config.yaml``.

        Values in ``<home>/config.yaml`` win over environment defaults.
        """
        home = Path(home) if home else get_home_dir()
        data = {
            "home": home,
            "log_level": os.getenv("BLOCK_STAKING_LOG_LEVEL", "INFO"),
        }
        config_path = home / "config.yaml"
        if config_path.exists():
            with open(config_path) as f:
                overrides = yaml.safe_load(f) or {}
            if not isinstance(overrides, dict):
                raise ValueError(f"{config_path} must contain a mapping")
            data.update(overrides)
        return cls(**data)


def configure_logging(level: str = "INFO") -> None:
    """Send loguru output to stderr at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format="<level>{level: <8}</level> | {message}")
