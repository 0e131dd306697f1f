"""Configuration management for igrequest."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from igrequest import constants


@dataclass
class Config:
    """Configuration for the signed request client and CLI.

    The signing constants themselves live in :mod:`igrequest.constants`;
    this class only covers how requests are carried (transport, files,
    retries).
    """

    # Endpoint
    api_url: str = constants.API_URL

    # Files
    state_file: Optional[str] = None  # Defaults to ~/.igrequest/state.json
    cookie_file: Optional[str] = None  # Netscape format, seeds the session jar
    header_file: Optional[str] = None  # "Name: value" lines, per-call overrides

    # HTTP settings
    timeout: float = 30.0  # seconds
    proxy: Optional[str] = None
    verify_ssl: bool = True

    # Retry settings (using tenacity, applied by callers, never by send())
    max_retries: int = 1  # Total attempts; 1 means no retry
    retry_wait_min: float = 1.0  # Minimum wait between retries (seconds)
    retry_wait_max: float = 10.0  # Maximum wait between retries (seconds)
    retry_multiplier: float = 2.0  # Exponential backoff multiplier

    def __post_init__(self):
        """Validate configuration and fill environment defaults."""
        if self.timeout <= 0:
            raise ValueError(f"Invalid timeout: {self.timeout}")

        if self.max_retries < 1:
            raise ValueError(f"Invalid max_retries: {self.max_retries} (must be at least 1)")

        if self.retry_wait_min > self.retry_wait_max:
            raise ValueError(
                f"Invalid retry wait range: {self.retry_wait_min} > {self.retry_wait_max}"
            )

        # Setup proxy from environment if not specified
        if not self.proxy:
            self.proxy = os.environ.get('HTTPS_PROXY') or os.environ.get('HTTP_PROXY')

    def get_state_path(self) -> Path:
        """Path of the session state file, falling back to the default."""
        if self.state_file:
            return Path(self.state_file)
        return self.default_state_file()

    @classmethod
    def get_home_dir(cls) -> Path:
        """Get the igrequest home directory (~/.igrequest)."""
        home = Path.home() / ".igrequest"
        home.mkdir(parents=True, exist_ok=True)
        return home

    @classmethod
    def default_state_file(cls) -> Path:
        """Get the default session state file (~/.igrequest/state.json)."""
        return cls.get_home_dir() / "state.json"
