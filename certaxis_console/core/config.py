"""
Console configuration

Module: core.config
Date: 2026-10-17
Version: 0.1.0-alpha

Defaults come from core.constants; every field can be overridden by an
environment variable (see ConsoleConfig.from_env).
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .constants import (
    DEFAULT_API_BASE_URL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_DATA_DIR,
    DEFAULT_SESSION_CHECK_INTERVAL,
    ENV_API_BASE_URL,
    ENV_API_TIMEOUT,
    ENV_DATA_DIR,
    ENV_SESSION_CHECK_INTERVAL,
    LOGIN_PATH,
    SESSION_FILE_NAME,
)


@dataclass
class ConsoleConfig:
    """CertAxis console configuration"""
    api_base_url: str = DEFAULT_API_BASE_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    data_dir: str = DEFAULT_DATA_DIR
    session_check_interval: float = DEFAULT_SESSION_CHECK_INTERVAL
    login_path: str = LOGIN_PATH
    clock_skew: float = 0.0

    def __post_init__(self):
        self.api_base_url = self.api_base_url.rstrip("/")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        if self.session_check_interval <= 0:
            raise ValueError("session_check_interval must be positive")
        if self.clock_skew < 0:
            raise ValueError("clock_skew cannot be negative")

    @property
    def session_file(self) -> Path:
        """Path of the persisted session document"""
        return Path(self.data_dir) / SESSION_FILE_NAME

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ConsoleConfig":
        """
        Build configuration from environment variables

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            ConsoleConfig with overrides applied

        Raises:
            ValueError: If a numeric override cannot be parsed
        """
        env = os.environ if environ is None else environ
        config = cls(
            api_base_url=env.get(ENV_API_BASE_URL) or DEFAULT_API_BASE_URL,
            request_timeout=_float_env(env, ENV_API_TIMEOUT, DEFAULT_REQUEST_TIMEOUT),
            data_dir=env.get(ENV_DATA_DIR) or DEFAULT_DATA_DIR,
            session_check_interval=_float_env(
                env, ENV_SESSION_CHECK_INTERVAL, DEFAULT_SESSION_CHECK_INTERVAL
            ),
        )
        logging.getLogger("core.config").debug(
            f"Config loaded (base_url={config.api_base_url}, data_dir={config.data_dir})"
        )
        return config


def _float_env(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")
