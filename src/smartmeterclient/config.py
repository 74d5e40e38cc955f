from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .client import BASE_URL


@dataclass
class PortalSettings:
    """Configuration for the smart-meter portal client."""
    username: str
    password: str
    base_url: str = BASE_URL
    timeout: Optional[float] = None  # seconds; None = no client-side limit
    log_level: str = 'INFO'

    def __repr__(self) -> str:
        return (f"PortalSettings(username={self.username!r}, password='***', "
                f"base_url={self.base_url!r}, timeout={self.timeout!r}, log_level={self.log_level!r})")

    @staticmethod
    def from_env() -> 'PortalSettings':
        """Create portal settings from environment variables."""
        username = os.environ['EVN_USR']
        password = os.environ['EVN_PWD']
        base_url = os.environ.get('SMARTMETER_BASE_URL', BASE_URL)
        raw_timeout = os.environ.get('SMARTMETER_TIMEOUT')
        timeout = None
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ValueError(f"Malformed SMARTMETER_TIMEOUT: {raw_timeout!r}")
        log_level = os.environ.get('SMARTMETER_LOG_LEVEL', 'INFO').upper()

        return PortalSettings(
            username=username,
            password=password,
            base_url=base_url,
            timeout=timeout,
            log_level=log_level,
        )
