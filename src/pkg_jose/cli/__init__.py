"""
pkg_jose.cli

Command line front end:

- CodecSettings: algorithm, key files and validation policy.
- settings_from_env: build CodecSettings from JOSE_* variables.
- main: the `pkg-jose` entry point (encode / decode / header).
"""

from __future__ import annotations

from ..log import configure_logging
from .env import settings_from_env
from .main import main
from .settings import CodecSettings

__all__ = [
    "CodecSettings",
    "settings_from_env",
    "configure_logging",
    "main",
]
