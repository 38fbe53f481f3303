from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from .settings import CodecSettings


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> CodecSettings:
    env = os.environ if environ is None else environ

    def _bool(key: str, default: bool = True) -> bool:
        raw = env.get(key)
        if raw is None:
            return default
        return str(raw).strip().lower() in {"1", "true", "yes", "on"}

    def _float(key: str, default: float = 0.0) -> float:
        raw = env.get(key)
        if raw is None or not raw.strip():
            return default
        try:
            return float(raw)
        except ValueError as exc:
            raise RuntimeError(f"{key} must be a number of seconds, got {raw!r}") from exc

    def _path(key: str) -> Optional[Path]:
        raw = env.get(key)
        return Path(raw) if raw else None

    return CodecSettings(
        algorithm=env.get("JOSE_ALGORITHM") or "HS256",
        secret=env.get("JOSE_SECRET") or None,
        private_key_path=_path("JOSE_PRIVATE_KEY_FILE"),
        public_key_path=_path("JOSE_PUBLIC_KEY_FILE"),
        audience=env.get("JOSE_AUDIENCE") or None,
        issuer=env.get("JOSE_ISSUER") or None,
        leeway=_float("JOSE_LEEWAY"),
        verify=_bool("JOSE_VERIFY", True),
        log_level=env.get("JOSE_LOG_LEVEL") or "warning",
    )
