from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..adapters.pyjwt.algorithms import algorithm_from_name
from ..domain.constants import HMAC_ALGORITHMS, NONE_ALGORITHM
from ..domain.ports import Algorithm


@dataclass(slots=True)
class CodecSettings:
    """
    Algorithm, key material and validation policy for the command line
    tool.

    Host code decides how to construct this (env, config file, etc.).
    """
    algorithm: str = "HS256"
    secret: Optional[str] = None
    private_key_path: Optional[Path] = None
    public_key_path: Optional[Path] = None

    # Validation policy
    audience: Optional[str] = None
    issuer: Optional[str] = None
    leeway: float = 0.0
    verify: bool = True

    log_level: str = "warning"

    @property
    def is_symmetric(self) -> bool:
        return self.algorithm in HMAC_ALGORITHMS

    def build_algorithm(self) -> Algorithm:
        """
        Raises:
            RuntimeError if the key material for `algorithm` is missing.
        """
        if self.algorithm == NONE_ALGORITHM:
            return algorithm_from_name(NONE_ALGORITHM)

        if self.is_symmetric:
            if not self.secret:
                raise RuntimeError(f"{self.algorithm} needs a shared secret (JOSE_SECRET)")
            return algorithm_from_name(self.algorithm, self.secret)

        if self.private_key_path is None and self.public_key_path is None:
            raise RuntimeError(
                f"{self.algorithm} needs a key file (JOSE_PRIVATE_KEY_FILE or JOSE_PUBLIC_KEY_FILE)"
            )
        private_key = self.private_key_path.read_bytes() if self.private_key_path else None
        public_key = self.public_key_path.read_bytes() if self.public_key_path else None
        return algorithm_from_name(self.algorithm, private_key, public_key=public_key)
