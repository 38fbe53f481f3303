from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .entities import ClaimSet


@runtime_checkable
class Algorithm(Protocol):
    """
    Port for a signing algorithm.

    Implementations live in the adapters layer (e.g. the PyJWT-backed
    HMAC / RSA / ECDSA algorithms).
    """

    @property
    def name(self) -> str:
        """Canonical identifier written to and matched against header `alg`."""
        ...

    def sign(self, signing_input: str) -> bytes:
        ...

    def verify(self, signing_input: str, signature: bytes) -> bool:
        """
        Check `signature` over `signing_input`.

        Must not raise: a failure of the underlying primitive is reported
        as False.
        """
        ...


class Clock(Protocol):
    """Source of the current time, as seconds since the epoch."""

    def now(self) -> float:
        ...


class TokenDecoder(Protocol):
    """
    Port for decoding a compact token into claims.
    """

    def decode(self, token: str) -> ClaimSet:
        """
        Decode and verify the given token.

        Should:
          - check temporal, audience and issuer claims
          - verify signature
        Raises:
          - DecodeError
          - InvalidAlgorithm
          - or other TokenError subclasses
        """
        ...
