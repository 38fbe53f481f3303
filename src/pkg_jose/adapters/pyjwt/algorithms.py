from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, Tuple, Union

from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePrivateKey
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from jwt.algorithms import get_default_algorithms

from ...domain.constants import (
    EC_ALGORITHMS,
    HMAC_ALGORITHMS,
    NONE_ALGORITHM,
    RSA_ALGORITHMS,
    RSA_PSS_ALGORITHMS,
)
from ...domain.ports import Algorithm
from ...log import get_logger

logger = get_logger()

KeyMaterial = Union[str, bytes, Any]

_PRIVATE_KEY_TYPES = (RSAPrivateKey, EllipticCurvePrivateKey)


def _backend(name: str) -> Any:
    """PyJWT implementation of the named algorithm."""
    backends = get_default_algorithms()
    if name not in backends:
        raise ValueError(f"Algorithm {name!r} is not available")
    return backends[name]


def _check_family(name: str, family: Tuple[str, ...], kind: str) -> None:
    if name not in family:
        raise ValueError(f"{name!r} is not a {kind} algorithm (expected one of {', '.join(family)})")


# --------------------------------------------------------------------------- #
# none
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class NoneAlgorithm:
    """
    Unsigned tokens.

    Never include this in an accepted-algorithm list unless unsigned tokens
    are really meant to be trusted.
    """

    name: str = field(default=NONE_ALGORITHM, init=False)

    def sign(self, signing_input: str) -> bytes:
        return b""

    def verify(self, signing_input: str, signature: bytes) -> bool:
        return signature == b""


# --------------------------------------------------------------------------- #
# HMAC
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class HMACAlgorithm:
    """HS256 / HS384 / HS512 with a shared secret."""

    name: str
    secret: bytes = field(repr=False)

    _key: bytes = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        _check_family(self.name, HMAC_ALGORITHMS, "HMAC")
        secret = self.secret.encode("utf-8") if isinstance(self.secret, str) else bytes(self.secret)
        object.__setattr__(self, "secret", secret)
        object.__setattr__(self, "_key", _backend(self.name).prepare_key(secret))

    def sign(self, signing_input: str) -> bytes:
        return _backend(self.name).sign(signing_input.encode("utf-8"), self._key)

    def verify(self, signing_input: str, signature: bytes) -> bool:
        try:
            return bool(
                _backend(self.name).verify(signing_input.encode("utf-8"), self._key, signature)
            )
        except Exception as exc:  # noqa: BLE001
            logger.debug("HMAC verification failed", alg=self.name, error=str(exc))
            return False


# --------------------------------------------------------------------------- #
# RSA / RSA-PSS / ECDSA
# --------------------------------------------------------------------------- #


class _AsymmetricAlgorithm:
    """
    Shared behaviour for key-pair algorithms.

    Keys are prepared once by PyJWT (PEM text or `cryptography` key
    objects). The private key signs; the public key, or the public half of
    the private key, verifies.
    """

    family: ClassVar[Tuple[str, ...]] = ()
    kind: ClassVar[str] = ""

    name: str
    private_key: Optional[KeyMaterial]
    public_key: Optional[KeyMaterial]
    _signing_key: Any
    _verifying_key: Any

    def _prepare(self) -> None:
        _check_family(self.name, self.family, self.kind)
        if self.private_key is None and self.public_key is None:
            raise ValueError(f"{self.name} needs a private key, a public key, or both")

        backend = _backend(self.name)
        signing_key = None
        if self.private_key is not None:
            signing_key = backend.prepare_key(self.private_key)
            if not isinstance(signing_key, _PRIVATE_KEY_TYPES):
                raise ValueError(f"{self.name} private_key is not a private key")

        if self.public_key is not None:
            verifying_key = backend.prepare_key(self.public_key)
            if isinstance(verifying_key, _PRIVATE_KEY_TYPES):
                verifying_key = verifying_key.public_key()
        else:
            verifying_key = signing_key.public_key()

        object.__setattr__(self, "_signing_key", signing_key)
        object.__setattr__(self, "_verifying_key", verifying_key)

    @property
    def can_sign(self) -> bool:
        return self._signing_key is not None

    def sign(self, signing_input: str) -> bytes:
        if self._signing_key is None:
            raise ValueError(f"{self.name} cannot sign without a private key")
        return _backend(self.name).sign(signing_input.encode("utf-8"), self._signing_key)

    def verify(self, signing_input: str, signature: bytes) -> bool:
        try:
            return bool(
                _backend(self.name).verify(
                    signing_input.encode("utf-8"), self._verifying_key, signature
                )
            )
        except Exception as exc:  # noqa: BLE001
            logger.debug(
                "Signature verification failed", alg=self.name, error=str(exc)
            )
            return False


@dataclass(frozen=True)
class RSAAlgorithm(_AsymmetricAlgorithm):
    """RS256 / RS384 / RS512 (RSASSA-PKCS1-v1_5)."""

    family: ClassVar[Tuple[str, ...]] = RSA_ALGORITHMS
    kind: ClassVar[str] = "RSA"

    name: str
    private_key: Optional[KeyMaterial] = field(default=None, repr=False)
    public_key: Optional[KeyMaterial] = field(default=None, repr=False)

    _signing_key: Any = field(init=False, repr=False, compare=False, default=None)
    _verifying_key: Any = field(init=False, repr=False, compare=False, default=None)

    def __post_init__(self) -> None:
        self._prepare()


@dataclass(frozen=True)
class RSAPSSAlgorithm(_AsymmetricAlgorithm):
    """PS256 / PS384 / PS512 (RSASSA-PSS)."""

    family: ClassVar[Tuple[str, ...]] = RSA_PSS_ALGORITHMS
    kind: ClassVar[str] = "RSA-PSS"

    name: str
    private_key: Optional[KeyMaterial] = field(default=None, repr=False)
    public_key: Optional[KeyMaterial] = field(default=None, repr=False)

    _signing_key: Any = field(init=False, repr=False, compare=False, default=None)
    _verifying_key: Any = field(init=False, repr=False, compare=False, default=None)

    def __post_init__(self) -> None:
        self._prepare()


@dataclass(frozen=True)
class ECAlgorithm(_AsymmetricAlgorithm):
    """ES256 / ES384 / ES512 (ECDSA, raw r||s signatures)."""

    family: ClassVar[Tuple[str, ...]] = EC_ALGORITHMS
    kind: ClassVar[str] = "ECDSA"

    name: str
    private_key: Optional[KeyMaterial] = field(default=None, repr=False)
    public_key: Optional[KeyMaterial] = field(default=None, repr=False)

    _signing_key: Any = field(init=False, repr=False, compare=False, default=None)
    _verifying_key: Any = field(init=False, repr=False, compare=False, default=None)

    def __post_init__(self) -> None:
        self._prepare()


# --------------------------------------------------------------------------- #
# Shortcuts
# --------------------------------------------------------------------------- #


def hs256(secret: Union[str, bytes]) -> HMACAlgorithm:
    return HMACAlgorithm("HS256", secret)


def hs384(secret: Union[str, bytes]) -> HMACAlgorithm:
    return HMACAlgorithm("HS384", secret)


def hs512(secret: Union[str, bytes]) -> HMACAlgorithm:
    return HMACAlgorithm("HS512", secret)


def rs256(private_key: Optional[KeyMaterial] = None, public_key: Optional[KeyMaterial] = None) -> RSAAlgorithm:
    return RSAAlgorithm("RS256", private_key=private_key, public_key=public_key)


def rs384(private_key: Optional[KeyMaterial] = None, public_key: Optional[KeyMaterial] = None) -> RSAAlgorithm:
    return RSAAlgorithm("RS384", private_key=private_key, public_key=public_key)


def rs512(private_key: Optional[KeyMaterial] = None, public_key: Optional[KeyMaterial] = None) -> RSAAlgorithm:
    return RSAAlgorithm("RS512", private_key=private_key, public_key=public_key)


def ps256(private_key: Optional[KeyMaterial] = None, public_key: Optional[KeyMaterial] = None) -> RSAPSSAlgorithm:
    return RSAPSSAlgorithm("PS256", private_key=private_key, public_key=public_key)


def ps384(private_key: Optional[KeyMaterial] = None, public_key: Optional[KeyMaterial] = None) -> RSAPSSAlgorithm:
    return RSAPSSAlgorithm("PS384", private_key=private_key, public_key=public_key)


def ps512(private_key: Optional[KeyMaterial] = None, public_key: Optional[KeyMaterial] = None) -> RSAPSSAlgorithm:
    return RSAPSSAlgorithm("PS512", private_key=private_key, public_key=public_key)


def es256(private_key: Optional[KeyMaterial] = None, public_key: Optional[KeyMaterial] = None) -> ECAlgorithm:
    return ECAlgorithm("ES256", private_key=private_key, public_key=public_key)


def es384(private_key: Optional[KeyMaterial] = None, public_key: Optional[KeyMaterial] = None) -> ECAlgorithm:
    return ECAlgorithm("ES384", private_key=private_key, public_key=public_key)


def es512(private_key: Optional[KeyMaterial] = None, public_key: Optional[KeyMaterial] = None) -> ECAlgorithm:
    return ECAlgorithm("ES512", private_key=private_key, public_key=public_key)


def algorithm_from_name(
    name: str,
    key: Optional[KeyMaterial] = None,
    *,
    public_key: Optional[KeyMaterial] = None,
) -> Algorithm:
    """
    Build the algorithm called `name`.

    `key` is the shared secret for HS*, or the private key for RS*/PS*/ES*.
    Asymmetric algorithms may be given only `public_key` for verification.
    """
    if name == NONE_ALGORITHM:
        return NoneAlgorithm()
    if name in HMAC_ALGORITHMS:
        if key is None:
            raise ValueError(f"{name} needs a shared secret")
        return HMACAlgorithm(name, key)
    if name in RSA_ALGORITHMS:
        return RSAAlgorithm(name, private_key=key, public_key=public_key)
    if name in RSA_PSS_ALGORITHMS:
        return RSAPSSAlgorithm(name, private_key=key, public_key=public_key)
    if name in EC_ALGORITHMS:
        return ECAlgorithm(name, private_key=key, public_key=public_key)
    raise ValueError(f"Unknown algorithm: {name}")
