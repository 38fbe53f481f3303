from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

from ...adapters.clock import SystemClock
from ...adapters.pyjwt.codec import b64url_decode, parse_json_object
from ...domain.entities import ClaimSet
from ...domain.exceptions import DecodeError, InvalidAlgorithm
from ...domain.ports import Algorithm, Clock
from ...domain.value_objects import JOSEHeader, Leeway
from ...log import get_logger

logger = get_logger()


@dataclass(frozen=True, slots=True)
class DecodedToken:
    """The parsed parts of a compact token, before any verification."""
    header: JOSEHeader
    claims: ClaimSet
    signature: bytes
    signing_input: str


def load_token(token: str) -> DecodedToken:
    """
    Split a compact token and parse its segments.

    Nothing is verified here; only the structure is checked.

    Raises:
        DecodeError
    """
    if not isinstance(token, str):
        raise DecodeError("Invalid token type")

    segments = token.split(".")
    if len(segments) != 3:
        raise DecodeError("Not enough segments")

    header_segment, payload_segment, signature_segment = segments
    signing_input = f"{header_segment}.{payload_segment}"

    try:
        header_data = b64url_decode(header_segment)
    except ValueError as exc:
        raise DecodeError("Header is not correctly encoded as base64") from exc

    try:
        header = parse_json_object(header_data)
    except ValueError as exc:
        raise DecodeError("Invalid header") from exc

    try:
        payload_data = b64url_decode(payload_segment)
    except ValueError as exc:
        raise DecodeError("Payload is not correctly encoded as base64") from exc

    try:
        payload = parse_json_object(payload_data)
    except ValueError as exc:
        raise DecodeError("Invalid payload") from exc

    try:
        signature = b64url_decode(signature_segment)
    except ValueError as exc:
        raise DecodeError("Signature is not correctly encoded as base64") from exc

    return DecodedToken(
        header=JOSEHeader(header),
        claims=ClaimSet(payload),
        signature=signature,
        signing_input=signing_input,
    )


def verify_signature(
    algorithms: Sequence[Algorithm],
    header: JOSEHeader,
    signing_input: str,
    signature: bytes,
) -> Algorithm:
    """
    Find an accepted algorithm named by the header that verifies the
    signature.

    Returns:
        The first algorithm that verified.

    Raises:
        DecodeError if the header has no algorithm.
        InvalidAlgorithm if nothing matches and verifies.
    """
    alg = header.algorithm
    if alg is None:
        raise DecodeError("Missing Algorithm")

    named = [a for a in algorithms if a.name == alg]
    if not named:
        logger.debug("No accepted algorithm for token", alg=alg, reason="unsupported")
        raise InvalidAlgorithm(reason="unsupported")

    verified = [a for a in named if a.verify(signing_input, signature)]
    if not verified:
        logger.debug(
            "Token signature did not verify",
            alg=alg,
            reason="signature",
            candidates=len(named),
        )
        raise InvalidAlgorithm(reason="signature")

    return verified[0]


def _as_tuple(algorithms: Algorithm | Sequence[Algorithm]) -> Tuple[Algorithm, ...]:
    if isinstance(algorithms, Algorithm):
        return (algorithms,)
    return tuple(algorithms)


@dataclass(frozen=True, slots=True)
class DecodeTokenUseCase:
    """
    Application use case:
    - parse a compact token
    - validate exp / nbf / iat, audience and issuer
    - verify the signature against the accepted algorithms

    Checks run in that order and the first failure is raised. With
    `verify=False` only parsing happens; the caller then takes on all
    responsibility for trusting the claims.
    """

    algorithms: Tuple[Algorithm, ...] = ()
    verify: bool = True
    audience: Optional[str] = None
    issuer: Optional[str] = None
    leeway: Leeway = 0
    clock: Clock = field(default_factory=SystemClock)

    def __init__(
        self,
        algorithms: Algorithm | Sequence[Algorithm] = (),
        verify: bool = True,
        audience: Optional[str] = None,
        issuer: Optional[str] = None,
        leeway: Leeway = 0,
        clock: Optional[Clock] = None,
    ) -> None:
        object.__setattr__(self, "algorithms", _as_tuple(algorithms))
        object.__setattr__(self, "verify", verify)
        object.__setattr__(self, "audience", audience)
        object.__setattr__(self, "issuer", issuer)
        object.__setattr__(self, "leeway", leeway)
        object.__setattr__(self, "clock", clock or SystemClock())

    def execute(self, token: str) -> ClaimSet:
        """
        Decode a token and return its claims.

        Raises:
            DecodeError
            InvalidAlgorithm
            ExpiredSignature
            ImmatureSignature
            InvalidIssuedAt
            InvalidAudience
            InvalidIssuer
        """
        decoded = load_token(token)

        if self.verify:
            decoded.claims.validate(
                audience=self.audience,
                issuer=self.issuer,
                leeway=self.leeway,
                now=self.clock.now(),
            )
            verify_signature(
                self.algorithms,
                decoded.header,
                decoded.signing_input,
                decoded.signature,
            )

        return decoded.claims

    def decode(self, token: str) -> ClaimSet:
        """TokenDecoder port implementation."""
        return self.execute(token)
