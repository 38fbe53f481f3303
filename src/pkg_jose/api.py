from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from .application.use_cases.decode import DecodeTokenUseCase, load_token
from .application.use_cases.encode import EncodeTokenUseCase
from .domain.entities import ClaimSet, ClaimSetBuilder
from .domain.ports import Algorithm, Clock
from .domain.value_objects import JOSEHeader, Leeway


def decode(
    token: str,
    algorithms: Union[Algorithm, Sequence[Algorithm]],
    verify: bool = True,
    audience: Optional[str] = None,
    issuer: Optional[str] = None,
    leeway: Leeway = 0,
    clock: Optional[Clock] = None,
) -> ClaimSet:
    """
    Decode a compact token and return its claims.

    `algorithms` lists what the caller accepts; the header `alg` must name
    one of them and that algorithm must verify the signature. Leave the
    `none` algorithm out unless unsigned tokens are acceptable.

    Raises:
        pkg_jose.TokenError (one of its subclasses)
    """
    use_case = DecodeTokenUseCase(
        algorithms=algorithms,
        verify=verify,
        audience=audience,
        issuer=issuer,
        leeway=leeway,
        clock=clock,
    )
    return use_case.execute(token)


def encode(
    claims: Union[ClaimSet, Mapping[str, Any]],
    algorithm: Algorithm,
    headers: Optional[Mapping[str, Any]] = None,
) -> str:
    """Encode claims into a compact token signed with `algorithm`."""
    return EncodeTokenUseCase(algorithm=algorithm, headers=dict(headers or {})).execute(claims)


def encode_with(
    algorithm: Algorithm,
    configure: Callable[[ClaimSetBuilder], Any],
    headers: Optional[Mapping[str, Any]] = None,
) -> str:
    """
    Encode claims assembled by a callback.

        token = encode_with(hs256(secret), lambda b: b.issuer("me").audience("you"))
    """
    builder = ClaimSetBuilder()
    configure(builder)
    return encode(builder.claims, algorithm, headers)


def get_unverified_header(token: str) -> JOSEHeader:
    """Parse the header of a token without verifying anything."""
    return load_token(token).header


@dataclass(slots=True)
class TokenCodec:
    """
    Encoder and decoder configured once and reused.

    Both use cases are immutable, so one codec can be shared between
    threads.
    """

    encoder: EncodeTokenUseCase
    decoder: DecodeTokenUseCase

    def encode(self, claims: Union[ClaimSet, Mapping[str, Any]]) -> str:
        return self.encoder.execute(claims)

    def decode(self, token: str) -> ClaimSet:
        return self.decoder.execute(token)


def create_token_codec(
    algorithm: Algorithm,
    *,
    accepted: Optional[Sequence[Algorithm]] = None,
    headers: Optional[Mapping[str, Any]] = None,
    audience: Optional[str] = None,
    issuer: Optional[str] = None,
    leeway: Leeway = 0,
    clock: Optional[Clock] = None,
) -> TokenCodec:
    """
    High-level factory: signing algorithm + validation policy -> TokenCodec.

    By default the codec only accepts tokens signed with `algorithm` itself.
    """
    return TokenCodec(
        encoder=EncodeTokenUseCase(algorithm=algorithm, headers=dict(headers or {})),
        decoder=DecodeTokenUseCase(
            algorithms=tuple(accepted) if accepted is not None else (algorithm,),
            audience=audience,
            issuer=issuer,
            leeway=leeway,
            clock=clock,
        ),
    )
