"""
pkg_jose

Encode and decode JSON Web Tokens (compact JWS) with strict, ordered
validation of structure, temporal claims, audience, issuer and signature.
Signing primitives come from PyJWT / cryptography.
"""

__version__ = "0.1.0"

from .domain.entities import ClaimSet, ClaimSetBuilder
from .domain.constants import Claim, HeaderParameter
from .domain.exceptions import (
    TokenError,
    DecodeError,
    InvalidAlgorithm,
    ExpiredSignature,
    ImmatureSignature,
    InvalidIssuedAt,
    InvalidAudience,
    InvalidIssuer,
)
from .domain.value_objects import ClaimValue, JOSEHeader
from .domain.ports import Algorithm, Clock, TokenDecoder

from .application.use_cases.decode import DecodeTokenUseCase, DecodedToken, load_token
from .application.use_cases.encode import EncodeTokenUseCase

from .adapters.clock import FixedClock, SystemClock
from .adapters.pyjwt.algorithms import (
    NoneAlgorithm,
    HMACAlgorithm,
    RSAAlgorithm,
    RSAPSSAlgorithm,
    ECAlgorithm,
    algorithm_from_name,
    hs256,
    hs384,
    hs512,
    rs256,
    rs384,
    rs512,
    ps256,
    ps384,
    ps512,
    es256,
    es384,
    es512,
)

from .api import (
    TokenCodec,
    create_token_codec,
    decode,
    encode,
    encode_with,
    get_unverified_header,
)

__all__ = [
    "__version__",
    # domain core
    "ClaimSet",
    "ClaimSetBuilder",
    "ClaimValue",
    "Claim",
    "HeaderParameter",
    "JOSEHeader",
    "Algorithm",
    "Clock",
    "TokenDecoder",
    # exceptions
    "TokenError",
    "DecodeError",
    "InvalidAlgorithm",
    "ExpiredSignature",
    "ImmatureSignature",
    "InvalidIssuedAt",
    "InvalidAudience",
    "InvalidIssuer",
    # use cases
    "DecodeTokenUseCase",
    "DecodedToken",
    "EncodeTokenUseCase",
    "load_token",
    # adapters
    "SystemClock",
    "FixedClock",
    "NoneAlgorithm",
    "HMACAlgorithm",
    "RSAAlgorithm",
    "RSAPSSAlgorithm",
    "ECAlgorithm",
    "algorithm_from_name",
    "hs256",
    "hs384",
    "hs512",
    "rs256",
    "rs384",
    "rs512",
    "ps256",
    "ps384",
    "ps512",
    "es256",
    "es384",
    "es512",
    # entry points
    "decode",
    "encode",
    "encode_with",
    "get_unverified_header",
    "TokenCodec",
    "create_token_codec",
]
