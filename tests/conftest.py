import json

import pytest
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from pkg_jose import FixedClock, hs256
from pkg_jose.adapters.pyjwt.codec import b64url_encode

NOW = 1_700_000_000
SECRET = b"0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"


def segment(value) -> str:
    """Base64url of the compact JSON form of `value` (any JSON type)."""
    return b64url_encode(json.dumps(value, separators=(",", ":")).encode("utf-8"))


def make_token(header, payload, signature: bytes = b"") -> str:
    return f"{segment(header)}.{segment(payload)}.{b64url_encode(signature)}"


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def hmac_alg():
    return hs256(SECRET)


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_keys():
    return {
        "ES256": ec.generate_private_key(ec.SECP256R1()),
        "ES384": ec.generate_private_key(ec.SECP384R1()),
        "ES512": ec.generate_private_key(ec.SECP521R1()),
    }
