import pytest
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)

from pkg_jose import Algorithm
from pkg_jose.adapters.pyjwt import algorithms
from pkg_jose.adapters.pyjwt.algorithms import (
    ECAlgorithm,
    HMACAlgorithm,
    NoneAlgorithm,
    RSAAlgorithm,
    RSAPSSAlgorithm,
    algorithm_from_name,
    es256,
    hs256,
    hs384,
    hs512,
    ps256,
    ps384,
    ps512,
    rs256,
)

from conftest import SECRET

SIGNING_INPUT = "eyJhbGciOiJIUzI1NiJ9.eyJzdWIiOiJhbGljZSJ9"


def _tamper(signature: bytes) -> bytes:
    return bytes([signature[0] ^ 0x01]) + signature[1:]


# --- none ------------------------------------------------------------------


def test_none_algorithm():
    alg = NoneAlgorithm()
    assert alg.name == "none"
    assert alg.sign(SIGNING_INPUT) == b""
    assert alg.verify(SIGNING_INPUT, b"")
    assert not alg.verify(SIGNING_INPUT, b"x")


# --- HMAC ------------------------------------------------------------------


@pytest.mark.parametrize(
    "factory, name, size",
    [(hs256, "HS256", 32), (hs384, "HS384", 48), (hs512, "HS512", 64)],
)
def test_hmac_sign_verify(factory, name, size):
    alg = factory(SECRET)
    assert alg.name == name

    signature = alg.sign(SIGNING_INPUT)
    assert len(signature) == size
    assert alg.verify(SIGNING_INPUT, signature)
    assert not alg.verify(SIGNING_INPUT + "x", signature)
    assert not alg.verify(SIGNING_INPUT, _tamper(signature))
    assert not factory(SECRET[::-1]).verify(SIGNING_INPUT, signature)


def test_hmac_accepts_str_secret():
    assert HMACAlgorithm("HS256", SECRET.decode()) == HMACAlgorithm("HS256", SECRET)


def test_hmac_rejects_other_names():
    with pytest.raises(ValueError):
        HMACAlgorithm("RS256", SECRET)


def test_secret_is_not_in_repr():
    assert SECRET.decode() not in repr(hs256(SECRET))


# --- RSA / ECDSA -----------------------------------------------------------


def test_rsa_sign_verify(rsa_key):
    signer = rs256(private_key=rsa_key)
    verifier = rs256(public_key=rsa_key.public_key())

    signature = signer.sign(SIGNING_INPUT)
    assert signer.verify(SIGNING_INPUT, signature)
    assert verifier.verify(SIGNING_INPUT, signature)
    assert not verifier.verify(SIGNING_INPUT, _tamper(signature))
    assert not verifier.verify(SIGNING_INPUT, b"garbage")


def test_rsa_accepts_pem(rsa_key):
    private_pem = rsa_key.private_bytes(Encoding.PEM, PrivateFormat.PKCS8, NoEncryption())
    public_pem = rsa_key.public_key().public_bytes(Encoding.PEM, PublicFormat.SubjectPublicKeyInfo)

    signer = RSAAlgorithm("RS512", private_key=private_pem)
    verifier = RSAAlgorithm("RS512", public_key=public_pem.decode())
    assert verifier.verify(SIGNING_INPUT, signer.sign(SIGNING_INPUT))


def test_rsa_pss_sign_verify(rsa_key):
    signer = ps256(private_key=rsa_key)
    verifier = RSAPSSAlgorithm("PS256", public_key=rsa_key.public_key())
    assert verifier.verify(SIGNING_INPUT, signer.sign(SIGNING_INPUT))
    # same key, other padding scheme
    assert not rs256(public_key=rsa_key.public_key()).verify(
        SIGNING_INPUT, signer.sign(SIGNING_INPUT)
    )


@pytest.mark.parametrize("factory, name", [(ps256, "PS256"), (ps384, "PS384"), (ps512, "PS512")])
def test_rsa_pss_shortcuts(factory, name, rsa_key):
    signer = factory(private_key=rsa_key)
    verifier = factory(public_key=rsa_key.public_key())
    assert signer.name == verifier.name == name
    assert verifier.verify(SIGNING_INPUT, signer.sign(SIGNING_INPUT))


@pytest.mark.parametrize("name", ["ES256", "ES384", "ES512"])
def test_ec_sign_verify(ec_keys, name):
    key = ec_keys[name]
    signer = ECAlgorithm(name, private_key=key)
    verifier = ECAlgorithm(name, public_key=key.public_key())

    signature = signer.sign(SIGNING_INPUT)
    assert verifier.verify(SIGNING_INPUT, signature)
    assert not verifier.verify(SIGNING_INPUT, _tamper(signature))
    assert not verifier.verify(SIGNING_INPUT, signature[:-1])


def test_public_only_cannot_sign(rsa_key):
    alg = rs256(public_key=rsa_key.public_key())
    assert not alg.can_sign
    with pytest.raises(ValueError):
        alg.sign(SIGNING_INPUT)


def test_asymmetric_needs_a_key():
    with pytest.raises(ValueError):
        RSAAlgorithm("RS256")


def test_asymmetric_rejects_other_names(rsa_key, ec_keys):
    with pytest.raises(ValueError):
        RSAAlgorithm("ES256", private_key=rsa_key)
    with pytest.raises(ValueError):
        ECAlgorithm("RS256", private_key=ec_keys["ES256"])


def test_public_key_in_private_slot_is_rejected(rsa_key):
    with pytest.raises(ValueError):
        RSAAlgorithm("RS256", private_key=rsa_key.public_key())


def test_verify_never_raises(monkeypatch, rsa_key):
    class _Broken:
        def prepare_key(self, key):
            return key

        def sign(self, msg, key):
            return b"sig"

        def verify(self, msg, key, sig):
            raise RuntimeError("primitive exploded")

    hmac_alg = hs256(SECRET)
    rsa_alg = rs256(private_key=rsa_key)
    monkeypatch.setattr(algorithms, "_backend", lambda name: _Broken())

    assert hmac_alg.verify(SIGNING_INPUT, b"sig") is False
    assert rsa_alg.verify(SIGNING_INPUT, b"sig") is False


# --- factory ---------------------------------------------------------------


def test_algorithm_from_name(rsa_key, ec_keys):
    assert isinstance(algorithm_from_name("none"), NoneAlgorithm)
    assert algorithm_from_name("HS384", SECRET) == hs384(SECRET)
    assert isinstance(algorithm_from_name("RS256", rsa_key), RSAAlgorithm)
    assert isinstance(algorithm_from_name("PS384", rsa_key), RSAPSSAlgorithm)
    assert isinstance(
        algorithm_from_name("ES256", public_key=ec_keys["ES256"].public_key()),
        ECAlgorithm,
    )

    with pytest.raises(ValueError):
        algorithm_from_name("HS256")
    with pytest.raises(ValueError):
        algorithm_from_name("XX999", SECRET)


def test_algorithms_satisfy_port(rsa_key, ec_keys):
    for alg in (NoneAlgorithm(), hs256(SECRET), rs256(private_key=rsa_key)):
        assert isinstance(alg, Algorithm)
    assert es256(ec_keys["ES256"]).name == "ES256"
