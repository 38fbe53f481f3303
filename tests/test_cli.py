import json
import logging
from pathlib import Path

import pytest
import structlog
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)

from pkg_jose import HMACAlgorithm, NoneAlgorithm, RSAAlgorithm, encode, hs256
from pkg_jose.cli import CodecSettings, main, settings_from_env

from conftest import SECRET


@pytest.fixture
def jose_env(monkeypatch):
    for key in (
        "JOSE_ALGORITHM",
        "JOSE_PRIVATE_KEY_FILE",
        "JOSE_PUBLIC_KEY_FILE",
        "JOSE_AUDIENCE",
        "JOSE_ISSUER",
        "JOSE_LEEWAY",
        "JOSE_VERIFY",
        "JOSE_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("JOSE_SECRET", SECRET.decode())
    yield monkeypatch

    logger = logging.getLogger("pkg_jose")
    logger.handlers = []
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    structlog.reset_defaults()


def _run(capsys, *argv):
    code = main(list(argv))
    return code, json.loads(capsys.readouterr().out)


# --- settings ------------------------------------------------------------------


def test_settings_from_env_defaults():
    settings = settings_from_env({})
    assert settings == CodecSettings()
    assert settings.algorithm == "HS256"
    assert settings.verify is True
    assert settings.leeway == 0.0


def test_settings_from_env():
    settings = settings_from_env({
        "JOSE_ALGORITHM": "RS256",
        "JOSE_PUBLIC_KEY_FILE": "/keys/pub.pem",
        "JOSE_AUDIENCE": "svc",
        "JOSE_ISSUER": "me",
        "JOSE_LEEWAY": "2.5",
        "JOSE_VERIFY": "no",
        "JOSE_LOG_LEVEL": "debug",
    })
    assert settings.algorithm == "RS256"
    assert settings.public_key_path == Path("/keys/pub.pem")
    assert settings.private_key_path is None
    assert settings.audience == "svc"
    assert settings.issuer == "me"
    assert settings.leeway == 2.5
    assert settings.verify is False
    assert settings.log_level == "debug"


def test_settings_from_env_bad_leeway():
    with pytest.raises(RuntimeError):
        settings_from_env({"JOSE_LEEWAY": "soon"})


def test_build_algorithm(tmp_path, rsa_key):
    assert CodecSettings(secret="s" * 32).build_algorithm() == HMACAlgorithm("HS256", "s" * 32)
    assert isinstance(CodecSettings(algorithm="none").build_algorithm(), NoneAlgorithm)

    with pytest.raises(RuntimeError):
        CodecSettings().build_algorithm()
    with pytest.raises(RuntimeError):
        CodecSettings(algorithm="RS256").build_algorithm()

    pem = tmp_path / "key.pem"
    pem.write_bytes(rsa_key.private_bytes(Encoding.PEM, PrivateFormat.PKCS8, NoEncryption()))
    alg = CodecSettings(algorithm="RS256", private_key_path=pem).build_algorithm()
    assert isinstance(alg, RSAAlgorithm)
    assert alg.can_sign


# --- command line ----------------------------------------------------------------


def test_encode_then_decode(jose_env, capsys):
    code, out = _run(capsys, "encode", "-c", "sub=alice", "-c", "admin=true", "-H", "kid=k1")
    assert code == 0
    assert out["ok"] is True
    token = out["token"]

    code, out = _run(capsys, "decode", token)
    assert code == 0
    assert out == {
        "ok": True,
        "verified": True,
        "header": {"kid": "k1", "typ": "JWT", "alg": "HS256"},
        "claims": {"sub": "alice", "admin": True},
    }


def test_encode_claims_json_and_expiry(jose_env, capsys):
    code, out = _run(capsys, "encode", "--claims", '{"iss": "me", "n": [1, 2]}', "--expires-in", "60")
    assert code == 0
    claims = json.loads(
        json.dumps(_run(capsys, "decode", out["token"], "--issuer", "me")[1]["claims"])
    )
    assert claims["iss"] == "me"
    assert claims["n"] == [1, 2]
    assert claims["exp"] - claims["iat"] == 60


def test_decode_rejected_token(jose_env, capsys):
    token = encode({"exp": 1}, hs256(SECRET))
    code, out = _run(capsys, "decode", token)
    assert code == 1
    assert out == {"ok": False, "error": "Expired Signature", "type": "ExpiredSignature"}


def test_decode_wrong_algorithm(jose_env, capsys):
    token = encode({"a": 1}, hs256(SECRET))
    code, out = _run(capsys, "--algorithm", "HS512", "decode", token)
    assert code == 1
    assert out["type"] == "InvalidAlgorithm"


def test_decode_malformed(jose_env, capsys):
    code, out = _run(capsys, "decode", "not-a-token")
    assert code == 1
    assert out["error"] == "Not enough segments"


def test_decode_without_verification(jose_env, capsys):
    token = encode({"exp": 1}, hs256(SECRET[::-1]))
    code, out = _run(capsys, "decode", token, "--no-verify")
    assert code == 0
    assert out["verified"] is False
    assert out["claims"] == {"exp": 1}


def test_header_command(jose_env, capsys):
    token = encode({}, hs256(SECRET), headers={"kid": "abc"})
    code, out = _run(capsys, "header", token)
    assert code == 0
    assert out["header"] == {"kid": "abc", "typ": "JWT", "alg": "HS256"}


def test_rsa_from_key_files(jose_env, capsys, tmp_path, rsa_key):
    private_pem = tmp_path / "private.pem"
    public_pem = tmp_path / "public.pem"
    private_pem.write_bytes(rsa_key.private_bytes(Encoding.PEM, PrivateFormat.PKCS8, NoEncryption()))
    public_pem.write_bytes(
        rsa_key.public_key().public_bytes(Encoding.PEM, PublicFormat.SubjectPublicKeyInfo)
    )
    jose_env.setenv("JOSE_ALGORITHM", "RS256")
    jose_env.setenv("JOSE_PRIVATE_KEY_FILE", str(private_pem))

    _, out = _run(capsys, "encode", "-c", "sub=alice")
    token = out["token"]

    jose_env.delenv("JOSE_PRIVATE_KEY_FILE")
    jose_env.setenv("JOSE_PUBLIC_KEY_FILE", str(public_pem))
    code, out = _run(capsys, "decode", token)
    assert code == 0
    assert out["claims"] == {"sub": "alice"}


def test_debug_logging_tells_rejections_apart(jose_env, capsys):
    jose_env.setenv("JOSE_LOG_LEVEL", "debug")
    token = encode({"a": 1}, hs256(SECRET))

    code = main(["--algorithm", "HS512", "decode", token])
    err = capsys.readouterr().err
    assert code == 1
    assert "No accepted algorithm for token" in err
    assert "unsupported" in err

    forged = encode({"a": 1}, hs256(SECRET[::-1]))
    code = main(["decode", forged])
    err = capsys.readouterr().err
    assert code == 1
    assert "Token signature did not verify" in err


def test_bad_environment_is_reported(jose_env, capsys):
    jose_env.setenv("JOSE_LEEWAY", "soon")
    with pytest.raises(RuntimeError):
        main(["header", encode({}, hs256(SECRET))])
    out = json.loads(capsys.readouterr().out)
    assert out["ok"] is False
    assert "JOSE_LEEWAY" in out["error"]
