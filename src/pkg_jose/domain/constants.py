from enum import Enum


class Claim(str, Enum):
    ISSUER = "iss"
    SUBJECT = "sub"
    AUDIENCE = "aud"
    EXPIRATION = "exp"
    NOT_BEFORE = "nbf"
    ISSUED_AT = "iat"
    JWT_ID = "jti"


class HeaderParameter(str, Enum):
    ALGORITHM = "alg"
    TYPE = "typ"
    KEY_ID = "kid"


DEFAULT_TOKEN_TYPE = "JWT"
NONE_ALGORITHM = "none"

HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")
RSA_ALGORITHMS = ("RS256", "RS384", "RS512")
RSA_PSS_ALGORITHMS = ("PS256", "PS384", "PS512")
EC_ALGORITHMS = ("ES256", "ES384", "ES512")
