class TokenError(Exception):
    """Base class for every failure raised while decoding a token."""

    default_message = "Invalid token"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class DecodeError(TokenError):
    """Raised when the token structure is malformed."""

    default_message = "Decode error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidAlgorithm(TokenError):
    """
    Raised when no accepted algorithm both matches the header and verifies
    the signature.

    `reason` tells the two cases apart for diagnostics: ``"unsupported"``
    when nothing is named after the header `alg`, ``"signature"`` when a
    named algorithm rejected the signature.
    """

    default_message = "Unsupported algorithm or incorrect key"

    def __init__(self, message: str | None = None, *, reason: str | None = None) -> None:
        super().__init__(message)
        self.reason = reason


class ExpiredSignature(TokenError):
    """Raised when the expiration claim (exp) is in the past."""

    default_message = "Expired Signature"


class ImmatureSignature(TokenError):
    """Raised when the not before claim (nbf) is in the future."""

    default_message = "The token is not yet valid (not before claim)"


class InvalidIssuedAt(TokenError):
    """Raised when the issued at claim (iat) is in the future."""

    default_message = "Issued at claim (iat) is in the future"


class InvalidAudience(TokenError):
    default_message = "Invalid Audience"


class InvalidIssuer(TokenError):
    default_message = "Invalid Issuer"
