from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from .constants import Claim
from .exceptions import (
    DecodeError,
    ExpiredSignature,
    ImmatureSignature,
    InvalidAudience,
    InvalidIssuedAt,
    InvalidIssuer,
)
from .value_objects import (
    ClaimValue,
    Leeway,
    Timestamp,
    coerce_timestamp,
    from_epoch,
    leeway_seconds,
    to_epoch,
)

_EXP_MESSAGE = "Expiration claim (exp) must be a number"
_NBF_MESSAGE = "Not before claim (nbf) must be a number"
_IAT_MESSAGE = "Issued at claim (iat) must be a number"


@dataclass(slots=True)
class ClaimSet:
    """
    The claims carried by a token.

    Values are stored as parsed (untyped JSON). The registered claims get
    typed accessors that coerce on read.
    """
    claims: Dict[str, ClaimValue] = field(default_factory=dict)

    # ---- mapping access --------------------------------------------------

    def get(self, key: str, default: Any = None) -> Optional[ClaimValue]:
        return self.claims.get(key, default)

    def __getitem__(self, key: str) -> ClaimValue:
        return self.claims[key]

    def __setitem__(self, key: str, value: ClaimValue) -> None:
        self.claims[key] = value

    def __delitem__(self, key: str) -> None:
        del self.claims[key]

    def __contains__(self, key: object) -> bool:
        return key in self.claims

    def __iter__(self) -> Iterator[str]:
        return iter(self.claims)

    def __len__(self) -> int:
        return len(self.claims)

    # ---- registered claims -----------------------------------------------

    @property
    def issuer(self) -> Optional[str]:
        iss = self.claims.get(Claim.ISSUER.value)
        return iss if isinstance(iss, str) else None

    @issuer.setter
    def issuer(self, value: Optional[str]) -> None:
        self._put(Claim.ISSUER, value)

    @property
    def audience(self) -> Optional[Union[str, List[str]]]:
        aud = self.claims.get(Claim.AUDIENCE.value)
        if isinstance(aud, str):
            return aud
        if isinstance(aud, list) and all(isinstance(a, str) for a in aud):
            return list(aud)
        return None

    @audience.setter
    def audience(self, value: Optional[Union[str, List[str]]]) -> None:
        self._put(Claim.AUDIENCE, list(value) if isinstance(value, (list, tuple)) else value)

    @property
    def expiration(self) -> Optional[datetime]:
        return self._get_date(Claim.EXPIRATION)

    @expiration.setter
    def expiration(self, value: Optional[Timestamp]) -> None:
        self._put(Claim.EXPIRATION, None if value is None else to_epoch(value))

    @property
    def not_before(self) -> Optional[datetime]:
        return self._get_date(Claim.NOT_BEFORE)

    @not_before.setter
    def not_before(self, value: Optional[Timestamp]) -> None:
        self._put(Claim.NOT_BEFORE, None if value is None else to_epoch(value))

    @property
    def issued_at(self) -> Optional[datetime]:
        return self._get_date(Claim.ISSUED_AT)

    @issued_at.setter
    def issued_at(self, value: Optional[Timestamp]) -> None:
        self._put(Claim.ISSUED_AT, None if value is None else to_epoch(value))

    # ---- validation ------------------------------------------------------

    def validate(
        self,
        audience: Optional[str] = None,
        issuer: Optional[str] = None,
        leeway: Leeway = 0,
        now: Optional[float] = None,
    ) -> None:
        """
        Check the temporal claims, then audience and issuer.

        Raises the first failure found, in this order:
            ExpiredSignature / DecodeError (exp)
            ImmatureSignature / DecodeError (nbf)
            InvalidIssuedAt / DecodeError (iat)
            InvalidAudience
            InvalidIssuer
        """
        if now is None:
            now = time.time()

        self.validate_expiration(leeway, now)
        self.validate_not_before(leeway, now)
        self.validate_issued_at(leeway, now)

        if audience is not None:
            self.validate_audience(audience)
        if issuer is not None:
            self.validate_issuer(issuer)

    def validate_expiration(self, leeway: Leeway = 0, now: Optional[float] = None) -> None:
        exp = self._timestamp(Claim.EXPIRATION, _EXP_MESSAGE)
        if exp is None:
            return
        if exp <= self._now(now) - leeway_seconds(leeway):
            raise ExpiredSignature()

    def validate_not_before(self, leeway: Leeway = 0, now: Optional[float] = None) -> None:
        nbf = self._timestamp(Claim.NOT_BEFORE, _NBF_MESSAGE)
        if nbf is None:
            return
        if nbf > self._now(now) + leeway_seconds(leeway):
            raise ImmatureSignature()

    def validate_issued_at(self, leeway: Leeway = 0, now: Optional[float] = None) -> None:
        iat = self._timestamp(Claim.ISSUED_AT, _IAT_MESSAGE)
        if iat is None:
            return
        if iat > self._now(now) + leeway_seconds(leeway):
            raise InvalidIssuedAt()

    def validate_audience(self, audience: str) -> None:
        aud = self.claims.get(Claim.AUDIENCE.value)
        if isinstance(aud, str):
            if aud != audience:
                raise InvalidAudience()
        elif isinstance(aud, list):
            if audience not in [a for a in aud if isinstance(a, str)]:
                raise InvalidAudience()
        else:
            # absent or not a string / array of strings
            raise InvalidAudience()

    def validate_issuer(self, issuer: str) -> None:
        if self.claims.get(Claim.ISSUER.value) != issuer:
            raise InvalidIssuer()

    # ---- internal helpers ------------------------------------------------

    @staticmethod
    def _now(now: Optional[float]) -> float:
        return time.time() if now is None else now

    def _timestamp(self, claim: Claim, message: str) -> Optional[float]:
        if claim.value not in self.claims:
            return None
        value = coerce_timestamp(self.claims[claim.value])
        if value is None:
            raise DecodeError(message)
        return value

    def _get_date(self, claim: Claim) -> Optional[datetime]:
        value = coerce_timestamp(self.claims.get(claim.value))
        if value is None:
            return None
        try:
            return from_epoch(value)
        except (OverflowError, OSError, ValueError):
            return None

    def _put(self, claim: Claim, value: Any) -> None:
        if value is None:
            self.claims.pop(claim.value, None)
        else:
            self.claims[claim.value] = value


class ClaimSetBuilder:
    """
    Incremental construction of a ClaimSet for encoding.

    Every setter returns the builder so calls can be chained. Nothing is
    validated here.
    """

    def __init__(self, claims: Optional[Mapping[str, ClaimValue]] = None) -> None:
        self._claims: Dict[str, ClaimValue] = dict(claims or {})

    def claim(self, key: str, value: ClaimValue) -> ClaimSetBuilder:
        self._claims[key] = value
        return self

    def issuer(self, value: str) -> ClaimSetBuilder:
        return self.claim(Claim.ISSUER.value, value)

    def subject(self, value: str) -> ClaimSetBuilder:
        return self.claim(Claim.SUBJECT.value, value)

    def audience(self, value: Union[str, List[str]]) -> ClaimSetBuilder:
        if isinstance(value, (list, tuple)):
            value = list(value)
        return self.claim(Claim.AUDIENCE.value, value)

    def expiration(self, value: Timestamp) -> ClaimSetBuilder:
        return self.claim(Claim.EXPIRATION.value, to_epoch(value))

    def not_before(self, value: Timestamp) -> ClaimSetBuilder:
        return self.claim(Claim.NOT_BEFORE.value, to_epoch(value))

    def issued_at(self, value: Timestamp) -> ClaimSetBuilder:
        return self.claim(Claim.ISSUED_AT.value, to_epoch(value))

    def jwt_id(self, value: str) -> ClaimSetBuilder:
        return self.claim(Claim.JWT_ID.value, value)

    @property
    def claims(self) -> ClaimSet:
        return ClaimSet(dict(self._claims))

    def build(self) -> ClaimSet:
        return self.claims
