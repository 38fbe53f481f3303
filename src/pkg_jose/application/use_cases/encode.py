from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from ...adapters.pyjwt.codec import b64url_encode, encode_json_segment
from ...domain.constants import DEFAULT_TOKEN_TYPE, HeaderParameter
from ...domain.entities import ClaimSet
from ...domain.ports import Algorithm


def build_header(algorithm: Algorithm, headers: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    Caller headers, plus `typ` (only if missing) and `alg` (always set from
    the algorithm, replacing any caller value).
    """
    result: Dict[str, Any] = dict(headers or {})
    result.setdefault(HeaderParameter.TYPE.value, DEFAULT_TOKEN_TYPE)
    result[HeaderParameter.ALGORITHM.value] = algorithm.name
    return result


@dataclass(frozen=True, slots=True)
class EncodeTokenUseCase:
    """
    Application use case:
    - serialize header and claims to base64url JSON
    - sign `header.payload` with the algorithm
    - return the compact token

    JSON serialization is left to the `json` module; no canonical form is
    imposed, so the same claims can serialize differently elsewhere.
    """

    algorithm: Algorithm
    headers: Mapping[str, Any] = field(default_factory=dict)

    def execute(self, claims: Union[ClaimSet, Mapping[str, Any]]) -> str:
        """
        Raises:
            TypeError / ValueError if a claim or header is not representable
            as JSON, or the algorithm cannot sign (programmer errors).
        """
        payload = claims.claims if isinstance(claims, ClaimSet) else dict(claims)

        header_segment = encode_json_segment(build_header(self.algorithm, self.headers))
        payload_segment = encode_json_segment(payload)
        signing_input = f"{header_segment}.{payload_segment}"

        signature = self.algorithm.sign(signing_input)
        return f"{signing_input}.{b64url_encode(signature)}"
