# Copyright 2026-present Kensho Technologies, LLC.
from hashlib import sha256
from typing import Union

from .canonicalization import canonicalize_introspection_response
from .codec import decode_introspection_response, encode_json_value, introspection_response_to_dict


def compute_introspection_fingerprint(raw_payload: Union[bytes, str]) -> str:
    """Compute a fingerprint compactly representing the schema described by the payload.

    The fingerprint is not sensitive to things like type or field order, nor to the errors and
    extensions of the response: it only covers the canonicalized "data" member. If two payloads
    have the same fingerprint, then they describe the same schema.

    Args:
        raw_payload: the raw JSON of an introspection response.

    Returns:
        the hex-encoded sha256 digest of the compact canonical JSON of the "data" member.

    Raises:
        IntrospectionDecodeError: if the payload is not a valid introspection response.
    """
    response = canonicalize_introspection_response(decode_introspection_response(raw_payload))
    canonical_data = introspection_response_to_dict(response).get("data")
    return sha256(encode_json_value(canonical_data)).hexdigest()
