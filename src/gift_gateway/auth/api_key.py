"""Gateway API-key check.

Callers send the key in the ``API-Key`` header. Surrounding whitespace is
trimmed; an empty key never matches. Keys of different length are rejected
before the constant-time comparison, so only equal-length guesses take
constant time.
"""

import hmac

API_KEY_HEADER = "API-Key"


def extract_api_key(header_value: str | None) -> str:
    return (header_value or "").strip()


def is_valid_api_key(input_key: str, valid_key: str) -> bool:
    if not input_key or not valid_key:
        return False
    if len(input_key) != len(valid_key):
        return False
    return hmac.compare_digest(input_key.encode(), valid_key.encode())
