"""
Value codec for the key-value store.

Values are serialised to JSON and then base64-encoded so that every
backend only ever sees plain ASCII text.

WARNING: this encoding is reversible and keyless. It provides NO
confidentiality. Anything stored through it should be treated as
plaintext on disk.
"""

import base64
import binascii
import json
from typing import Any

from budgetwise.services.storage.interface import StorageError


class CodecError(StorageError):
    """A value could not be encoded or decoded."""
    pass


def encode_value(value: Any) -> str:
    """Serialise a JSON-compatible value to base64 text."""
    try:
        payload = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise CodecError(f"Value is not JSON serialisable: {e}") from e
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")


def decode_value(text: str) -> Any:
    """Reverse encode_value()."""
    try:
        payload = base64.b64decode(text.encode("ascii"), validate=True)
        return json.loads(payload.decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise CodecError(f"Stored value could not be decoded: {e}") from e
