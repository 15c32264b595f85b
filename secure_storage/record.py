"""
Encrypted record — the on-disk unit of secure storage.

A record file holds a compact JSON object:
    {"ciphertext": "<base64>", "nonce": "<base64>", "version": 1}

Security Note:
    Records never carry plaintext, the storage key or key material.
"""
import orjson
from pydantic import BaseModel, ConfigDict, ValidationError

from .config import RECORD_VERSION
from .exceptions import InvalidFormat

SUPPORTED_VERSIONS = frozenset({RECORD_VERSION})


class EncryptedRecord(BaseModel):
    """Authenticated-encryption output plus the nonce that produced it."""

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    ciphertext: str
    nonce: str
    version: int = RECORD_VERSION


def dump_record(record: EncryptedRecord) -> bytes:
    """Serialize a record to its on-disk JSON bytes."""
    return orjson.dumps(record.model_dump())


def load_record(data: bytes | str) -> EncryptedRecord:
    """Parse on-disk JSON bytes into an EncryptedRecord.

    Args:
        data: Raw file content.

    Returns:
        The parsed record.

    Raises:
        InvalidFormat: If the content is not JSON, misses or adds fields,
            has wrongly typed fields, or uses an unsupported version.
    """
    try:
        parsed = orjson.loads(data)
    except orjson.JSONDecodeError as err:
        raise InvalidFormat(f"Invalid format: JSON deserialization failed: {err}") from err
    if not isinstance(parsed, dict):
        raise InvalidFormat("Invalid format: record must be a JSON object")
    try:
        record = EncryptedRecord.model_validate(parsed)
    except ValidationError as err:
        raise InvalidFormat(
            f"Invalid format: {err.error_count()} invalid record field(s)"
        ) from err
    if record.version not in SUPPORTED_VERSIONS:
        raise InvalidFormat(
            f"Invalid format: unsupported record version {record.version}"
        )
    return record
