"""
Secure Storage Crypto Core — master key derivation and record encryption.

- Key derivation: SHA-256(app_name | machine identity | salt) → 32-byte key
- Encryption: AES-256-GCM, fresh random 96-bit nonce per call, no AAD

Security Note:
    The master key is derived from public machine information. It protects
    records against casual disk inspection only, not against a local
    attacker able to reproduce the inputs or read process memory.
    Never log plaintext, ciphertext or key bytes.
"""
import os
import base64
import binascii
import logging

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .config import KEY_DERIVATION_SALT, RECORD_VERSION
from .exceptions import (
    AuthenticationFailed,
    EncryptionFailed,
    InvalidEncoding,
)
from .identity import IdentityProvider, default_identity_provider
from .record import EncryptedRecord

logger = logging.getLogger("secure_storage")

NONCE_SIZE = 12  # 96-bit nonce
KEY_LENGTH = 32  # AES-256
TAG_SIZE = 16  # GCM tag


# ---------------------------------------------------------------------------
# Key derivation
# ---------------------------------------------------------------------------

def derive_master_key(
    app_name: str,
    identity_provider: IdentityProvider | None = None,
    salt: str = KEY_DERIVATION_SALT,
) -> bytes:
    """Derive the 32-byte master key for this installation.

    The hash input is ``app_name + machine_identity + salt`` encoded as
    UTF-8. Same app name on the same machine always yields the same key.

    Args:
        app_name: Application name.
        identity_provider: Source of the machine identity; defaults to the
            provider for the running platform.
        salt: Fixed literal separating this derivation scheme.

    Returns:
        32-byte key suitable for AES-256-GCM.
    """
    provider = identity_provider or default_identity_provider()
    digest = hashes.Hash(hashes.SHA256())
    digest.update(app_name.encode("utf-8"))
    digest.update(provider.machine_identity().encode("utf-8"))
    digest.update(salt.encode("utf-8"))
    return digest.finalize()


def generate_nonce() -> bytes:
    """Return a fresh 96-bit nonce from the OS CSPRNG."""
    return os.urandom(NONCE_SIZE)


# ---------------------------------------------------------------------------
# Text encoding
# ---------------------------------------------------------------------------

def _b64e(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _b64d(value: str, field: str) -> bytes:
    """Strict base64 decode, mapping failures to InvalidEncoding."""
    try:
        return base64.b64decode(value.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as err:
        raise InvalidEncoding(
            f"Decryption failed: invalid base64 in {field}"
        ) from err


# ---------------------------------------------------------------------------
# Encrypt / decrypt
# ---------------------------------------------------------------------------

def encrypt_value(plaintext: str, key: bytes) -> EncryptedRecord:
    """Encrypt ``plaintext`` into a versioned record.

    Args:
        plaintext: Secret text to encrypt.
        key: 32-byte master key.

    Returns:
        EncryptedRecord with base64 ciphertext (payload + tag) and nonce.

    Raises:
        EncryptionFailed: If the cipher rejects the key or input.
    """
    nonce = generate_nonce()
    try:
        ct = AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), None)
    except (ValueError, TypeError, OverflowError, UnicodeEncodeError) as err:
        raise EncryptionFailed(f"Encryption failed: {err}") from err
    return EncryptedRecord(
        ciphertext=_b64e(ct),
        nonce=_b64e(nonce),
        version=RECORD_VERSION,
    )


def decrypt_record(record: EncryptedRecord, key: bytes) -> str:
    """Decrypt a record back into text.

    Args:
        record: Record produced by :func:`encrypt_value`.
        key: 32-byte master key.

    Returns:
        Decrypted text.

    Raises:
        InvalidEncoding: Malformed base64, wrong nonce size, or plaintext
            that is not valid UTF-8.
        AuthenticationFailed: The GCM tag did not verify. Wrong key and
            tampered data are deliberately indistinguishable.
    """
    ct = _b64d(record.ciphertext, "ciphertext")
    nonce = _b64d(record.nonce, "nonce")
    if len(nonce) != NONCE_SIZE:
        raise InvalidEncoding(
            f"Decryption failed: nonce must be {NONCE_SIZE} bytes"
        )
    if len(ct) < TAG_SIZE:
        raise AuthenticationFailed()
    try:
        plaintext = AESGCM(key).decrypt(nonce, ct, None)
    except InvalidTag as err:
        raise AuthenticationFailed() from err
    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as err:
        raise InvalidEncoding(
            "Decryption failed: invalid UTF-8 in decrypted data"
        ) from err
