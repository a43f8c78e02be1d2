"""
MasterPass - Cryptography Module

This file contains the two keyed steps of the algorithm:

    1. Full Name + Master Password → scrypt → Master Key (64 bytes)
    2. Master Key → HMAC-SHA256(scope | site | counter | context) → Site Seed (32 bytes)

The seed is turned into a readable password by site.py, which is nothing
but table lookups. Nothing here is stored anywhere: the same inputs always
give the same key and the same seed.

Secret lifetime:
    - The master password is copied into a SecretBuffer and wiped as soon as
      scrypt returns (or fails).
    - The master key lives in a MasterKey (a SecretBuffer). Use it in a
      `with` block so it is wiped on every exit path.
"""

import hashlib
import hmac
import logging
import struct
from typing import Optional, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from .errors import InvalidCounter, InvalidInput, InvalidKey, KeyDerivationFailed
from .types import SiteVariant
from .versions import CURRENT_VERSION, AlgorithmParams, measure, params_for

logger = logging.getLogger(__name__)

MAX_COUNTER = 2**32 - 1  # counter is encoded as a 32-bit big-endian integer


# =============================================================================
# Secret Buffers
# =============================================================================

class SecretBuffer:
    """
    Owning wrapper around a mutable byte buffer that is zeroed on release.

    Usage:
        with SecretBuffer.from_text(password) as secret:
            use(secret.raw)
        # secret.raw is now all zero bytes

    Python may still hold other copies of the same data (the original str,
    intermediate bytes objects). This class bounds the lifetime of the copy
    it owns; it cannot reach the others.
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview] = b""):
        self._buf = bytearray(data)
        self._wiped = False

    @classmethod
    def from_text(cls, text: str) -> "SecretBuffer":
        """Encode text as UTF-8 straight into a new buffer."""
        buf = cls()
        buf._buf = bytearray(text, "utf-8")
        return buf

    @property
    def raw(self) -> bytearray:
        """The backing buffer (do not keep references past wipe())."""
        if self._wiped:
            raise InvalidKey("Secret buffer has already been wiped")
        return self._buf

    @property
    def wiped(self) -> bool:
        return self._wiped

    def wipe(self) -> None:
        """Overwrite the buffer with zeros in place."""
        buf = getattr(self, "_buf", None)
        if buf is not None:
            buf[:] = bytes(len(buf))
        self._wiped = True

    def __len__(self) -> int:
        return len(self._buf)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.wipe()
        return False

    def __del__(self):
        self.wipe()

    def __eq__(self, other):
        if isinstance(other, SecretBuffer):
            other = other._buf
        if not isinstance(other, (bytes, bytearray, memoryview)):
            return NotImplemented
        return hmac.compare_digest(bytes(self._buf), bytes(other))

    __hash__ = None

    def __repr__(self):
        # Never show the content
        return f"<{type(self).__name__} len={len(self._buf)} wiped={self._wiped}>"


class MasterKey(SecretBuffer):
    """A derived master key, tagged with the algorithm version that made it."""

    def __init__(self, data: Union[bytes, bytearray, memoryview] = b"", version: int = CURRENT_VERSION):
        super().__init__(data)
        self.version = version


SecretLike = Union[str, bytes, bytearray, memoryview, SecretBuffer]
KeyLike = Union[MasterKey, SecretBuffer, bytes, bytearray, memoryview]


# =============================================================================
# Key Derivation
# =============================================================================

def encode_text(text: str, what: str) -> bytes:
    """UTF-8 encode, reporting unencodable text (lone surrogates) as InvalidInput."""
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError:
        raise InvalidInput(f"{what} is not valid UTF-8 text") from None


def master_key_salt(identity: str, params: AlgorithmParams) -> bytes:
    """
    Build the scrypt salt: key scope | uint32 len(identity) | identity.

    Versions before 3 count the identity in characters, later ones in bytes.
    """
    name = encode_text(identity, "Full name")
    return params.key_scope + struct.pack(">I", measure(identity, params.name_length)) + name


def derive_master_key(identity: str, secret: SecretLike, version: int = CURRENT_VERSION) -> MasterKey:
    """
    Derive a user's master key from their full name and master password.

    Why scrypt?
    - Memory-hard: every guess costs ~32 MB of RAM, expensive on GPUs
    - Cost parameters depend only on the version, never on the inputs

    Args:
        identity: The user's full name (non-empty)
        secret: The master password. A str, bytes or bytearray is copied
                into a private buffer that is wiped before returning. A
                SecretBuffer is used as-is and stays owned by the caller.
        version: Algorithm version (default: current)

    Returns:
        64-byte MasterKey (wipe it, or use it in a `with` block)

    Raises:
        UnknownVersion, InvalidInput, KeyDerivationFailed
    """
    params = params_for(version)
    if not isinstance(identity, str) or not identity:
        raise InvalidInput("Full name must be a non-empty string")
    salt = master_key_salt(identity, params)

    if isinstance(secret, SecretBuffer):
        owned = None
        secret_buf = secret
    elif isinstance(secret, str):
        try:
            owned = secret_buf = SecretBuffer.from_text(secret)
        except UnicodeEncodeError:
            raise InvalidInput("Master password is not valid UTF-8 text") from None
    elif isinstance(secret, (bytes, bytearray, memoryview)):
        owned = secret_buf = SecretBuffer(secret)
    else:
        raise InvalidInput("Master password must be text or bytes")

    try:
        if len(secret_buf) == 0 or secret_buf.wiped:
            raise InvalidInput("Master password must not be empty")

        logger.debug("Deriving master key: version=%d N=%d r=%d p=%d",
                     params.version, params.scrypt_n, params.scrypt_r, params.scrypt_p)
        try:
            kdf = Scrypt(
                salt=salt,
                length=params.key_size,
                n=params.scrypt_n,
                r=params.scrypt_r,
                p=params.scrypt_p,
            )
            derived = kdf.derive(secret_buf.raw)
        except (MemoryError, ValueError, UnsupportedAlgorithm) as e:
            raise KeyDerivationFailed(f"scrypt failed: {type(e).__name__}") from e

        key = MasterKey(derived, version=params.version)
        del derived
        return key
    finally:
        if owned is not None:
            owned.wipe()


# =============================================================================
# Site Seed
# =============================================================================

def _key_bytes(master_key: Optional[KeyLike], params: AlgorithmParams):
    """Validate a master key and return a buffer usable as an HMAC key."""
    if master_key is None:
        raise InvalidKey("No master key")
    if isinstance(master_key, SecretBuffer):
        if master_key.wiped:
            raise InvalidKey("Master key has been wiped")
        raw = master_key.raw
    elif isinstance(master_key, (bytes, bytearray, memoryview)):
        raw = master_key
    else:
        raise InvalidKey(f"Master key must be bytes, not {type(master_key).__name__}")

    if len(raw) != params.key_size:
        raise InvalidKey(f"Master key must be {params.key_size} bytes, got {len(raw)}")
    return raw


def site_seed(
    master_key: KeyLike,
    site: str,
    counter: int,
    variant: SiteVariant,
    context: Optional[str],
    params: AlgorithmParams,
) -> bytes:
    """
    Compute the 32-byte seed for one site password.

    Message layout (all integers uint32 big-endian):
        scope(variant) | len(site) | site | counter [| len(context) | context]

    The scope differs per variant, so a site's password, login and answer
    are unrelated. The context is only appended when non-empty.

    Returns:
        HMAC-SHA256(master_key, message)
    """
    key = _key_bytes(master_key, params)
    if not isinstance(site, str) or not site:
        raise InvalidInput("Site name must be a non-empty string")
    if isinstance(counter, bool) or not isinstance(counter, int):
        raise InvalidCounter(f"Site counter must be an integer, not {type(counter).__name__}")
    if not 1 <= counter <= MAX_COUNTER:
        raise InvalidCounter(f"Site counter must be in 1..{MAX_COUNTER}, got {counter}")
    try:
        scope = params.scopes[variant]
    except KeyError:
        raise InvalidInput(f"Not a site variant: {variant!r}") from None

    if context is not None and not isinstance(context, str):
        raise InvalidInput(f"Context must be a string, not {type(context).__name__}")
    site_bytes = encode_text(site, "Site name")
    context_bytes = encode_text(context, "Context") if context else b""

    message = bytearray(scope)
    message += struct.pack(">I", measure(site, params.site_length))
    message += site_bytes
    message += struct.pack(">I", counter)
    if context_bytes:
        message += struct.pack(">I", measure(context, params.site_length))
        message += context_bytes

    return hmac.new(key, bytes(message), hashlib.sha256).digest()

