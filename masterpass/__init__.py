"""
MasterPass - Stateless Site Password Generator

Generates site passwords from your full name and one master password.
Nothing is stored: the same inputs always give the same password.

Key Features:
- Stateless: no vault, no sync, nothing to back up
- Strong key stretching: scrypt (N=32768, r=8, p=2) → 64-byte master key
- Per-site seed: HMAC-SHA256 with distinct scopes for password/login/answer
- Versioned: every released algorithm version reproduces its old outputs

Components:
- crypto.py: scrypt master key, HMAC site seed, wiping secret buffers
- site.py: seed → template → password
- versions.py: frozen per-version constant tables
- types.py: site types and variants, name lookup
- identicon.py: confirmation glyph for the master password
- config.py: MP_* environment defaults and ~/.mpw lookup file

Usage:
    from masterpass import derive_master_key, site_password, SiteType

    with derive_master_key("Robert Lee Mitchell", "banana colored duckling") as key:
        site_password(key, "masterpasswordapp.com", 1, SiteType.LONG)   # "Jejr5[RepuSosp"
"""

from .crypto import MasterKey, SecretBuffer, derive_master_key, site_seed
from .errors import (
    InvalidCounter,
    InvalidInput,
    InvalidKey,
    InvalidTemplate,
    KeyDerivationFailed,
    MasterPasswordError,
    UnknownVersion,
)
from .identicon import NEUTRAL_IDENTICON, Identicon
from .site import password_for_site, site_password
from .types import SiteType, SiteVariant, default_type, type_with_name, variant_with_name
from .versions import CURRENT_VERSION

__version__ = "0.3.0"

__all__ = [
    "CURRENT_VERSION",
    "Identicon",
    "InvalidCounter",
    "InvalidInput",
    "InvalidKey",
    "InvalidTemplate",
    "KeyDerivationFailed",
    "MasterKey",
    "MasterPasswordError",
    "NEUTRAL_IDENTICON",
    "SecretBuffer",
    "SiteType",
    "SiteVariant",
    "UnknownVersion",
    "default_type",
    "derive_master_key",
    "password_for_site",
    "site_password",
    "site_seed",
    "type_with_name",
    "variant_with_name",
]
