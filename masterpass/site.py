"""
MasterPass - Site Password Synthesis

Turns a 32-byte site seed into a readable password:

    seed[0]      → picks one template from the site type's template set
    seed[i + 1]  → picks the character for template position i from its class

Example (type LONG, template "CvcvnoCvcvCvcv"):
    C = consonant, v = vowel, n = digit, o = symbol  →  "Jejr5[RepuSosp"

The mapping is pure table lookup (see versions.py), so it is tested on its
own without touching scrypt or HMAC.
"""

import logging
from typing import List, Optional

from . import crypto
from .errors import InvalidKey, InvalidTemplate
from .types import VARIANT_TYPES, SiteType, SiteVariant, default_type
from .versions import CURRENT_VERSION, SEED_SIGNED_SHORT, AlgorithmParams, params_for

logger = logging.getLogger(__name__)


# =============================================================================
# Seed → Characters
# =============================================================================

def seed_values(seed: bytes, params: AlgorithmParams) -> List[int]:
    """
    Read the seed bytes the way the given version does.

    Version 0 read each byte as a signed char widened to 16 bits and
    byte-swapped, i.e. (b << 8) | (0xFF if b >= 0x80 else 0x00).
    Later versions use the plain unsigned byte.
    """
    if params.seed_reading == SEED_SIGNED_SHORT:
        return [(b << 8) | (0xFF if b & 0x80 else 0x00) for b in seed]
    return list(seed)


def templates_for(site_type: SiteType, variant: SiteVariant, params: AlgorithmParams):
    """Template set for a type, after checking it is allowed for the variant."""
    if site_type not in VARIANT_TYPES.get(variant, ()):
        raise InvalidTemplate(f"No template for type {site_type!r} with variant {variant!r}")
    try:
        return params.templates[site_type]
    except KeyError:
        raise InvalidTemplate(f"No template for type {site_type!r} in version {params.version}") from None


def template_for(templates, seed_value: int) -> str:
    return templates[seed_value % len(templates)]


def character_for(symbol: str, seed_value: int, params: AlgorithmParams) -> str:
    """Pick a character from the class named by a template symbol."""
    try:
        alphabet = params.classes[symbol]
    except KeyError:
        raise InvalidTemplate(f"Unknown character class {symbol!r}") from None
    return alphabet[seed_value % len(alphabet)]


def password_from_seed(seed: bytes, site_type: SiteType, variant: SiteVariant, params: AlgorithmParams) -> str:
    """Map a site seed through the template tables (no hashing involved)."""
    templates = templates_for(site_type, variant, params)
    values = seed_values(seed, params)
    template = template_for(templates, values[0])
    # Every template is shorter than the seed (checked by the table tests)
    return "".join(
        character_for(symbol, values[i + 1], params)
        for i, symbol in enumerate(template)
    )


# =============================================================================
# Public API
# =============================================================================

def site_password(
    master_key: crypto.KeyLike,
    site: str,
    counter: int = 1,
    site_type: Optional[SiteType] = None,
    variant: SiteVariant = SiteVariant.PASSWORD,
    context: Optional[str] = None,
    version: Optional[int] = None,
) -> str:
    """
    Generate the password (or login, or answer) for one site.

    Args:
        master_key: From derive_master_key() (or 64 raw bytes)
        site: Site name, e.g. "masterpasswordapp.com"
        counter: Bump to rotate a site's password (1..2**32-1)
        site_type: Output shape; None uses the variant's default type
        variant: PASSWORD, LOGIN or ANSWER
        context: Optional disambiguator, e.g. the security question's keyword
        version: Algorithm version; None uses the key's own version

    Returns:
        The site password string

    Raises:
        InvalidKey, InvalidInput, InvalidCounter, InvalidTemplate, UnknownVersion
    """
    key_version = getattr(master_key, "version", None)
    if version is None:
        version = CURRENT_VERSION if key_version is None else key_version
    params = params_for(version)
    if key_version is not None and key_version != params.version:
        raise InvalidKey(f"Master key is for version {key_version}, not {params.version}")

    if not isinstance(variant, SiteVariant):
        raise InvalidTemplate(f"Not a site variant: {variant!r}")
    if site_type is None:
        site_type = default_type(variant)
    if not isinstance(site_type, SiteType):
        raise InvalidTemplate(f"Not a site type: {site_type!r}")

    seed = crypto.site_seed(master_key, site, counter, variant, context, params)
    logger.debug("Site password: version=%d type=%s variant=%s counter=%d",
                 params.version, site_type.value, variant.value, counter)
    return password_from_seed(seed, site_type, variant, params)


def password_for_site(
    identity: str,
    secret: crypto.SecretLike,
    site: str,
    counter: int = 1,
    site_type: Optional[SiteType] = None,
    variant: SiteVariant = SiteVariant.PASSWORD,
    context: Optional[str] = None,
    version: int = CURRENT_VERSION,
) -> str:
    """
    One-shot helper: derive the master key, generate, wipe the key.

    Prefer derive_master_key() + site_password() when generating for several
    sites, since scrypt is deliberately slow.
    """
    with crypto.derive_master_key(identity, secret, version) as master_key:
        return site_password(master_key, site, counter, site_type, variant, context, version)
