"""
MasterPass - Configuration

Defaults for the command-line tool only. The algorithm itself never reads
the environment or any file; its only configuration is versions.py.

Environment:
    MP_FULLNAME     The full name of the user.
    MP_SITETYPE     The default password template (e.g. "long", "x").
    MP_SITECOUNTER  The default counter value.
    MP_ALGORITHM    The default algorithm version.

Lookup file (~/.mpw), one user per line:
    Robert Lee Mitchell:banana colored duckling
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import InvalidInput
from .types import SiteType, type_with_name

logger = logging.getLogger(__name__)

ENV_FULLNAME = "MP_FULLNAME"
ENV_SITETYPE = "MP_SITETYPE"
ENV_SITECOUNTER = "MP_SITECOUNTER"
ENV_ALGORITHM = "MP_ALGORITHM"

DEFAULT_CONFIG_PATH = os.path.join("~", ".mpw")


@dataclass
class Defaults:
    full_name: Optional[str] = None
    site_type: Optional[SiteType] = None
    counter: Optional[int] = None
    version: Optional[int] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Defaults":
        """Read MP_* variables; empty values count as unset."""
        env = os.environ if environ is None else environ
        site_type = env.get(ENV_SITETYPE) or None
        return cls(
            full_name=env.get(ENV_FULLNAME) or None,
            site_type=type_with_name(site_type) if site_type else None,
            counter=_int_from_env(env, ENV_SITECOUNTER),
            version=_int_from_env(env, ENV_ALGORITHM),
        )


def _int_from_env(env: Mapping[str, str], name: str) -> Optional[int]:
    value = env.get(name)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise InvalidInput(f"Invalid {name}: {value}") from None


def config_path(path: Optional[str] = None) -> str:
    return os.path.expanduser(path or DEFAULT_CONFIG_PATH)


def lookup_secret(full_name: str, path: Optional[str] = None) -> Optional[str]:
    """
    Find a user's master password in the lookup file.

    Returns:
        The text after the first ':' on the first line whose name matches
        exactly, or None. A file that is missing or can't be read as UTF-8
        text is skipped.
    """
    try:
        with open(config_path(path), "r", encoding="utf-8") as f:
            for line in f:
                name, sep, secret = line.rstrip("\r\n").partition(":")
                if sep and name == full_name:
                    return secret
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Ignoring lookup file %s: %s", config_path(path), type(e).__name__)
        return None
    return None
