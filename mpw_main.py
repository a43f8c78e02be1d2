"""
MasterPass - Command Line

Usage: mpw [-u name] [-t type] [-c counter] [-V version] [-v variant] [-C context] [-s] site

Prints the password for a site. Prompts (and the identicon summary) go to
stderr, the password alone goes to stdout, so the output can be piped.

Options fall back to the MP_* environment variables, then to built-in
defaults. The master password comes from the ~/.mpw lookup file, then from
-P (testing only). In silent mode (-s) it is always read from stdin;
otherwise an empty one is prompted for.
"""

import argparse
import getpass
import logging
import sys

from masterpass import config
from masterpass.crypto import derive_master_key
from masterpass.errors import MasterPasswordError
from masterpass.identicon import identicon
from masterpass.site import site_password
from masterpass.types import default_type, type_with_name, variant_with_name
from masterpass.versions import CURRENT_VERSION

logger = logging.getLogger("mpw")

EXIT_FATAL = 2

TYPE_HELP = """\
The password's template. Defaults to MP_SITETYPE or 'long' for password,
'name' for login, 'phrase' for answer.
    x, max, maximum | 20 characters, contains symbols.
    l, long         | Copy-friendly, 14 characters, contains symbols.
    m, med, medium  | Copy-friendly, 8 characters, contains symbols.
    b, basic        | 8 characters, no symbols.
    s, short        | Copy-friendly, 4 characters, no symbols.
    i, pin          | 4 numbers.
    n, name         | 9 letter name.
    p, phrase       | 20 character sentence."""

VARIANT_HELP = """\
The kind of content to generate. Defaults to 'password'.
    p, password | The password to log in with.
    l, login    | The username to log in as.
    a, answer   | The answer to a security question."""

CONTEXT_HELP = """\
A variant-specific context. Defaults to empty.
    -v a, answer | Empty for a universal site answer or
                 | the most significant word(s) of the question."""


class Fatal(Exception):
    """Ends the program with a message on stderr."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mpw",
        description="Generate the password for a site from your full name and master password.",
        formatter_class=argparse.RawTextHelpFormatter,
        epilog="ENVIRONMENT\n"
               "    MP_FULLNAME    | The full name of the user.\n"
               "    MP_SITETYPE    | The default password template.\n"
               "    MP_SITECOUNTER | The default counter value.\n"
               "    MP_ALGORITHM   | The default algorithm version.",
    )
    parser.add_argument("site", nargs="?", help="The site name, e.g. masterpasswordapp.com")
    parser.add_argument("-u", dest="name", metavar="name",
                        help="The full name of the user. Defaults to MP_FULLNAME.")
    parser.add_argument("-t", dest="type", metavar="type", help=TYPE_HELP)
    parser.add_argument("-c", dest="counter", metavar="counter",
                        help="The value of the counter. Defaults to MP_SITECOUNTER or 1.")
    parser.add_argument("-V", dest="version", metavar="version",
                        help=f"The algorithm version to use. Defaults to MP_ALGORITHM or {CURRENT_VERSION}.")
    parser.add_argument("-v", dest="variant", metavar="variant", help=VARIANT_HELP)
    parser.add_argument("-C", dest="context", metavar="context", help=CONTEXT_HELP)
    # Passing the master password on the command line is insecure (visible in
    # the process list). Only here for non-interactive testing.
    parser.add_argument("-P", dest="password", metavar="password", help=argparse.SUPPRESS)
    parser.add_argument("-s", dest="silent", action="store_true",
                        help="Silent mode: read the master password from stdin and print only the password.")
    parser.add_argument("--debug", action="store_true", help="Log algorithm parameters to stderr.")
    return parser


def read_line(prompt=None):
    """Read one line from stdin (prompt on stderr). None on EOF."""
    if prompt:
        sys.stderr.write(prompt + " ")
        sys.stderr.flush()
    line = sys.stdin.readline()
    if not line:
        return None
    return line.rstrip("\r\n")


def printable(text):
    """Text safe to write to any stream (undecodable argv bytes are escaped)."""
    return text.encode("utf-8", "backslashreplace").decode("utf-8")


def parse_int(value, what):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise Fatal(f"Invalid {what}: {value}") from None


def resolve_options(args, defaults):
    """Merge options, environment and defaults. Returns a dict of settings."""
    name = args.name or defaults.full_name
    if not name and args.silent:
        raise Fatal("Missing full name.")
    if not name:
        name = read_line("Your full name:")
    if not name:
        raise Fatal("Missing full name.")

    site = args.site
    if not site and args.silent:
        raise Fatal("Missing site name.")
    if not site:
        site = read_line("Site name:")
    if not site:
        raise Fatal("Missing site name.")

    counter = 1 if defaults.counter is None else defaults.counter
    if args.counter is not None:
        counter = parse_int(args.counter, "site counter")
    if counter < 1:
        raise Fatal(f"Invalid site counter: {counter}")

    version = CURRENT_VERSION if defaults.version is None else defaults.version
    if args.version is not None:
        version = parse_int(args.version, "algorithm version")

    variant = variant_with_name(args.variant or "password")
    site_type = default_type(variant)
    if args.type:
        site_type = type_with_name(args.type)
    elif defaults.site_type:
        site_type = defaults.site_type

    logger.debug("algorithm version: %d", version)
    return {
        "name": name,
        "site": site,
        "counter": counter,
        "version": version,
        "variant": variant,
        "site_type": site_type,
        "context": args.context or None,
    }


def read_master_password(args, name):
    secret = args.password
    # A matching ~/.mpw entry takes precedence over -P
    found = config.lookup_secret(name)
    if found is not None:
        secret = found
    if args.silent:
        # Silent mode always reads the master password from stdin
        secret = read_line()
        if not secret:
            raise Fatal("Missing master password.")
        return secret
    while not secret:
        secret = getpass.getpass("Your master password: ")
    return secret


def run(args) -> str:
    defaults = config.Defaults.from_env()
    opts = resolve_options(args, defaults)
    secret = read_master_password(args, opts["name"])

    if not args.silent:
        glyph = identicon(opts["name"], secret).render(colored=sys.stderr.isatty())
        sys.stderr.write(f"{printable(opts['name'])}'s password for {printable(opts['site'])}:\n[ {glyph} ]: ")
        sys.stderr.flush()

    # derive_master_key copies the secret into a buffer it wipes itself
    master_key = derive_master_key(opts["name"], secret, opts["version"])
    del secret
    with master_key:
        return site_password(
            master_key, opts["site"], opts["counter"], opts["site_type"],
            opts["variant"], opts["context"], opts["version"],
        )


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        password = run(args)
    except (Fatal, MasterPasswordError) as e:
        sys.stderr.write(f"{printable(str(e))}\n")
        return EXIT_FATAL
    except KeyboardInterrupt:
        sys.stderr.write("\nExiting...\n")
        return 1

    sys.stdout.write(password + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
