"""
Common flags shared by notation subcommands.

Each recurring flag is described once by a FlagDescriptor; subcommands bind
it onto their own argparse parser so every command spells the flag, its
shorthand and its help text the same way.

Usage:
    from notation_tools.cli.flags import (
        add_key_flag,
        add_plugin_config_flag,
        add_signature_format_flag,
    )
    from notation_tools.cli.plugin_config import parse_plugin_config

    parser = subparsers.add_parser("sign", help="Sign artifacts")
    add_key_flag(parser)
    add_signature_format_flag(parser)
    add_plugin_config_flag(parser)

    args = parser.parse_args(argv)
    plugin_config = parse_plugin_config(args.plugin_config)
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import timedelta
from types import MappingProxyType

from notation_tools import envelope
from notation_tools.cli.duration import duration_type
from notation_tools.config import ConfigLoader, get_config_loader
from notation_tools.exceptions import ConfigError, DuplicateFlagError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlagDescriptor:
    """Name, optional one-character shorthand and help text of a CLI flag."""

    name: str
    usage: str
    shorthand: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("flag name must not be empty")
        if self.shorthand is not None and len(self.shorthand) != 1:
            raise ValueError(
                f"shorthand for flag {self.name!r} must be a single character, "
                f"got {self.shorthand!r}"
            )

    @property
    def option_strings(self) -> tuple[str, ...]:
        """Option strings for argparse, e.g. ("-k", "--key")."""
        if self.shorthand:
            return (f"-{self.shorthand}", f"--{self.name}")
        return (f"--{self.name}",)

    @property
    def dest(self) -> str:
        """Default namespace attribute for the parsed value."""
        return self.name.replace("-", "_")


FLAG_KEY = FlagDescriptor(
    name="key",
    shorthand="k",
    usage="signing key name, for a key previously added to notation's key list.",
)

FLAG_SIGNATURE_FORMAT = FlagDescriptor(
    name="signature-format",
    usage="signature envelope format, options: 'jws', 'cose'",
)

FLAG_TIMESTAMP = FlagDescriptor(
    name="timestamp",
    shorthand="t",
    usage="timestamp the signed signature via the remote TSA",
)

FLAG_EXPIRY = FlagDescriptor(
    name="expiry",
    shorthand="e",
    usage=(
        'optional expiry that provides a "best by use" time for the artifact. '
        "The duration is specified in minutes(m) and/or hours(h). "
        "For example: 12h, 30m, 3h20m"
    ),
)

FLAG_REFERENCE = FlagDescriptor(
    name="reference",
    shorthand="r",
    usage="original reference",
)

FLAG_PLUGIN_CONFIG = FlagDescriptor(
    name="plugin-config",
    shorthand="c",
    usage=(
        "{key}={value} pairs that are passed as it is to a plugin, "
        "refer plugin's documentation to set appropriate values"
    ),
)


def build_registry(descriptors: Iterable[FlagDescriptor]) -> Mapping[str, FlagDescriptor]:
    """
    Build a read-only name -> descriptor mapping.

    Args:
        descriptors: Flag descriptors to register

    Returns:
        Immutable mapping keyed by flag name

    Raises:
        DuplicateFlagError: If two descriptors share a name or a shorthand
    """
    by_name: dict[str, FlagDescriptor] = {}
    by_shorthand: dict[str, FlagDescriptor] = {}

    for flag in descriptors:
        if flag.name in by_name:
            raise DuplicateFlagError(
                f"Duplicate flag name: --{flag.name}",
                context={"flag": flag.name},
            )
        if flag.shorthand is not None:
            other = by_shorthand.get(flag.shorthand)
            if other is not None:
                raise DuplicateFlagError(
                    f"Duplicate flag shorthand: -{flag.shorthand}",
                    context={"flags": f"--{other.name}, --{flag.name}"},
                )
            by_shorthand[flag.shorthand] = flag
        by_name[flag.name] = flag

    return MappingProxyType(by_name)


FLAGS = build_registry(
    [
        FLAG_KEY,
        FLAG_SIGNATURE_FORMAT,
        FLAG_TIMESTAMP,
        FLAG_EXPIRY,
        FLAG_REFERENCE,
        FLAG_PLUGIN_CONFIG,
    ]
)


def get_flag(name: str) -> FlagDescriptor:
    """Look up a shared flag by name (raises KeyError if unknown)."""
    return FLAGS[name]


# Generic binders


def bind_string(
    parser: argparse.ArgumentParser,
    flag: FlagDescriptor,
    dest: str | None = None,
    default: str = "",
) -> argparse.Action:
    """Register a string-valued flag."""
    return parser.add_argument(
        *flag.option_strings,
        dest=dest or flag.dest,
        default=default,
        help=flag.usage,
    )


def bind_string_list(
    parser: argparse.ArgumentParser,
    flag: FlagDescriptor,
    dest: str | None = None,
) -> argparse.Action:
    """Register a repeatable string flag; the value is None when never given."""
    return parser.add_argument(
        *flag.option_strings,
        dest=dest or flag.dest,
        action="append",
        default=None,
        metavar="KEY=VALUE",
        help=flag.usage,
    )


def bind_duration(
    parser: argparse.ArgumentParser,
    flag: FlagDescriptor,
    dest: str | None = None,
    default: timedelta = timedelta(0),
) -> argparse.Action:
    """Register a duration flag parsed into a timedelta."""
    return parser.add_argument(
        *flag.option_strings,
        dest=dest or flag.dest,
        type=duration_type,
        default=default,
        metavar="DURATION",
        help=flag.usage,
    )


# Shared flags


def add_key_flag(parser: argparse.ArgumentParser, dest: str | None = None) -> argparse.Action:
    """Add -k/--key."""
    return bind_string(parser, FLAG_KEY, dest)


def resolve_signature_format_default(loader: ConfigLoader | None = None) -> str:
    """
    Work out the default for --signature-format.

    Uses signatureFormat from the user config when it is set, otherwise
    "jws". A config that cannot be loaded counts as unset.

    Args:
        loader: Config loader to consult (default: the process-wide loader)

    Returns:
        The signature format to use as the flag default
    """
    if loader is None:
        loader = get_config_loader()

    default = envelope.DEFAULT_SIGNATURE_FORMAT
    try:
        config = loader.load_once()
    except ConfigError as e:
        logger.debug("Ignoring unreadable config, signature format is %s: %s", default, e)
        return default

    if config.signature_format:
        default = config.signature_format
    logger.debug("Signature format default: %s", default)
    return default


def add_signature_format_flag(
    parser: argparse.ArgumentParser,
    dest: str | None = None,
    loader: ConfigLoader | None = None,
) -> argparse.Action:
    """Add --signature-format, defaulting from the user config."""
    return bind_string(
        parser,
        FLAG_SIGNATURE_FORMAT,
        dest,
        default=resolve_signature_format_default(loader),
    )


def add_timestamp_flag(
    parser: argparse.ArgumentParser, dest: str | None = None
) -> argparse.Action:
    """Add -t/--timestamp."""
    return bind_string(parser, FLAG_TIMESTAMP, dest)


def add_expiry_flag(parser: argparse.ArgumentParser, dest: str | None = None) -> argparse.Action:
    """Add -e/--expiry. A zero duration means no expiry was requested."""
    return bind_duration(parser, FLAG_EXPIRY, dest)


def add_reference_flag(
    parser: argparse.ArgumentParser, dest: str | None = None
) -> argparse.Action:
    """Add -r/--reference."""
    return bind_string(parser, FLAG_REFERENCE, dest)


def add_plugin_config_flag(
    parser: argparse.ArgumentParser, dest: str | None = None
) -> argparse.Action:
    """Add -c/--plugin-config; feed the collected values to parse_plugin_config()."""
    return bind_string_list(parser, FLAG_PLUGIN_CONFIG, dest)
