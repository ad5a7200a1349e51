"""Parsing for the repeatable ``--plugin-config key=value`` flag."""

from __future__ import annotations

from collections.abc import Iterable

from notation_tools.cli.flags import FLAG_PLUGIN_CONFIG
from notation_tools.exceptions import MalformedPairError


def parse_plugin_config(tokens: Iterable[str] | None) -> dict[str, str]:
    """
    Turn raw ``key=value`` tokens into a mapping.

    Each token is split at its first "=", so values may contain "=".
    When a key repeats, the later value wins.

    Args:
        tokens: Raw flag values in command-line order; None when the flag
            was never given

    Returns:
        Mapping of key to value (empty when there are no tokens)

    Raises:
        MalformedPairError: If a token has no "=", an empty key or an empty value
    """
    plugin_config: dict[str, str] = {}
    for pair in tokens or ():
        key, sep, value = pair.partition("=")
        if not sep or not key or not value:
            raise MalformedPairError(FLAG_PLUGIN_CONFIG.name, pair)
        plugin_config[key] = value
    return plugin_config
