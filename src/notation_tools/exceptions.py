"""
Custom exception hierarchy for notation-tools.

All exceptions carry an optional context dictionary and a list of
suggestions, rendered into the message so callers can print them as-is.

Example::

    from notation_tools.exceptions import ConfigError

    raise ConfigError(
        "Invalid JSON in config file",
        context={"file": "~/.config/notation/config.json", "line": 3},
        suggestions=["Fix the syntax error or remove the file"],
    )
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class NotationError(Exception):
    """
    Base exception for all notation-tools errors.

    Attributes:
        context: Dictionary of contextual information (file, flag, etc.)
        suggestions: List of actionable suggestions for fixing the error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context and suggestions."""
        parts = [self.message]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class ConfigError(NotationError):
    """
    Persisted configuration could not be read or decoded.

    Example::

        raise ConfigError(
            "Cannot read config file",
            context={"file": "/home/me/.config/notation/config.json"},
        )
    """

    pass


class MalformedPairError(NotationError, ValueError):
    """
    A ``key=value`` flag value is missing its separator, key or value.

    The message names the flag only; the offending token is kept on ``pair``.

    Attributes:
        flag: Name of the flag the value came from
        pair: The raw token that failed to parse
    """

    def __init__(self, flag: str, pair: str):
        self.flag = flag
        self.pair = pair
        super().__init__(
            f'could not parse flag {flag}: key-value pair requires "=" as separator'
        )


class DuplicateFlagError(NotationError, ValueError):
    """
    Two flag descriptors share a name or a shorthand.

    Raised while the flag registry is built, so a clash fails at import.
    """

    pass


__all__ = [
    "NotationError",
    "ConfigError",
    "MalformedPairError",
    "DuplicateFlagError",
]
