"""Shared command-line flags and helpers for notation subcommands."""

from notation_tools.cli.duration import duration_type, parse_duration
from notation_tools.cli.flags import (
    FLAG_EXPIRY,
    FLAG_KEY,
    FLAG_PLUGIN_CONFIG,
    FLAG_REFERENCE,
    FLAG_SIGNATURE_FORMAT,
    FLAG_TIMESTAMP,
    FLAGS,
    FlagDescriptor,
    add_expiry_flag,
    add_key_flag,
    add_plugin_config_flag,
    add_reference_flag,
    add_signature_format_flag,
    add_timestamp_flag,
    bind_duration,
    bind_string,
    bind_string_list,
    build_registry,
    get_flag,
    resolve_signature_format_default,
)
from notation_tools.cli.plugin_config import parse_plugin_config

__all__ = [
    "FLAG_EXPIRY",
    "FLAG_KEY",
    "FLAG_PLUGIN_CONFIG",
    "FLAG_REFERENCE",
    "FLAG_SIGNATURE_FORMAT",
    "FLAG_TIMESTAMP",
    "FLAGS",
    "FlagDescriptor",
    "add_expiry_flag",
    "add_key_flag",
    "add_plugin_config_flag",
    "add_reference_flag",
    "add_signature_format_flag",
    "add_timestamp_flag",
    "bind_duration",
    "bind_string",
    "bind_string_list",
    "build_registry",
    "duration_type",
    "get_flag",
    "parse_duration",
    "parse_plugin_config",
    "resolve_signature_format_default",
]
