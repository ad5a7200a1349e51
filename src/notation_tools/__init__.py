"""
notation-tools: shared flag layer for the notation signing CLI.

Modules:
    cli: Shared flag descriptors, binders and the plugin-config parser
    config: Persisted user configuration, loaded once per process
    envelope: Signature envelope format names
    exceptions: Error hierarchy

Quick Start::

    import argparse

    from notation_tools.cli import (
        add_key_flag,
        add_plugin_config_flag,
        add_signature_format_flag,
        parse_plugin_config,
    )

    parser = argparse.ArgumentParser(prog="notation sign")
    add_key_flag(parser)
    add_signature_format_flag(parser)
    add_plugin_config_flag(parser)

    args = parser.parse_args(["-k", "mykey", "-c", "region=us"])
    plugin_config = parse_plugin_config(args.plugin_config)
"""

__version__ = "0.1.0"

from notation_tools.config import Config, ConfigLoader, load_config, load_config_once
from notation_tools.exceptions import (
    ConfigError,
    DuplicateFlagError,
    MalformedPairError,
    NotationError,
)

__all__ = [
    "__version__",
    "Config",
    "ConfigLoader",
    "load_config",
    "load_config_once",
    "NotationError",
    "ConfigError",
    "MalformedPairError",
    "DuplicateFlagError",
]
