"""lexmap CLI package."""

from .app import JsonFormatter, configure_logging, console_main, emit_success, logger, main
from .commands import CLIContext, parse_literal, register_subcommands

__all__ = [
    "CLIContext",
    "JsonFormatter",
    "configure_logging",
    "console_main",
    "emit_success",
    "logger",
    "main",
    "parse_literal",
    "register_subcommands",
]
