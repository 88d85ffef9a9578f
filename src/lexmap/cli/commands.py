"""CLI command registration and handlers for lexmap."""

from __future__ import annotations

import argparse
import ast
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from lexmap.config import AppConfig
from lexmap.contracts.error import BadInputError, Exit, PolicyError
from lexmap.core.comparer import ComparisonMode
from lexmap.core.lexicon import Lexicon
from lexmap.core.suffixes import describe_suffixes, invoke_suffix, set_suffix
from lexmap.core.values import Value
from lexmap.io.dump import dump_lexicon, encode_value, format_dump
from lexmap.io.snapshot import load_lexicon, save_lexicon
from lexmap.io.snapshot_header import describe_snapshot

Handler = Callable[[argparse.Namespace], int]


@dataclass(frozen=True)
class CLIContext:
    """Runtime hooks supplied by the top-level CLI entrypoint."""

    emit_success: Callable[..., None]
    config: Callable[[], AppConfig]
    logger: logging.Logger
    json_enabled: Callable[[], bool]
    guard: Callable[[Handler], Handler]


def parse_literal(text: str) -> Any:
    """Parse a command-line token as a Python literal, falling back to the raw string."""

    try:
        parsed = ast.literal_eval(text)
    except (ValueError, SyntaxError):
        return text
    if isinstance(parsed, (str, bool, int, float, list, tuple)):
        return parsed
    return text


def _parse_switch(raw: str) -> bool:
    normalized = raw.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise argparse.ArgumentTypeError(f"expected on/off, got {raw!r}")


def _load(ctx: CLIContext, path: str) -> Lexicon:
    cfg = ctx.config()
    try:
        return load_lexicon(
            path,
            strict=cfg.lexicon.strict_load,
            max_payload_bytes=cfg.snapshot.max_payload_bytes,
        )
    except ValueError as exc:
        raise BadInputError(f"Unreadable lexicon file {path}: {exc}") from exc


def _save(ctx: CLIContext, lex: Lexicon, path: str) -> None:
    save_lexicon(lex, path, compress=ctx.config().snapshot.compress)


def _result_text(result: Optional[Value]) -> Optional[str]:
    if result is None:
        return None
    return str(result)


def register_subcommands(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ctx: CLIContext,
) -> Dict[str, Handler]:
    """Define CLI subcommands and return their handlers."""

    handlers: Dict[str, Handler] = {}

    def _register(
        name: str,
        help_text: Optional[str],
        configure: Callable[[argparse.ArgumentParser], Handler],
    ) -> None:
        parser = subparsers.add_parser(name, help=help_text)
        handler = configure(parser)
        handlers[name] = ctx.guard(handler)

    _register("new", "Create an empty lexicon file.", lambda parser: _configure_new(parser, ctx))
    _register("add", "Add a key; fails if the key exists.", lambda parser: _configure_add(parser, ctx))
    _register("set", "Insert or overwrite a key.", lambda parser: _configure_set(parser, ctx))
    _register("get", "Print the value stored at a key.", lambda parser: _configure_get(parser, ctx))
    _register("remove", "Remove a key.", lambda parser: _configure_remove(parser, ctx))
    for name in ("has-key", "has-value", "keys", "values", "length", "clear"):
        _register(name, None, lambda parser, name=name: _configure_suffix_alias(parser, ctx, name))
    _register("copy", "Copy a lexicon file.", lambda parser: _configure_copy(parser, ctx))
    _register("dump", "Print the DUMP text or JSON document.", lambda parser: _configure_dump(parser, ctx))
    _register(
        "case",
        "Show or switch case sensitivity (switching clears the lexicon).",
        lambda parser: _configure_case(parser, ctx),
    )
    _register(
        "suffix",
        "Invoke a lexicon suffix by name.",
        lambda parser: _configure_suffix(parser, ctx),
    )
    _register(
        "inspect-snapshot",
        "Show snapshot header metadata.",
        lambda parser: _configure_inspect(parser, ctx),
    )
    _register("suffixes", "List lexicon suffixes.", lambda parser: _configure_suffixes(parser, ctx))
    return handlers


def _configure_new(parser: argparse.ArgumentParser, ctx: CLIContext) -> Handler:
    parser.add_argument("file")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--case-sensitive", dest="case_sensitive", action="store_true", default=None)
    group.add_argument("--case-insensitive", dest="case_sensitive", action="store_false")
    parser.add_argument("--force", action="store_true", help="Overwrite an existing file")

    def handler(args: argparse.Namespace) -> int:
        if Path(args.file).exists() and not args.force:
            raise PolicyError(f"{args.file} already exists", hint="Pass --force to overwrite it.")
        case_sensitive = args.case_sensitive
        if case_sensitive is None:
            case_sensitive = ctx.config().lexicon.case_sensitive
        lex = Lexicon(mode=ComparisonMode.from_flag(case_sensitive))
        _save(ctx, lex, args.file)
        ctx.logger.info("Created lexicon %s (%s)", args.file, lex.mode.value)
        ctx.emit_success(
            "new",
            text=f"created {args.file}",
            data={"file": args.file, "case_sensitive": lex.case_sensitive},
        )
        return int(Exit.OK)

    return handler


def _configure_add(parser: argparse.ArgumentParser, ctx: CLIContext) -> Handler:
    parser.add_argument("file")
    parser.add_argument("key")
    parser.add_argument("value")

    def handler(args: argparse.Namespace) -> int:
        lex = _load(ctx, args.file)
        key, value = parse_literal(args.key), parse_literal(args.value)
        lex.add(key, value)
        _save(ctx, lex, args.file)
        ctx.emit_success("add", data={"file": args.file, "key": key, "value": value, "count": len(lex)})
        return int(Exit.OK)

    return handler


def _configure_set(parser: argparse.ArgumentParser, ctx: CLIContext) -> Handler:
    parser.add_argument("file")
    parser.add_argument("key")
    parser.add_argument("value")

    def handler(args: argparse.Namespace) -> int:
        lex = _load(ctx, args.file)
        key, value = parse_literal(args.key), parse_literal(args.value)
        lex.set(key, value)
        _save(ctx, lex, args.file)
        ctx.emit_success("set", data={"file": args.file, "key": key, "value": value, "count": len(lex)})
        return int(Exit.OK)

    return handler


def _configure_get(parser: argparse.ArgumentParser, ctx: CLIContext) -> Handler:
    parser.add_argument("file")
    parser.add_argument("key")

    def handler(args: argparse.Namespace) -> int:
        lex = _load(ctx, args.file)
        key = parse_literal(args.key)
        value = lex.get(key)
        ctx.emit_success(
            "get",
            text=_result_text(value),
            data={"file": args.file, "key": key, "value": encode_value(value)},
        )
        return int(Exit.OK)

    return handler


def _configure_remove(parser: argparse.ArgumentParser, ctx: CLIContext) -> Handler:
    parser.add_argument("file")
    parser.add_argument("key")

    def handler(args: argparse.Namespace) -> int:
        lex = _load(ctx, args.file)
        key = parse_literal(args.key)
        removed = lex.remove(key)
        if removed:
            _save(ctx, lex, args.file)
        ctx.emit_success(
            "remove",
            text=str(removed).lower(),
            data={"file": args.file, "key": key, "removed": removed},
        )
        return int(Exit.OK)

    return handler


_ALIAS_SUFFIX: Dict[str, tuple[str, int, bool]] = {
    # command -> (suffix, arity, mutates)
    "has-key": ("HASKEY", 1, False),
    "has-value": ("HASVALUE", 1, False),
    "keys": ("KEYS", 0, False),
    "values": ("VALUES", 0, False),
    "length": ("LENGTH", 0, False),
    "clear": ("CLEAR", 0, True),
}


def _configure_suffix_alias(
    parser: argparse.ArgumentParser, ctx: CLIContext, command: str
) -> Handler:
    suffix, arity, mutates = _ALIAS_SUFFIX[command]
    parser.add_argument("file")
    if arity:
        parser.add_argument("arg")

    def handler(args: argparse.Namespace) -> int:
        lex = _load(ctx, args.file)
        call_args = [parse_literal(args.arg)] if arity else []
        result = invoke_suffix(lex, suffix, *call_args)
        if mutates:
            _save(ctx, lex, args.file)
        data: Dict[str, Any] = {"file": args.file}
        text = _result_text(result)
        if result is not None:
            data["result"] = encode_value(result)
            if suffix in {"KEYS", "VALUES"}:
                text = "\n".join(str(item) for item in result)  # type: ignore[union-attr]
        ctx.emit_success(command, text=text, data=data)
        return int(Exit.OK)

    return handler


def _configure_copy(parser: argparse.ArgumentParser, ctx: CLIContext) -> Handler:
    parser.add_argument("file")
    parser.add_argument("dest")

    def handler(args: argparse.Namespace) -> int:
        lex = _load(ctx, args.file)
        _save(ctx, lex.copy(), args.dest)
        ctx.emit_success(
            "copy",
            text=f"copied {len(lex)} entries to {args.dest}",
            data={"file": args.file, "dest": args.dest, "count": len(lex)},
        )
        return int(Exit.OK)

    return handler


def _configure_dump(parser: argparse.ArgumentParser, ctx: CLIContext) -> Handler:
    parser.add_argument("file")
    parser.add_argument(
        "--document", action="store_true", help="Print the JSON dump document instead of text"
    )

    def handler(args: argparse.Namespace) -> int:
        record = dump_lexicon(_load(ctx, args.file))
        text = record.to_json() if args.document else format_dump(record)
        ctx.emit_success("dump", text=text, data={"file": args.file, "dump": record.to_document()})
        return int(Exit.OK)

    return handler


def _configure_case(parser: argparse.ArgumentParser, ctx: CLIContext) -> Handler:
    parser.add_argument("file")
    parser.add_argument("--set", dest="value", type=_parse_switch, default=None, metavar="on|off")

    def handler(args: argparse.Namespace) -> int:
        lex = _load(ctx, args.file)
        if args.value is not None:
            before = len(lex)
            set_suffix(lex, "CASESENSITIVE", args.value)
            _save(ctx, lex, args.file)
            if before and not len(lex):
                ctx.logger.warning("Switching case sensitivity cleared %d entries", before)
        ctx.emit_success(
            "case",
            text=str(lex.case_sensitive).lower(),
            data={"file": args.file, "case_sensitive": lex.case_sensitive, "count": len(lex)},
        )
        return int(Exit.OK)

    return handler


def _configure_suffix(parser: argparse.ArgumentParser, ctx: CLIContext) -> Handler:
    parser.add_argument("file")
    parser.add_argument("name")
    parser.add_argument("args", nargs="*")

    def handler(args: argparse.Namespace) -> int:
        lex = _load(ctx, args.file)
        result = invoke_suffix(lex, args.name, *(parse_literal(arg) for arg in args.args))
        _save(ctx, lex, args.file)
        data: Dict[str, Any] = {"file": args.file, "suffix": args.name.upper()}
        if result is not None:
            data["result"] = encode_value(result)
        ctx.emit_success("suffix", text=_result_text(result), data=data)
        return int(Exit.OK)

    return handler


def _configure_inspect(parser: argparse.ArgumentParser, ctx: CLIContext) -> Handler:
    parser.add_argument("file")

    def handler(args: argparse.Namespace) -> int:
        try:
            descriptor = describe_snapshot(Path(args.file))
        except ValueError as exc:
            raise BadInputError(f"Not a lexicon snapshot: {exc}") from exc
        header = descriptor.header
        data = {
            "file": args.file,
            "version": header.version,
            "compressed": descriptor.compressed,
            "payload_len": header.payload_len,
            "checksum": descriptor.checksum_hex,
        }
        text = (
            f"version={header.version} compressed={descriptor.compressed} "
            f"payload={header.payload_len}B checksum={descriptor.checksum_hex}"
        )
        ctx.emit_success("inspect-snapshot", text=text, data=data)
        return int(Exit.OK)

    return handler


def _configure_suffixes(parser: argparse.ArgumentParser, ctx: CLIContext) -> Handler:
    def handler(args: argparse.Namespace) -> int:
        rows = describe_suffixes()
        text = "\n".join(f"{name:<22} {arity}  {desc}" for name, arity, desc in rows)
        data = {"suffixes": [{"name": n, "arity": a, "description": d} for n, a, d in rows]}
        ctx.emit_success("suffixes", text=text, data=data)
        return int(Exit.OK)

    return handler


__all__ = ["CLIContext", "parse_literal", "register_subcommands"]
