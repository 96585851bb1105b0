# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
`godeepcopy` command line.

	godeepcopy -t Config -t Server --skip Cache --skip '' --pointer-receiver ./pkg/config -o deepcopy_gen.go

Generated code goes to stdout (or `-o`); logs go to stderr. With `--json`
stdout carries a single report object instead.
"""

from __future__ import annotations

import argparse
import json
import logging
import shlex
import sys
from pathlib import Path
from typing import Any

from godeepcopy.config import GeneratorConfig, load_config_file, parse_skip_list
from godeepcopy.core.diagnostics import Diagnostic
from godeepcopy.core.errors import DeepCopyError
from godeepcopy.generator.formatter import BuiltinFormatter, Formatter, GofmtFormatter
from godeepcopy.generator.generator import Generator
from godeepcopy.golang.loader import load_package

logger = logging.getLogger(__name__)

_FORMATTERS = {
	"builtin": BuiltinFormatter,
	"gofmt": GofmtFormatter,
}


def _build_parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(prog="godeepcopy", description="Generate Go deep-copy methods for named types")
	p.add_argument("package", type=Path, help="Directory of the Go package declaring the types")
	p.add_argument(
		"-t",
		"--type",
		dest="types",
		action="append",
		default=None,
		help="Type to generate a method for (repeatable; output follows this order)",
	)
	p.add_argument(
		"--skip",
		dest="skips",
		action="append",
		default=None,
		help="Comma-separated skip paths for the matching --type (repeatable, i-th list belongs to i-th type)",
	)
	p.add_argument(
		"--pointer-receiver",
		action="store_true",
		default=None,
		help="Generate methods with pointer receivers returning pointers",
	)
	p.add_argument("--method", dest="method_name", default=None, help="Method name to generate and reuse (default: DeepCopy)")
	p.add_argument("--maxdepth", dest="max_depth", type=int, default=None, help="Stop recursion at this depth (0: unbounded)")
	p.add_argument("--config", type=Path, default=None, help="JSON config file; command-line flags override its values")
	p.add_argument(
		"--no-skip-validation",
		dest="validate_skips",
		action="store_false",
		default=None,
		help="Silently ignore skip paths that do not match the type",
	)
	p.add_argument("--formatter", choices=sorted(_FORMATTERS), default="builtin", help="Output formatter (default: builtin)")
	p.add_argument("-o", "--output", type=Path, default=None, help="Write generated code to this file instead of stdout")
	p.add_argument("--json", action="store_true", help="Print a JSON report (ok/output/diagnostics/error) on stdout")
	p.add_argument("-v", "--verbose", action="store_true", help="Log debug messages to stderr")
	return p


def _diag_to_json(diag: Diagnostic) -> dict[str, Any]:
	"""Render a Diagnostic to a structured JSON-friendly dict."""
	return {
		"code": diag.code,
		"phase": diag.phase,
		"message": diag.message,
		"severity": diag.severity,
		"file": diag.span.file,
		"line": diag.span.line,
		"column": diag.span.column,
		"notes": list(diag.notes),
	}


def _config_from_args(args: argparse.Namespace, command: str) -> GeneratorConfig:
	overrides: dict[str, Any] = {"generator_command": command}
	if args.types is not None:
		overrides["target_types"] = tuple(args.types)
	if args.skips is not None:
		overrides["skip_lists"] = tuple(parse_skip_list(s) for s in args.skips)
	for name in ("pointer_receiver", "method_name", "max_depth", "validate_skips"):
		value = getattr(args, name)
		if value is not None:
			overrides[name] = value
	if args.config is not None:
		return load_config_file(args.config, **overrides)
	overrides.setdefault("target_types", ())
	return GeneratorConfig(**overrides)


def main(argv: list[str] | None = None) -> int:
	"""
	Load the package, generate, write. Returns 0 on success and 2 on any
	generation error (nothing is written in that case).
	"""
	if argv is None:
		argv = sys.argv[1:]
	parser = _build_parser()
	args = parser.parse_args(argv)
	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.WARNING,
		format="%(levelname)s: %(name)s: %(message)s",
		stream=sys.stderr,
	)

	formatter: Formatter = _FORMATTERS[args.formatter]()
	try:
		config = _config_from_args(args, shlex.join(["godeepcopy", *argv]))
		package = load_package(args.package)
		result = Generator(config, formatter=formatter).generate(package)
	except DeepCopyError as err:
		if args.json:
			print(json.dumps({"ok": False, "output": None, "diagnostics": [], "error": err.to_dict()}, sort_keys=True))
		else:
			print(f"error: {err.format_human()}", file=sys.stderr)
		return 2

	if args.output is not None:
		args.output.parent.mkdir(parents=True, exist_ok=True)
		args.output.write_text(result.source, encoding="utf-8")
		logger.info("wrote %s", args.output)

	if args.json:
		payload = {
			"ok": True,
			"output": str(args.output) if args.output is not None else result.source,
			"diagnostics": [_diag_to_json(d) for d in result.diagnostics],
			"error": None,
		}
		print(json.dumps(payload, sort_keys=True))
	else:
		for diag in result.diagnostics:
			print(diag.format_human(), file=sys.stderr)
		if args.output is None:
			sys.stdout.write(result.source)
	return 0


__all__ = ["main"]
