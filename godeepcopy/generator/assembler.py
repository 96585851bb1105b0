# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
File assembly: header, import block and method bodies -> formatted source.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from godeepcopy.core.errors import InvalidOutputError
from godeepcopy.generator.formatter import FormatError, Formatter

logger = logging.getLogger(__name__)


def header(command: str) -> str:
	return f"// Code generated by {command}; DO NOT EDIT."


def assemble(
	*,
	command: str,
	package_name: str,
	imports: Iterable[str],
	functions: Iterable[str],
	formatter: Formatter,
) -> str:
	"""
	Build the generated file and run it through `formatter`.

	A rejected text raises `InvalidOutputError` carrying both the formatter's
	message and the unformatted text.
	"""
	lines: List[str] = [header(command), "", f"package {package_name}", ""]
	import_lines = list(imports)
	if import_lines:
		lines.append("import (")
		lines.extend(import_lines)
		lines.append(")")
		lines.append("")
	for fn in functions:
		lines.append(fn)
		lines.append("")
	text = "\n".join(lines)

	try:
		return formatter.format(text)
	except FormatError as err:
		logger.debug("formatter rejected generated source for package %s", package_name)
		raise InvalidOutputError(
			message="generated source is not valid Go",
			package=package_name,
			detail=str(err),
			source_text=text,
		) from err


__all__ = ["assemble", "header"]
