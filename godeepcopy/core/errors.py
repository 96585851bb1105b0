# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Structured, serializable errors for godeepcopy.

Every hard failure is terminal for the whole batch: the generator produces no
partial output once any of these is raised. Each class pins a stable
`reason_code` so callers (and the CLI's `--json` mode) can branch on it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class DeepCopyError(Exception):
	"""Base error: stable reason code, human message, optional context."""

	reason_code: str = "E_DEEPCOPY"
	message: str = ""
	type_name: str | None = None
	package: str | None = None
	detail: str | None = None
	# Raw generated text when the formatter rejected it.
	source_text: str | None = None
	paths: tuple[str, ...] = ()

	def __str__(self) -> str:
		return self.format_human()

	def to_dict(self) -> dict[str, Any]:
		return {
			"reason_code": self.reason_code,
			"message": self.message,
			"type_name": self.type_name,
			"package": self.package,
			"detail": self.detail,
			"source_text": self.source_text,
			"paths": list(self.paths),
		}

	def format_human(self) -> str:
		parts: list[str] = [f"[{self.reason_code}] {self.message}"]
		if self.type_name:
			parts.append(f"type={self.type_name}")
		if self.package:
			parts.append(f"package={self.package}")
		if self.paths:
			parts.append("paths=" + ",".join(self.paths))
		text = " ".join(parts)
		if self.detail:
			text += f"\n{self.detail}"
		if self.source_text is not None:
			text += f"\nsource:\n{self.source_text}"
		return text


@dataclass(frozen=True)
class TypeNotFoundError(DeepCopyError):
	"""A requested target type is not declared in the package."""

	reason_code: str = "E_TYPE_NOT_FOUND"


@dataclass(frozen=True)
class MissingSyntaxError(DeepCopyError):
	"""Receiver-name inference needs declaration syntax and the package has none."""

	reason_code: str = "E_MISSING_SYNTAX"


@dataclass(frozen=True)
class InvalidOutputError(DeepCopyError):
	"""The formatter rejected the assembled source text."""

	reason_code: str = "E_INVALID_OUTPUT"


@dataclass(frozen=True)
class InvalidSkipPathError(DeepCopyError):
	"""Skip paths that do not name a field/element/key/value of the target type."""

	reason_code: str = "E_INVALID_SKIP_PATH"


@dataclass(frozen=True)
class ConfigError(DeepCopyError):
	reason_code: str = "E_CONFIG"


@dataclass(frozen=True)
class PackageLoadError(DeepCopyError):
	reason_code: str = "E_PACKAGE_LOAD"


__all__ = [
	"DeepCopyError",
	"TypeNotFoundError",
	"MissingSyntaxError",
	"InvalidOutputError",
	"InvalidSkipPathError",
	"ConfigError",
	"PackageLoadError",
]
