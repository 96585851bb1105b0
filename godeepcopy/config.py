# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Generator configuration.

`GeneratorConfig` is the complete set of options the generator accepts. The
CLI builds one from flags, optionally on top of a JSON config file:

	{
	  "types": ["Config", "Server"],
	  "skip": [["Cache"], "Routes[value],Routes[key]"],
	  "pointer_receiver": true,
	  "method": "DeepCopy",
	  "max_depth": 4,
	  "validate_skips": true
	}

Every key is optional (`types` may come from the command line). `skip[i]`
belongs to `types[i]`; an entry is either a list of paths or one
comma-separated string (same as `--skip`).
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, FrozenSet, Sequence, Tuple

from godeepcopy.core.errors import ConfigError, InvalidSkipPathError
from godeepcopy.core.types_core import Named, PackageRef
from godeepcopy.generator.skips import SkipPathMatcher

_IDENT_RE = re.compile(r"[^\W\d]\w*")

_FILE_KEYS = frozenset({"types", "skip", "pointer_receiver", "method", "max_depth", "validate_skips"})


@dataclass(frozen=True)
class GeneratorConfig:
	target_types: Tuple[str, ...]
	pointer_receiver: bool = False
	method_name: str = "DeepCopy"
	# 0 means unbounded.
	max_depth: int = 0
	skip_lists: Tuple[FrozenSet[str], ...] = ()
	validate_skips: bool = True
	generator_command: str = "godeepcopy"

	def __post_init__(self) -> None:
		object.__setattr__(self, "target_types", tuple(self.target_types))
		object.__setattr__(self, "skip_lists", tuple(frozenset(s) for s in self.skip_lists))
		if not self.target_types:
			raise ConfigError(message="at least one target type is required")
		for name in self.target_types:
			if not _IDENT_RE.fullmatch(name):
				raise ConfigError(message=f"invalid type name '{name}'", type_name=name)
		if len(set(self.target_types)) != len(self.target_types):
			raise ConfigError(message="target types must be unique")
		if not _IDENT_RE.fullmatch(self.method_name):
			raise ConfigError(message=f"invalid method name '{self.method_name}'")
		if self.max_depth < 0:
			raise ConfigError(message=f"max depth must not be negative (got {self.max_depth})")
		if len(self.skip_lists) > len(self.target_types):
			raise ConfigError(
				message=f"{len(self.skip_lists)} skip lists given for {len(self.target_types)} target types"
			)

	def skips_for(self, index: int) -> FrozenSet[str]:
		"""Skip set of the `index`-th target; targets without one skip nothing."""
		if index < len(self.skip_lists):
			return self.skip_lists[index]
		return frozenset()


def parse_skip_list(text: str) -> FrozenSet[str]:
	"""`"A, B.C,"` -> `{"A", "B.C"}`."""
	return frozenset(p.strip() for p in text.split(",") if p.strip())


def _skip_entry(entry: Any) -> FrozenSet[str]:
	if isinstance(entry, str):
		return parse_skip_list(entry)
	if isinstance(entry, list) and all(isinstance(p, str) for p in entry):
		return frozenset(p.strip() for p in entry if p.strip())
	raise ConfigError(message="skip entries must be strings or lists of strings")


def load_config_file(path: Path | str, **overrides: Any) -> GeneratorConfig:
	"""
	Read a JSON config file.

	Keyword `overrides` (GeneratorConfig field names) win over file values.
	"""
	path = Path(path)
	try:
		obj = json.loads(path.read_text(encoding="utf-8"))
	except OSError as err:
		raise ConfigError(message=f"cannot read config file '{path}'", detail=str(err)) from err
	except json.JSONDecodeError as err:
		raise ConfigError(message=f"config file '{path}' is not valid JSON", detail=str(err)) from err
	if not isinstance(obj, dict):
		raise ConfigError(message="config file must contain a JSON object")
	unknown = sorted(set(obj) - _FILE_KEYS)
	if unknown:
		raise ConfigError(message="unknown config keys: " + ", ".join(unknown))

	types = obj.get("types", [])
	if isinstance(types, str):
		types = [types]
	if not isinstance(types, list) or not all(isinstance(t, str) for t in types):
		raise ConfigError(message="config 'types' must be a list of type names")
	skip = obj.get("skip") or []
	if not isinstance(skip, list):
		raise ConfigError(message="config 'skip' must be a list")

	values: dict[str, Any] = {
		"target_types": tuple(types),
		"skip_lists": tuple(_skip_entry(e) for e in skip),
	}
	for key, name, kind in (
		("pointer_receiver", "pointer_receiver", bool),
		("method", "method_name", str),
		("max_depth", "max_depth", int),
		("validate_skips", "validate_skips", bool),
	):
		if key not in obj:
			continue
		value = obj[key]
		# bool is an int subclass; max_depth must be a real integer.
		if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
			raise ConfigError(message=f"config '{key}' must be of type {kind.__name__}")
		values[name] = value
	values.update(overrides)
	return GeneratorConfig(**values)


def validate_skip_lists(config: GeneratorConfig, package: PackageRef, targets: Sequence[Named]) -> None:
	"""Raise `InvalidSkipPathError` for skip paths naming nothing in their target."""
	matcher = SkipPathMatcher(package, config.max_depth)
	for index, target in enumerate(targets):
		bad = matcher.unmatched(target, config.skips_for(index))
		if bad:
			raise InvalidSkipPathError(
				message="skip paths do not match any field, element, key or value",
				type_name=target.name,
				package=package.path,
				paths=tuple(bad),
			)


__all__ = ["GeneratorConfig", "parse_skip_list", "load_config_file", "validate_skip_lists"]
