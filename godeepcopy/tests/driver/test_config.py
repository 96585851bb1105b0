# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
from pathlib import Path

import pytest

from godeepcopy.config import GeneratorConfig, load_config_file, parse_skip_list
from godeepcopy.core.errors import ConfigError


def test_defaults() -> None:
	config = GeneratorConfig(target_types=["A", "B"])
	assert config.target_types == ("A", "B")
	assert config.method_name == "DeepCopy"
	assert not config.pointer_receiver
	assert config.max_depth == 0
	assert config.validate_skips
	assert config.skips_for(0) == frozenset()
	assert config.skips_for(1) == frozenset()


def test_skip_lists_pair_with_types_by_position() -> None:
	config = GeneratorConfig(target_types=("A", "B", "C"), skip_lists=[["X"], set()])
	assert config.skip_lists == (frozenset({"X"}), frozenset())
	assert config.skips_for(0) == {"X"}
	assert config.skips_for(2) == frozenset()


@pytest.mark.parametrize(
	"kwargs, message",
	[
		({"target_types": ()}, "at least one target type is required"),
		({"target_types": ("A", "1B")}, "invalid type name '1B'"),
		({"target_types": ("pkg.A",)}, "invalid type name 'pkg.A'"),
		({"target_types": ("A", "A")}, "target types must be unique"),
		({"target_types": ("A",), "method_name": "Deep Copy"}, "invalid method name 'Deep Copy'"),
		({"target_types": ("A",), "max_depth": -1}, "max depth must not be negative (got -1)"),
		({"target_types": ("A",), "skip_lists": [{"X"}, {"Y"}]}, "2 skip lists given for 1 target types"),
	],
)
def test_invalid_configs(kwargs, message: str) -> None:
	with pytest.raises(ConfigError) as excinfo:
		GeneratorConfig(**kwargs)
	assert excinfo.value.message == message
	assert excinfo.value.reason_code == "E_CONFIG"


def test_parse_skip_list() -> None:
	assert parse_skip_list("A, B.C,,Routes[value] ") == {"A", "B.C", "Routes[value]"}
	assert parse_skip_list("") == frozenset()


def _write(tmp_path: Path, obj) -> Path:
	path = tmp_path / "deepcopy.json"
	path.write_text(json.dumps(obj), encoding="utf-8")
	return path


def test_load_config_file(tmp_path: Path) -> None:
	path = _write(
		tmp_path,
		{
			"types": ["Config", "Server"],
			"skip": [["Cache", " "], "Routes[value], Routes[key]"],
			"pointer_receiver": True,
			"method": "Clone",
			"max_depth": 4,
			"validate_skips": False,
		},
	)
	config = load_config_file(path)
	assert config == GeneratorConfig(
		target_types=("Config", "Server"),
		skip_lists=(frozenset({"Cache"}), frozenset({"Routes[value]", "Routes[key]"})),
		pointer_receiver=True,
		method_name="Clone",
		max_depth=4,
		validate_skips=False,
	)


def test_overrides_win_and_single_type_string(tmp_path: Path) -> None:
	path = _write(tmp_path, {"types": "Config", "method": "Clone"})
	config = load_config_file(path, method_name="Copy", generator_command="godeepcopy --config x.json .")
	assert config.target_types == ("Config",)
	assert config.method_name == "Copy"
	assert config.generator_command == "godeepcopy --config x.json ."


def test_types_may_come_from_overrides(tmp_path: Path) -> None:
	path = _write(tmp_path, {"max_depth": 2})
	assert load_config_file(path, target_types=("A",)).max_depth == 2
	with pytest.raises(ConfigError, match="at least one target type"):
		load_config_file(path)


@pytest.mark.parametrize(
	"obj, message",
	[
		([], "config file must contain a JSON object"),
		({"types": ["A"], "colour": 1, "extra": 2}, "unknown config keys: colour, extra"),
		({"types": [1]}, "config 'types' must be a list of type names"),
		({"types": ["A"], "skip": "A"}, "config 'skip' must be a list"),
		({"types": ["A"], "skip": [1]}, "skip entries must be strings or lists of strings"),
		({"types": ["A"], "max_depth": True}, "config 'max_depth' must be of type int"),
		({"types": ["A"], "max_depth": "3"}, "config 'max_depth' must be of type int"),
		({"types": ["A"], "pointer_receiver": 1}, "config 'pointer_receiver' must be of type bool"),
	],
)
def test_invalid_config_files(tmp_path: Path, obj, message: str) -> None:
	with pytest.raises(ConfigError) as excinfo:
		load_config_file(_write(tmp_path, obj))
	assert excinfo.value.message == message


def test_unreadable_config_file(tmp_path: Path) -> None:
	with pytest.raises(ConfigError) as excinfo:
		load_config_file(tmp_path / "missing.json")
	assert excinfo.value.message.startswith("cannot read config file")
	assert excinfo.value.detail is not None

	bad = tmp_path / "bad.json"
	bad.write_text("{", encoding="utf-8")
	with pytest.raises(ConfigError, match="is not valid JSON"):
		load_config_file(bad)
