"""Engine options, their validation and the INI/JSON loaders."""

from __future__ import annotations

import json

import pytest

from numstat import ConfigError, EngineOptions, GammaMethod, Statistics, load_options
from numstat.config import parse_value, validate_options


def test_default_options():
	options = EngineOptions()
	assert options.epsilon == 0.00001
	assert options.incomplete_beta_iterations == 40
	assert options.incomplete_gamma_iterations == 80
	assert options.max_barnards_n == 200
	assert options.spouge_constant == 40
	assert options.z_table_iterations == 25
	assert options.suppress_warnings is False
	assert options.raise_errors is False
	assert options.gamma_method is GammaMethod.STIRLING


def test_options_are_immutable():
	options = EngineOptions()
	with pytest.raises(AttributeError):
		options.epsilon = 0.1  # type: ignore[misc]


def test_with_changes_returns_a_validated_copy():
	options = EngineOptions()
	changed = options.with_changes(epsilon=1e-7, gamma_method="SPOUGE")
	assert changed.epsilon == 1e-7
	assert changed.gamma_method is GammaMethod.SPOUGE
	assert options.epsilon == 0.00001
	with pytest.raises(ConfigError):
		options.with_changes(spouge_constant=1)


@pytest.mark.parametrize(
	"kwargs",
	[
		{"epsilon": 0},
		{"epsilon": 0.7},
		{"epsilon": "small"},
		{"max_barnards_n": True},
		{"incomplete_beta_iterations": 0},
		{"z_table_iterations": 2.5},
		{"raise_errors": 1},
		{"gamma_method": "lanczos"},
	],
)
def test_invalid_options_are_rejected(kwargs):
	with pytest.raises(ConfigError):
		EngineOptions(**kwargs)


def test_from_mapping_is_case_insensitive_and_rejects_unknown_keys():
	options = EngineOptions.from_mapping({"EPSILON": 1e-6, "Gamma_Method": "spouge"})
	assert options.epsilon == 1e-6
	assert options.gamma_method is GammaMethod.SPOUGE

	with pytest.raises(ConfigError, match="unknown option 'precision'"):
		EngineOptions.from_mapping({"precision": 3})


def test_validation_errors_are_aggregated():
	with pytest.raises(ConfigError) as info:
		validate_options({"epsilon": -1, "max_barnards_n": "many", "colour": "red"})
	lines = str(info.value).splitlines()
	assert len(lines) == 3


def test_to_dict_round_trips():
	options = EngineOptions(gamma_method="spouge", max_barnards_n=50)
	assert options.to_dict()["gamma_method"] == "spouge"
	assert EngineOptions.from_mapping(options.to_dict()) == options


@pytest.mark.parametrize(
	("raw", "expected"),
	[
		("42", 42),
		(" 3.5 ", 3.5),
		("1e-6", 1e-6),
		("True", True),
		("yes", True),
		("off", False),
		("'quoted'", "quoted"),
		("[1, 2]", [1, 2]),
		("spouge", "spouge"),
	],
)
def test_parse_value(raw, expected):
	assert parse_value(raw) == expected


def test_load_options_from_ini(tmp_path):
	path = tmp_path / "numstat.ini"
	path.write_text(
		"[other]\nepsilon = 0.1\n\n"
		"[NumStat]\nepsilon = 1e-6\nmax_barnards_n = 50\ngamma_method = spouge\nsuppress_warnings = yes\n",
		encoding="utf-8",
	)
	options = load_options(path)
	assert options.epsilon == 1e-6
	assert options.max_barnards_n == 50
	assert options.gamma_method is GammaMethod.SPOUGE
	assert options.suppress_warnings is True
	assert options.raise_errors is False


def test_load_options_overrides_take_precedence(tmp_path):
	path = tmp_path / "numstat.cfg"
	path.write_text("[numstat]\nmax_barnards_n = 50\n", encoding="utf-8")
	assert load_options(path, max_barnards_n=80).max_barnards_n == 80


def test_load_options_without_section_uses_defaults(tmp_path):
	path = tmp_path / "empty.ini"
	path.write_text("[unrelated]\nkey = 1\n", encoding="utf-8")
	assert load_options(path) == EngineOptions()


@pytest.mark.parametrize(
	"payload",
	[
		{"numstat": {"epsilon": 1e-6, "raise_errors": True}},
		{"epsilon": 1e-6, "raise_errors": True},
	],
)
def test_load_options_from_json(tmp_path, payload):
	path = tmp_path / "options.json"
	path.write_text(json.dumps(payload), encoding="utf-8")
	options = load_options(path)
	assert options.epsilon == 1e-6
	assert options.raise_errors is True


def test_load_options_from_custom_json_section(tmp_path):
	path = tmp_path / "options.json"
	path.write_text(json.dumps({"engine": {"spouge_constant": 20}}), encoding="utf-8")
	assert load_options(path, section="engine").spouge_constant == 20


@pytest.mark.parametrize(
	("name", "content"),
	[
		("broken.json", "{not json"),
		("list.json", "[1, 2]"),
		("section.json", '{"numstat": 3}'),
		("invalid.ini", "[numstat]\nepsilon = -1\n"),
		("garbage.ini", "no section header\n"),
	],
)
def test_load_options_reports_unusable_files(tmp_path, name, content):
	path = tmp_path / name
	path.write_text(content, encoding="utf-8")
	with pytest.raises(ConfigError):
		load_options(path)


def test_load_options_reports_missing_files(tmp_path):
	with pytest.raises(ConfigError, match="Missing"):
		load_options(tmp_path / "absent.ini")
	with pytest.raises(ConfigError, match="Missing"):
		load_options(tmp_path / "absent.json")


def test_statistics_from_file(tmp_path):
	path = tmp_path / "numstat.ini"
	path.write_text("[numstat]\ngamma_method = spouge\nsuppress_warnings = true\n", encoding="utf-8")
	stats = Statistics.from_file(path, raise_errors=True)
	assert stats.options.gamma_method is GammaMethod.SPOUGE
	assert stats.options.raise_errors is True
	assert stats.gamma(3.4) == stats.gamma_spouge(3.4)


def test_statistics_accepts_options_and_overrides():
	options = EngineOptions(epsilon=1e-6)
	stats = Statistics(options, max_barnards_n=30)
	assert stats.epsilon == 1e-6
	assert stats.options.max_barnards_n == 30
	assert options.max_barnards_n == 200
