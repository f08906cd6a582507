import logging
from pathlib import Path

import pytest

from listbench.config import ListbenchConfig, import_, parse_listbench_config
from listbench.context import PythonInfo
from listbench.types import MeasurementOptions

empty = ListbenchConfig.from_toml({})

test_toml = """
[tool.listbench]
log-level = "DEBUG"
forks = 1
warmup-iterations = 3
time-unit = "us"
include = "list_chain"

[tool.listbench.context.myctx]
name = "myctx"
classpath = "listbench.context.PythonInfo"
arguments = { packages = ["rich", "pytest"] }
"""

test_toml_with_unknown_key = (
    test_toml
    + """

[tool.listbench.what]
hello = "world"
"""
)


def test_default_config() -> None:
    assert empty.log_level == "NOTSET"
    assert empty.measurement == MeasurementOptions()
    assert empty.include is None
    assert empty.context == []


def test_config_load_and_parse(tmp_path: Path) -> None:
    tmp_pyproject = tmp_path / "pyproject.toml"
    tmp_pyproject.write_text(test_toml)

    cfg = parse_listbench_config(tmp_pyproject)
    assert cfg.log_level == "DEBUG"
    assert cfg.include == "list_chain"
    assert cfg.measurement == MeasurementOptions(forks=1, warmup_iterations=3, time_unit="us")
    assert len(cfg.context) == 1
    assert cfg.context[0].name == "myctx"

    provider = cfg.context[0].instantiate()
    assert isinstance(provider, PythonInfo)
    assert provider.packages == ("rich", "pytest")


def test_config_with_invalid_measurement_option(tmp_path: Path) -> None:
    tmp_pyproject = tmp_path / "pyproject.toml"
    tmp_pyproject.write_text('[tool.listbench]\ntime-unit = "days"\n')

    with pytest.raises(ValueError, match="unknown time unit"):
        parse_listbench_config(tmp_pyproject)


def test_config_load_with_unknown_key(
    tmp_path: Path, caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    tmp_pyproject = tmp_path / "pyproject.toml"
    tmp_pyproject.write_text(test_toml_with_unknown_key)

    # if this doesn't crash, we know that the unknown key does not make it into the config.
    cfg = parse_listbench_config(tmp_pyproject)
    assert cfg != empty

    # autodiscovery with no config available should fail.
    tmp_pyproject.unlink()
    if any((p / "pyproject.toml").exists() for p in tmp_path.parents):
        pytest.skip("a parent of the temporary directory contains a pyproject.toml")
    monkeypatch.chdir(tmp_path)
    with caplog.at_level(logging.DEBUG):
        cfg = parse_listbench_config()
    assert cfg == empty
    assert "could not locate pyproject.toml" in caplog.text


def test_import_() -> None:
    assert import_("listbench.context.PythonInfo") is PythonInfo
    with pytest.raises(ImportError, match="has no member 'Nope'"):
        import_("listbench.context.Nope")
    with pytest.raises(ValueError, match="dotted path"):
        import_("PythonInfo")
