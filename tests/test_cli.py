import json
from pathlib import Path

import pytest

from listbench.cli import main

QUICK = ["-f", "0", "-wi", "0", "-w", "0", "-i", "2", "-r", "0.001"]


def test_list_bundled_suite(capsys: pytest.CaptureFixture) -> None:
    rc = main(["list", "-b", "^list_chain"])
    assert rc == 0
    names = capsys.readouterr().out.split()
    assert names == [
        "list_chain_variant=default",
        "list_chain_variant=vararg",
        "list_chain_odd_variant=default_values=odd",
        "list_chain_odd_variant=vararg_values=odd",
    ]


def test_run_to_json_file(tmp_path: Path) -> None:
    outfile = tmp_path / "result.json"
    args = ["run", "-b", "list_first", "-n", "cli-run", "-tu", "us", "-o", str(outfile), *QUICK]
    args += ["--context", "python", "--context", "host=ci"]
    rc = main(args)
    assert rc == 0, f"running listbench {' '.join(args)} failed with exit code {rc}"

    data = json.loads(outfile.read_text())
    assert data["run"] == "cli-run"
    assert data["context"]["host"] == "ci"
    assert "implementation" in data["context"]["python"]
    assert [bm["parameters"] for bm in data["benchmarks"]] == [
        {"state": {"variant": "default"}},
        {"state": {"variant": "vararg"}},
    ]
    for bm in data["benchmarks"]:
        assert bm["unit"] == "us"
        assert bm["samples"] == 2
        assert not bm["error_occurred"]


def test_run_to_console(
    testfolder: str, capsys: pytest.CaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("COLUMNS", "250")
    rc = main(["run", testfolder, "-t", "fixtures", *QUICK])
    assert rc == 0
    out = capsys.readouterr().out
    assert "sink_many" in out
    assert "ERROR" in out


def test_invalid_context_value(capsys: pytest.CaptureFixture) -> None:
    rc = main(["run", "-b", "list_first", "--context", "nokeyvalue", *QUICK])
    assert rc == 1
    assert "context values need to be of the form <key>=<value>" in capsys.readouterr().err


def test_unknown_benchmark_location(capsys: pytest.CaptureFixture) -> None:
    rc = main(["list", "no/such/benchmarks.py"])
    assert rc == 1
    assert capsys.readouterr().err.startswith("error:")


def test_no_command() -> None:
    assert main([]) == 1


def test_invalid_pyproject_config(
    tmp_path: Path, capsys: pytest.CaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "pyproject.toml").write_text('[tool.listbench]\ntime-unit = "minutes"\n')
    monkeypatch.chdir(tmp_path)
    rc = main(["list"])
    assert rc == 1
    assert "unknown time unit 'minutes'" in capsys.readouterr().err
