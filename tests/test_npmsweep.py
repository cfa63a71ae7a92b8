"""End-to-end tests for the npmsweep entry point and its exit code contract."""

import json

import pytest

import npmsweep
from constants import ExitCodes


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Isolated cwd/HOME so no stray config or paths file is picked up."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("NPMSWEEP_CONFIG", raising=False)
    monkeypatch.delenv("NPMSWEEP_LOG_LEVEL", raising=False)
    return tmp_path


def _ioc_file(base, text="leftpad,1.0.0\n"):
    path = base / "ioc.txt"
    path.write_text(text, encoding="utf-8")
    return path


def _exit_code(argv):
    with pytest.raises(SystemExit) as exc_info:
        npmsweep.main(argv)
    return exc_info.value.code


def test_match_exits_one_and_reports(workspace, make_package, capsys):
    ioc = _ioc_file(workspace)
    pkg_dir = make_package(workspace, "proj/node_modules/leftpad")

    code = _exit_code(["--ioc", str(ioc), "--no-global", str(workspace / "proj")])

    out = capsys.readouterr().out
    assert code == ExitCodes.MATCHES_FOUND.value == 1
    assert "Found 1 matches." in out
    assert f"[MATCH] leftpad@1.0.0: {pkg_dir}" in out


def test_no_match_exits_zero(workspace, make_package, capsys):
    ioc = _ioc_file(workspace, "leftpad,9.9.9\n")
    make_package(workspace, "proj/node_modules/leftpad")

    code = _exit_code(["-i", str(ioc), "--no-global", str(workspace / "proj")])

    assert code == ExitCodes.SUCCESS.value == 0
    assert "Found 0 matches." in capsys.readouterr().out


def test_empty_ioc_file_exits_zero(workspace, make_package):
    ioc = _ioc_file(workspace, "")
    make_package(workspace, "proj/node_modules/leftpad")

    assert _exit_code(["-i", str(ioc), "--no-global", str(workspace / "proj")]) == 0


def test_unreadable_ioc_exits_two(workspace, capsys):
    code = _exit_code(["-i", str(workspace / "missing.txt"), "--no-global", str(workspace)])

    captured = capsys.readouterr()
    assert code == ExitCodes.MISCONFIGURATION.value == 2
    assert "Error loading IOCs" in captured.err
    assert "[MATCH]" not in captured.out


def test_no_candidates_exits_two(workspace):
    ioc = _ioc_file(workspace)
    assert _exit_code(["-i", str(ioc), "--no-global"]) == 2


def test_missing_directories_are_skipped(workspace, capsys):
    ioc = _ioc_file(workspace)

    code = _exit_code(["-i", str(ioc), "--no-global", str(workspace / "absent")])

    assert code == 0
    assert "Skipping non-existent directory" in capsys.readouterr().err


def test_soft_errors_do_not_stop_the_scan_queue(workspace, make_package, capsys):
    ioc = _ioc_file(workspace)
    regular = workspace / "not-a-dir.txt"
    regular.write_text("x", encoding="utf-8")
    pkg_dir = make_package(workspace, "proj/node_modules/leftpad")

    code = _exit_code([
        "-i", str(ioc), "--no-global",
        str(workspace / "absent"), str(regular), str(workspace / "proj"),
    ])

    captured = capsys.readouterr()
    assert code == 1
    assert "Skipping non-existent directory" in captured.err
    assert f"Error scanning {regular}" in captured.err
    assert f"[MATCH] leftpad@1.0.0: {pkg_dir}" in captured.out


def test_unusable_logfile_exits_two(workspace, capsys):
    ioc = _ioc_file(workspace)

    code = _exit_code([
        "-i", str(ioc), "--no-global",
        "--logfile", str(workspace / "no" / "such" / "sweep.log"), str(workspace),
    ])

    assert code == ExitCodes.MISCONFIGURATION.value
    err = capsys.readouterr().err
    assert "Log file couldn't be opened" in err
    assert "Traceback" not in err


def test_paths_file_drives_global_scan(workspace, make_package, monkeypatch):
    ioc = _ioc_file(workspace)
    make_package(workspace, "global/node_modules/leftpad")
    monkeypatch.setenv("SWEEP_GLOBAL", str(workspace / "global"))
    (workspace / "paths.txt").write_text("# installs\n$SWEEP_GLOBAL\nC:\\nope\n", encoding="utf-8")

    assert _exit_code(["-i", str(ioc)]) == 1


def test_matches_across_directories_are_concatenated(workspace, make_package, capsys):
    ioc = _ioc_file(workspace)
    make_package(workspace, "a/node_modules/leftpad")
    make_package(workspace, "b/node_modules/leftpad")

    code = _exit_code(["-i", str(ioc), "--no-global", str(workspace / "a"), str(workspace / "b"), str(workspace / "a")])

    assert code == 1
    assert "Found 2 matches." in capsys.readouterr().out


def test_unexpected_error_exits_minus_one(workspace, monkeypatch):
    ioc = _ioc_file(workspace)

    def _boom(*_args, **_kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(npmsweep, "scan_directory", _boom)

    assert _exit_code(["-i", str(ioc), "--no-global", str(workspace)]) == ExitCodes.INTERNAL_ERROR.value


def test_json_export(workspace, make_package):
    ioc = _ioc_file(workspace)
    pkg_dir = make_package(workspace, "proj/node_modules/leftpad")
    out_file = workspace / "report.json"

    _exit_code(["-i", str(ioc), "--no-global", "-o", str(out_file), str(workspace / "proj")])

    data = json.loads(out_file.read_text(encoding="utf-8"))
    assert data["matchCount"] == 1
    assert data["matches"] == [{"name": "leftpad", "version": "1.0.0", "directory": str(pkg_dir)}]
    assert data["scannedDirectories"] == [str(workspace / "proj")]


def test_csv_export_inferred_from_extension(workspace, make_package):
    ioc = _ioc_file(workspace)
    make_package(workspace, "proj/node_modules/leftpad")
    out_file = workspace / "report.csv"

    _exit_code(["-i", str(ioc), "--no-global", "-o", str(out_file), str(workspace / "proj")])

    lines = out_file.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "Package Name,Version,Directory"
    assert lines[1].startswith("leftpad,1.0.0,")


class TestConfigFile:
    def test_config_supplies_settings(self, workspace, make_package):
        _ioc_file(workspace)
        (workspace / "iocs").mkdir()
        (workspace / "iocs" / "list.txt").write_text("leftpad,1.0.0\n", encoding="utf-8")
        make_package(workspace, "extra/node_modules/leftpad")
        config = workspace / "sweep.yml"
        config.write_text(
            "ioc_file: iocs/list.txt\n"
            "scan_global: false\n"
            "extra_paths:\n"
            f"  - {workspace / 'extra'}\n",
            encoding="utf-8",
        )

        assert _exit_code(["-c", str(config)]) == 1

    def test_cli_overrides_config(self, workspace, make_package):
        config = workspace / "npmsweep.yml"
        config.write_text("ioc_file: missing.txt\nscan_global: false\n", encoding="utf-8")
        ioc = _ioc_file(workspace)
        make_package(workspace, "proj/node_modules/leftpad")

        # npmsweep.yml in cwd is discovered implicitly
        assert _exit_code(["-i", str(ioc), str(workspace / "proj")]) == 1
        assert _exit_code([str(workspace / "proj")]) == 2

    def test_missing_explicit_config_exits_two(self, workspace, capsys):
        code = _exit_code(["-c", str(workspace / "absent.yml"), "--no-global", str(workspace)])

        assert code == 2
        assert "invalid config file" in capsys.readouterr().err

    def test_malformed_config_exits_two(self, workspace):
        config = workspace / "bad.yml"
        config.write_text("scan_global: maybe-not\n", encoding="utf-8")
        assert _exit_code(["-c", str(config)]) == 2
