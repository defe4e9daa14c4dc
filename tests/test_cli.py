"""
CLI Tests
=========
End-to-end runs of ``anchor_runner.cli.main`` with the build and test
commands pointed at small Python one-liners.
"""
import sys
import json
import shlex
import pytest
from unittest.mock import patch

from anchor_runner.cli import main, should_skip_build

PY = shlex.quote(sys.executable)

BUILD_OK = f"{PY} -c \"open('built.txt', 'a').write('x')\""
BUILD_FAIL = f"{PY} -c \"open('built.txt', 'a').write('x'); raise SystemExit(1)\""


def _test_cmd(exit_code: int) -> str:
    """A test command that records its arguments and the staged files, then exits."""
    code = (
        "import sys, os, json; "
        "json.dump({'args': sys.argv[1:], 'staged': sorted(os.listdir('target/deploy'))}, "
        "open('test_run.json', 'w')); "
        f"raise SystemExit({exit_code})"
    )
    return f"{PY} -c {shlex.quote(code)}"


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """<tmp>/target/deploy holds build output; <tmp>/sdk is the working directory."""
    deploy = tmp_path / "target" / "deploy"
    deploy.mkdir(parents=True)
    (deploy / "clearing_house.so").write_bytes(b"program")
    sdk = tmp_path / "sdk"
    sdk.mkdir()
    monkeypatch.chdir(sdk)
    for name in ("ANCHOR_FAIL_ON_BUILD_ERROR", "ANCHOR_RUNNER_LOG_DIR", "ANCHOR_RUNNER_REPORT_PATH",
                 "ANCHOR_DEPLOY_SOURCE_DIR", "ANCHOR_DEPLOY_DEST_DIR", "ANCHOR_TEST_SKIP_BUILD_FLAG",
                 "ANCHOR_RUNNER_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return sdk


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("anchor_runner.cli.setup_logging") as mock_setup:
        yield mock_setup


def _configure(monkeypatch, build=BUILD_OK, test_exit=0):
    monkeypatch.setenv("ANCHOR_BUILD_COMMAND", build)
    monkeypatch.setenv("ANCHOR_TEST_COMMAND", _test_cmd(test_exit))


def _test_run(workspace):
    return json.loads((workspace / "test_run.json").read_text())


# ---------------------------------------------------------------------------
# 1. Argument handling
# ---------------------------------------------------------------------------
class TestShouldSkipBuild:

    def test_no_arguments(self):
        assert should_skip_build([]) is False

    def test_skip_flag(self):
        assert should_skip_build(["--skip-build"]) is True

    def test_other_value(self):
        assert should_skip_build(["--fast"]) is False

    def test_only_first_argument_counts(self):
        assert should_skip_build(["foo", "--skip-build"]) is False
        assert should_skip_build(["--skip-build", "foo"]) is True


# ---------------------------------------------------------------------------
# 2. Example scenarios
# ---------------------------------------------------------------------------
class TestScenarios:

    def test_build_and_tests_succeed(self, workspace, monkeypatch):
        _configure(monkeypatch)
        assert main([]) == 0
        assert (workspace / "built.txt").read_text() == "x"
        assert (workspace / "target" / "deploy" / "clearing_house.so").read_bytes() == b"program"
        run = _test_run(workspace)
        assert run["args"] == ["--skip-build"]
        assert run["staged"] == ["clearing_house.so"]

    def test_skip_build_with_failing_tests(self, workspace, monkeypatch):
        _configure(monkeypatch, test_exit=2)
        assert main(["--skip-build"]) == 1
        assert not (workspace / "built.txt").exists()
        assert (workspace / "target" / "deploy" / "clearing_house.so").exists()
        assert _test_run(workspace)["args"] == ["--skip-build"]

    def test_failed_build_still_runs_tests(self, workspace, monkeypatch):
        _configure(monkeypatch, build=BUILD_FAIL)
        assert main([]) == 0
        assert (workspace / "built.txt").exists()
        assert (workspace / "test_run.json").exists()

    def test_unstartable_build_still_runs_tests(self, workspace, monkeypatch):
        _configure(monkeypatch)
        bad_build = workspace / "badbuild"
        bad_build.write_bytes(b"\x00\x01garbage")
        bad_build.chmod(0o755)
        monkeypatch.setenv("ANCHOR_BUILD_COMMAND", shlex.quote(str(bad_build)))
        assert main([]) == 0
        assert (workspace / "target" / "deploy" / "clearing_house.so").exists()
        assert _test_run(workspace)["args"] == ["--skip-build"]

    def test_failed_build_aborts_when_configured(self, workspace, monkeypatch):
        _configure(monkeypatch, build=BUILD_FAIL)
        monkeypatch.setenv("ANCHOR_FAIL_ON_BUILD_ERROR", "true")
        assert main([]) == 1
        assert not (workspace / "test_run.json").exists()

    def test_existing_destination_is_reused(self, workspace, monkeypatch):
        _configure(monkeypatch)
        (workspace / "target" / "deploy").mkdir(parents=True)
        assert main(["--skip-build"]) == 0
        assert _test_run(workspace)["staged"] == ["clearing_house.so"]

    def test_unknown_argument_runs_build(self, workspace, monkeypatch):
        _configure(monkeypatch)
        assert main(["--verbose"]) == 0
        assert (workspace / "built.txt").exists()

    def test_missing_build_output_exits_one(self, workspace, monkeypatch):
        _configure(monkeypatch)
        monkeypatch.setenv("ANCHOR_DEPLOY_SOURCE_DIR", "../nowhere")
        assert main(["--skip-build"]) == 1
        assert not (workspace / "test_run.json").exists()


# ---------------------------------------------------------------------------
# 3. Configuration errors, logging and reports
# ---------------------------------------------------------------------------
class TestCliAmbient:

    def test_invalid_config_exits_two_without_running(self, workspace, monkeypatch):
        _configure(monkeypatch)
        monkeypatch.setenv("ANCHOR_BUILD_COMMAND", "")
        assert main([]) == 2
        assert not (workspace / "built.txt").exists()
        assert not (workspace / "target").exists()

    def test_logging_configured_from_env(self, workspace, monkeypatch, no_logging_setup):
        _configure(monkeypatch)
        monkeypatch.setenv("ANCHOR_RUNNER_LOG_LEVEL", "debug")
        monkeypatch.setenv("ANCHOR_RUNNER_LOG_DIR", "logs")
        main(["--skip-build"])
        no_logging_setup.assert_called_once_with(level=10, log_dir="logs")

    def test_report_written_when_configured(self, workspace, monkeypatch):
        _configure(monkeypatch, test_exit=3)
        monkeypatch.setenv("ANCHOR_RUNNER_REPORT_PATH", "reports/run.json")
        assert main([]) == 1
        report = json.loads((workspace / "reports" / "run.json").read_text())
        assert report["exit_code"] == 1
        assert [s["name"] for s in report["steps"]] == ["build", "stage", "test"]
        assert report["steps"][2]["exit_code"] == 3
        assert report["staged_files"] == ["clearing_house.so"]

    def test_no_report_by_default(self, workspace, monkeypatch):
        _configure(monkeypatch)
        main([])
        assert not (workspace / "anchor-run.json").exists()
