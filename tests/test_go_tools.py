import asyncio
import json
import os
import sys

import pytest

from deadmono.core import go_tools
from deadmono.core.errors import CommandError, DeadcodeListError, ToolUnavailableError
from deadmono.core.go_tools import (
    DEPS_TEMPLATE,
    DeadcodeTool,
    GoModuleTool,
    deadcode_args,
    parse_deadcode_output,
    run_command,
    verify_binaries,
)
from deadmono.core.models import AnalysisOptions

DEADCODE_OUTPUT = json.dumps(
    [
        {
            "Name": "cache",
            "Path": "example.com/mono/pkg/cache",
            "Funcs": [
                {
                    "Name": "Delete",
                    "Position": {"File": "../../pkg/cache/cache.go", "Line": 12, "Col": 6},
                    "Generated": False,
                    "Marker": False,
                },
                {
                    "Name": "(*Cache).Flush",
                    "Position": {"File": "../../pkg/cache/cache.go", "Line": 20, "Col": 17},
                    "Generated": True,
                    "Marker": True,
                },
            ],
        }
    ]
)


def test_deadcode_args_defaults():
    assert deadcode_args(AnalysisOptions()) == ["-json", "-filter", "<module>", "./..."]


def test_deadcode_args_all_options():
    options = AnalysisOptions(
        include_tests=True,
        include_generated=True,
        build_tags="rpi,linux",
        filter_pattern="github.com/org/.*",
    )

    assert deadcode_args(options) == [
        "-json",
        "-generated",
        "-test",
        "-tags",
        "rpi,linux",
        "-filter",
        "github.com/org/.*",
        "./...",
    ]


def test_parse_deadcode_output():
    packages = parse_deadcode_output(DEADCODE_OUTPUT)

    assert len(packages) == 1
    assert packages[0].path == "example.com/mono/pkg/cache"
    delete, flush = packages[0].funcs
    assert delete.name == "Delete"
    assert delete.position.line == 12
    assert flush.generated and flush.marker


@pytest.mark.parametrize("output", ["", "  \n", "null\n", "[]"])
def test_parse_empty_deadcode_output(output):
    assert parse_deadcode_output(output) == []


def test_parse_invalid_deadcode_output():
    with pytest.raises(DeadcodeListError, match="failed to parse deadcode output"):
        parse_deadcode_output("deadcode: warning\n[")


def test_run_command_returns_stdout(tmp_path):
    out = asyncio.run(
        run_command(str(tmp_path), sys.executable, "-c", "import os; print(os.getcwd())")
    )

    assert out.strip() == str(tmp_path.resolve())


def test_run_command_failure_includes_output(tmp_path):
    script = "import sys; sys.stderr.write('go: go.mod file not found'); sys.exit(1)"

    with pytest.raises(CommandError) as exc_info:
        asyncio.run(run_command(str(tmp_path), sys.executable, "-c", script))

    assert exc_info.value.returncode == 1
    assert "go: go.mod file not found" in str(exc_info.value)


def test_run_command_missing_binary(tmp_path):
    with pytest.raises(ToolUnavailableError):
        asyncio.run(run_command(str(tmp_path), "deadmono-no-such-binary"))


def test_run_command_missing_directory(tmp_path):
    with pytest.raises(CommandError, match="directory does not exist"):
        asyncio.run(run_command(str(tmp_path / "missing"), sys.executable, "-c", "pass"))


def test_run_command_cancellation(tmp_path):
    pid_file = tmp_path / "pid"
    script = (
        "import os, pathlib, time; "
        f"pathlib.Path({str(pid_file)!r}).write_text(str(os.getpid())); "
        "time.sleep(30)"
    )

    async def scenario() -> None:
        task = asyncio.ensure_future(run_command(str(tmp_path), sys.executable, "-c", script))
        for _ in range(200):
            if pid_file.exists() and pid_file.read_text():
                break
            await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())

    pid = int(pid_file.read_text())
    with pytest.raises(ProcessLookupError):
        os.kill(pid, 0)


def test_verify_binaries_reports_missing_tool(monkeypatch):
    monkeypatch.setattr(go_tools.shutil, "which", lambda binary: None)

    with pytest.raises(ToolUnavailableError, match="go install golang.org/x/tools/cmd/deadcode"):
        verify_binaries()


def test_go_module_tool(monkeypatch):
    calls = []
    outputs = {
        ("list", "-m"): "example.com/mono\n",
        ("list", "-f", "{{.Root}}"): "/repo/\n",
        ("list", "-f", DEPS_TEMPLATE): "fmt\nexample.com/mono/pkg/cache\n\n",
    }

    async def fake_run_command(cwd, program, *args):
        calls.append((cwd, program, args))
        return outputs[args]

    monkeypatch.setattr(go_tools, "run_command", fake_run_command)
    tool = GoModuleTool()

    module = asyncio.run(tool.module_info("/repo/services/a"))
    deps = asyncio.run(tool.dependencies("/repo/services/a"))

    assert module.name == "example.com/mono/"
    assert module.root == "/repo"
    assert deps == {"fmt", "example.com/mono/pkg/cache"}
    assert all(cwd == "/repo/services/a" and program == "go" for cwd, program, _ in calls)


def test_deadcode_tool(monkeypatch):
    async def fake_run_command(cwd, program, *args):
        assert program == "deadcode"
        assert args == ("-json", "-test", "-filter", "<module>", "./...")
        return DEADCODE_OUTPUT

    monkeypatch.setattr(go_tools, "run_command", fake_run_command)

    packages = asyncio.run(
        DeadcodeTool().dead_code("/repo/services/a", AnalysisOptions(include_tests=True))
    )

    assert [p.name for p in packages] == ["cache"]
