"""Go toolchain and deadcode analyzer via async subprocesses."""

import asyncio
import logging
import os
import shutil

from pydantic import TypeAdapter, ValidationError

from deadmono.core.errors import CommandError, DeadcodeListError, ToolUnavailableError
from deadmono.core.models import AnalysisOptions, ModuleInfo, PackageReport

logger = logging.getLogger(__name__)

GO_BINARY = "go"
DEADCODE_BINARY = "deadcode"

INSTALL_HINTS = {
    GO_BINARY: "Go is not in $PATH, see https://go.dev/doc/install",
    DEADCODE_BINARY: "Install deadcode with 'go install golang.org/x/tools/cmd/deadcode@latest'",
}

DEPS_TEMPLATE = '{{range .Deps}}{{.}}{{"\\n"}}{{end}}'

_packages_adapter = TypeAdapter(list[PackageReport])


def verify_binaries(binaries: tuple[str, ...] = (DEADCODE_BINARY, GO_BINARY)) -> None:
    """Raise ToolUnavailableError for the first binary missing from PATH."""
    for binary in binaries:
        if shutil.which(binary) is None:
            raise ToolUnavailableError(binary, INSTALL_HINTS.get(binary, ""))


async def run_command(cwd: str, program: str, *args: str) -> str:
    """
    Run a command in ``cwd`` and return its stdout.

    The child process is killed if the awaiting task is cancelled.

    Raises:
        ToolUnavailableError: ``program`` is not on PATH
        CommandError: the command exited with a non-zero status
    """
    if shutil.which(program) is None:
        raise ToolUnavailableError(program, INSTALL_HINTS.get(program, ""))

    command = [program, *args]
    if not os.path.isdir(cwd):
        raise CommandError(command, f"directory does not exist: {cwd}")

    logger.debug(f"Running {' '.join(command)} in {cwd}")
    proc = await asyncio.create_subprocess_exec(
        *command,
        cwd=cwd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await proc.communicate()
    except asyncio.CancelledError:
        if proc.returncode is None:
            proc.kill()
            await proc.wait()
        raise

    out = stdout.decode("utf-8", errors="replace")
    err = stderr.decode("utf-8", errors="replace")
    if proc.returncode != 0:
        raise CommandError(command, out + err, proc.returncode)
    if err.strip():
        logger.debug(f"{program} stderr: {err.strip()}")
    return out


def deadcode_args(options: AnalysisOptions) -> list[str]:
    """Build the deadcode command line for the given options."""
    args = ["-json"]
    if options.include_generated:
        args.append("-generated")
    if options.include_tests:
        args.append("-test")
    if options.build_tags:
        args.extend(["-tags", options.build_tags])
    if options.filter_pattern:
        args.extend(["-filter", options.filter_pattern])
    args.append("./...")
    return args


def parse_deadcode_output(output: str) -> list[PackageReport]:
    """Parse the JSON array printed by `deadcode -json`."""
    text = output.strip()
    if not text or text == "null":
        return []
    try:
        return _packages_adapter.validate_json(text)
    except ValidationError as e:
        raise DeadcodeListError(f"failed to parse deadcode output: {e}") from e


class GoModuleTool:
    """Module identity and dependencies from `go list`."""

    def __init__(self, go_binary: str = GO_BINARY) -> None:
        self.go_binary = go_binary

    async def module_info(self, directory: str) -> ModuleInfo:
        name = await run_command(directory, self.go_binary, "list", "-m")
        root = await run_command(directory, self.go_binary, "list", "-f", "{{.Root}}")
        return ModuleInfo(
            name=name.strip().rstrip("/") + "/",
            root=os.path.normpath(root.strip()),
        )

    async def dependencies(self, directory: str) -> set[str]:
        out = await run_command(directory, self.go_binary, "list", "-f", DEPS_TEMPLATE)
        return {line for line in out.splitlines() if line}


class DeadcodeTool:
    """Unreachable functions from golang.org/x/tools/cmd/deadcode."""

    def __init__(self, deadcode_binary: str = DEADCODE_BINARY) -> None:
        self.deadcode_binary = deadcode_binary

    async def dead_code(self, directory: str, options: AnalysisOptions) -> list[PackageReport]:
        out = await run_command(directory, self.deadcode_binary, *deadcode_args(options))
        return parse_deadcode_output(out)
