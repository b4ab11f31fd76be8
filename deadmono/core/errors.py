"""Errors raised while analyzing a monorepo."""


class DeadmonoError(Exception):
    """Base class for every failure that aborts a run."""


class UsageError(DeadmonoError):
    """The tool was invoked without anything to analyze."""


class ToolUnavailableError(DeadmonoError):
    """A required binary is not on PATH."""

    def __init__(self, binary: str, hint: str = "") -> None:
        self.binary = binary
        self.hint = hint
        message = f"'{binary}' was not found in $PATH"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(message)


class ModuleMismatchError(DeadmonoError):
    """Entrypoints belong to different modules and no custom filter is set."""

    def __init__(self, common_module: str, module: str) -> None:
        self.common_module = common_module
        self.module = module
        super().__init__(
            f"different modules are not supported without filter flag: {common_module} != {module}"
        )


class ResolutionError(DeadmonoError):
    """An entrypoint path does not belong to a valid build unit."""


class CollaboratorError(DeadmonoError):
    """An external tool failed or returned output that cannot be used."""


class CommandError(CollaboratorError):
    """A subprocess exited with a non-zero status."""

    def __init__(self, command: list[str], output: str, returncode: int | None = None) -> None:
        self.command = command
        self.output = output
        self.returncode = returncode
        super().__init__(
            f"{output.strip()}\nErr: '{' '.join(command)}' exited with status {returncode}"
        )


class DependencyListError(CollaboratorError):
    """Dependencies of an entrypoint could not be listed."""


class DeadcodeListError(CollaboratorError):
    """The deadcode analyzer failed for an entrypoint."""


class UnsupportedOutputError(DeadmonoError):
    """The requested output format is not available."""
