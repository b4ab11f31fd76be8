"""Text formatter matching the deadcode output."""

from deadmono.core.models import ScanResult
from deadmono.output.formatters.protocols import BaseFormatter


def format_line(file: str, line: int, col: int, name: str) -> str:
    return f"{file}:{line}:{col}: unreachable func: {name}"


class TextFormatter(BaseFormatter):
    """Format results as one line per unreachable function."""

    def format(self, result: ScanResult) -> str:
        """Format scan results as sorted lines, empty if nothing is dead."""
        lines = sorted(
            format_line(func.position.file, func.position.line, func.position.col, func.name)
            for func in result.unused_functions
        )
        return "".join(f"{line}\n" for line in lines)
