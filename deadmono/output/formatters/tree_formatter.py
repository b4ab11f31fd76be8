"""Tree formatter for rich terminal output."""

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from deadmono.core.models import ScanResult
from deadmono.output.formatters.protocols import BaseFormatter


class TreeFormatter(BaseFormatter):
    """Format results as a rich tree of packages and their dead functions."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def format(self, result: ScanResult) -> str:
        """Render scan results as a rich tree."""
        if not result.unused_functions:
            return "✅ No unreachable functions found!\n"

        with self.console.capture() as capture:
            self._print_tree(result)
        return capture.get()

    def _print_tree(self, result: ScanResult) -> None:
        """Print the tree structure to console."""
        functions = result.unused_functions
        root_tree = Tree(
            f"🔍 Unreachable functions by package (total {len(functions)} functions)",
            guide_style="dim",
        )

        for path, record in sorted(result.dead_code.items()):
            if not record.functions:
                continue

            package_node = root_tree.add(
                f"[bold blue]{path}[/bold blue] ({record.name})", guide_style="dim"
            )
            for func in record.to_report().funcs:
                position = f"({func.position.file}:{func.position.line}:{func.position.col})"
                func_text = Text(f"{func.name} ", style="magenta")
                func_text.append(position, style="grey50")
                if func.generated:
                    func_text.append(" generated", style="yellow")
                if func.marker:
                    func_text.append(" marker", style="yellow")
                package_node.add(func_text)

        self.console.print(root_tree)

        # Print summary
        self.console.print("\n📊 Summary:")
        self.console.print(f"   Entrypoints scanned: {result.entrypoints}")
        self.console.print(f"   Unreachable functions: {len(functions)}")
        self.console.print(f"   Scan duration: {result.scan_duration:.2f}s")
