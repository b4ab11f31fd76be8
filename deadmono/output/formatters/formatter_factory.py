from deadmono.core.errors import UnsupportedOutputError
from deadmono.output.formatters.enums import OutputFormat
from deadmono.output.formatters.json_formatter import JsonFormatter
from deadmono.output.formatters.protocols import BaseFormatter
from deadmono.output.formatters.text_formatter import TextFormatter
from deadmono.output.formatters.tree_formatter import TreeFormatter


def get_formatter(output_format: OutputFormat | str) -> BaseFormatter:
    """Get the appropriate formatter for the output format."""
    formatters: dict[OutputFormat, BaseFormatter] = {
        OutputFormat.TEXT: TextFormatter(),
        OutputFormat.JSON: JsonFormatter(),
        OutputFormat.TREE: TreeFormatter(),
    }

    try:
        return formatters[OutputFormat(output_format)]
    except (KeyError, ValueError):
        raise UnsupportedOutputError(f"unsupported output format: {output_format}") from None
