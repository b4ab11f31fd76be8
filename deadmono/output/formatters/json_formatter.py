"""JSON formatter for structured output."""

import json

from deadmono.core.models import ScanResult
from deadmono.output.formatters.protocols import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Format results as JSON, in the same shape deadcode -json uses."""

    def format(self, result: ScanResult) -> str:
        """Format scan results as a JSON array of packages sorted by import path."""
        packages = [
            record.to_report().model_dump(by_alias=True)
            for _, record in sorted(result.dead_code.items())
            if record.functions
        ]
        return json.dumps(packages, indent="\t", ensure_ascii=False) + "\n"
