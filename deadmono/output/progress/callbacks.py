import logging
from typing import Any

from rich.progress import Progress, TaskID

from deadmono.core.protocols import ProgressCallback

logger = logging.getLogger(__name__)


class RichProgressCallback(ProgressCallback):
    """Show each finished step as the description of a rich progress task."""

    def __init__(self, progress: Progress, task_id: TaskID) -> None:
        self.progress = progress
        self.task_id = task_id

    def update(self, message: str, **fields: Any) -> None:
        self.progress.update(self.task_id, description=message, **fields)


class LoggingProgressCallback(ProgressCallback):
    """Log finished steps, used when debug output replaces the progress bar."""

    def __init__(self, total: int) -> None:
        self.total = total
        self.completed = 0

    def update(self, message: str, **fields: Any) -> None:
        self.completed += fields.get("advance", 0)
        logger.debug(f"[{self.completed}/{self.total}] {message}")
