from __future__ import annotations

import logging
from pathlib import Path

from dependency_injector.resources import Resource

from .handlers import build_json_file_handler, build_human_console_handler


class RunLogger(Resource):
    """Structured logger for one bootstrap invocation.

    Writes ``<logs_dir>/<run_name>.jsonl`` and, optionally, human-readable
    console lines. Event names go in the message, details as keyword fields.
    """

    def init(
        self,
        *,
        run_name: str | None = None,
        logs_dir: Path,
        logger_name: str = "devenv_bootstrap",
        console_output: bool = False,
        level: str = "INFO",
    ) -> "RunLogger":
        """Configure handlers for this run.

        Args:
            run_name: Log file stem; no file handler when omitted
            logs_dir: Directory to store log files
            logger_name: Logger name
            console_output: Whether to enable console output
            level: Logging level (DEBUG, INFO, WARNING, ERROR)

        Returns:
            Self for dependency_injector Resource pattern
        """
        numeric_level = getattr(logging, level.upper())
        self._logger = logging.getLogger(logger_name)
        self._logger.setLevel(numeric_level)
        self._logger.propagate = False

        self._logger.handlers.clear()
        self._handlers = []

        if run_name:
            file_handler = build_json_file_handler(logs_dir / f"{run_name}.jsonl", level=numeric_level)
            self._logger.addHandler(file_handler)
            self._handlers.append(file_handler)

        if console_output:
            console_handler = build_human_console_handler(level=numeric_level)
            self._logger.addHandler(console_handler)
            self._handlers.append(console_handler)

        return self

    def shutdown(self, resource: "RunLogger") -> None:
        """Flush and close every handler so the log file can be moved or deleted."""
        for handler in self._handlers:
            handler.flush()
            handler.close()
        self._logger.handlers.clear()

    def debug(self, message: str, **kwargs) -> None:
        self._logger.debug(message, extra=kwargs or None)

    def info(self, message: str, **kwargs) -> None:
        self._logger.info(message, extra=kwargs or None)

    def warning(self, message: str, **kwargs) -> None:
        self._logger.warning(message, extra=kwargs or None)

    def error(self, message: str, exc_info: bool = False, **kwargs) -> None:
        self._logger.error(message, extra=kwargs or None, exc_info=exc_info)

    def exception(self, message: str, **kwargs) -> None:
        """Log at ERROR with the active traceback attached."""
        self._logger.exception(message, extra=kwargs or None)
