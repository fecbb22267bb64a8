"""
Structured Logging for FreezeForge.

Every module obtains its logger through get_logger() rather than using
Python's logging module directly:

    from freezeforge.core.logging import get_logger
    logger = get_logger(__name__)

Logger Types
------------
**StructuredLogger**
    Base logger. Keyword arguments become key=value fields on the message:

        logger = get_logger(__name__)
        logger.info("Tagged artifact", size=1536)  # Tagged artifact | size=1536

**PipelineLogger**
    Tracks build stages (probe, preflight, sandbox, install, package, tag)
    with timing:

        plog = PipelineLogger("wizclaw")
        plog.start_stage("package")
        plog.finish(success=True, output="dist/wizclaw-linux-x64")

Loggers are cached by name, so repeated get_logger() calls return the same
instance.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "WARNING"
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    file_path: Optional[Path] = None
    console: bool = True


class StructuredLogger:
    """
    Structured logger.

    Provides consistent logging across the pipeline with key=value fields
    appended to each message.
    """

    def __init__(self, name: str, config: Optional[LogConfig] = None) -> None:
        self.logger = logging.getLogger(name)
        self.config = config or _ConfigHolder.get_config()
        self._setup_logger()

    def _setup_logger(self) -> None:
        """Configure the logger."""
        level = getattr(logging, self.config.level.upper(), logging.INFO)
        self.logger.setLevel(level)
        self.logger.propagate = False

        # Remove existing handlers
        for handler in self.logger.handlers:
            handler.close()
        self.logger.handlers.clear()

        formatter = logging.Formatter(
            self.config.format,
            datefmt=self.config.date_format,
        )

        if self.config.console:
            from rich.console import Console
            from rich.logging import RichHandler

            # Log lines go to stderr so --json output on stdout stays clean
            console_handler = RichHandler(
                console=Console(stderr=True),
                show_time=True,
                show_path=False,
                markup=False,
                rich_tracebacks=True,
            )
            console_handler.setLevel(level)
            self.logger.addHandler(console_handler)

        if self.config.file_path:
            self.config.file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self.config.file_path)
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

        if not self.logger.handlers:
            self.logger.addHandler(logging.NullHandler())

    def _format_message(self, message: str, **kwargs: Any) -> str:
        """Append key=value fields to the message."""
        if kwargs:
            field_str = " | ".join(f"{k}={v}" for k, v in kwargs.items())
            return f"{message} | {field_str}"
        return message

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        self.logger.debug(self._format_message(message, **kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        self.logger.info(self._format_message(message, **kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        self.logger.warning(self._format_message(message, **kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message."""
        self.logger.error(self._format_message(message, **kwargs))


# Module-level logger factory
_loggers: dict[str, StructuredLogger] = {}


def get_logger(name: str, config: Optional[LogConfig] = None) -> StructuredLogger:
    """
    Get or create a structured logger.

    Args:
        name: Logger name (typically __name__).
        config: Optional logging configuration.

    Returns:
        Configured StructuredLogger instance.
    """
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name, config)
    return _loggers[name]


def configure_logging(
    level: str = "WARNING",
    log_file: Optional[Path] = None,
    console: bool = True,
) -> None:
    """
    Configure global logging settings.

    Loggers created before this call are reconfigured in place.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional file path for log output.
        console: Whether to log to console.
    """
    config = LogConfig(
        level=level,
        file_path=log_file,
        console=console,
    )
    _ConfigHolder.set_config(config)

    for logger in _loggers.values():
        logger.config = config
        logger._setup_logger()


class _ConfigHolder:
    """Holds default logging configuration."""

    _config: LogConfig = LogConfig()

    @classmethod
    def get_config(cls) -> LogConfig:
        """Get the default config."""
        return cls._config

    @classmethod
    def set_config(cls, config: LogConfig) -> None:
        """Set the default config."""
        cls._config = config


class PipelineLogger:
    """
    Specialized logger for build pipeline runs.

    Tracks build stages and provides timing information.
    """

    def __init__(self, app_name: str) -> None:
        self.app_name = app_name
        self.logger = get_logger("freezeforge.pipeline")
        self._stage_start: Optional[datetime] = None
        self._current_stage: Optional[str] = None

    def start_stage(self, stage: str) -> None:
        """Mark the start of a build stage."""
        self._finish_current_stage()
        self._current_stage = stage
        self._stage_start = datetime.now()
        self.logger.info(
            "Starting stage",
            app=self.app_name,
            stage=stage,
        )

    def _finish_current_stage(self) -> None:
        """Log completion of current stage if any."""
        if self._current_stage and self._stage_start:
            duration = (datetime.now() - self._stage_start).total_seconds()
            self.logger.info(
                "Completed stage",
                app=self.app_name,
                stage=self._current_stage,
                duration_sec=f"{duration:.2f}",
            )
        self._current_stage = None
        self._stage_start = None

    def finish(
        self,
        success: bool,
        output: Optional[str] = None,
        error: Optional[str] = None,
    ) -> None:
        """Mark pipeline completion."""
        if success:
            self._finish_current_stage()
            self.logger.info(
                "Pipeline completed successfully",
                app=self.app_name,
                output=output,
            )
        else:
            # The CLI renders the error itself
            self.logger.info(
                "Pipeline failed",
                app=self.app_name,
                stage=self._current_stage,
                error=error,
            )
            self._current_stage = None
            self._stage_start = None
