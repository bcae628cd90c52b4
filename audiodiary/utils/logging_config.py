"""
Logging Configuration

Configurable logging levels, optional rotating log file, and the helpers the
transcription core uses to report provider selection and timings.

Credentials are never written to logs: log_configuration_details masks any
key that looks like a secret.
"""

import logging
import logging.handlers
import sys
import time
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Optional


SENSITIVE_MARKERS = ("key", "token", "secret", "password", "credential")


class LogLevel(Enum):
    """Supported logging levels."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LoggingConfig:
    """
    Centralized logging configuration for the audio diary tools.
    """

    def __init__(self):
        self._configured = False
        self._log_file_handler: Optional[logging.Handler] = None
        self._console_handler: Optional[logging.Handler] = None

    def configure_logging(
        self,
        level: str = "info",
        log_file: Optional[str] = None,
        include_timestamps: bool = True,
        max_log_file_size: int = 5 * 1024 * 1024,
        backup_count: int = 3,
        force: bool = False,
    ) -> None:
        """
        Configure logging for the application.

        Args:
            level: Logging level (debug, info, warning, error)
            log_file: Optional log file path
            include_timestamps: Whether to include timestamps in console messages
            max_log_file_size: Maximum log file size before rotation
            backup_count: Number of rotated log files to keep
            force: Reconfigure even if logging was configured before
        """
        if self._configured and not force:
            return

        log_level = self._get_log_level(level)
        debug_mode = log_level == logging.DEBUG

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)
        root_logger.handlers.clear()

        parts = ["%(asctime)s"] if include_timestamps else []
        if debug_mode:
            parts.append("%(name)s")
        parts.extend(["%(levelname)s", "%(message)s"])
        console_formatter = logging.Formatter(
            " - ".join(parts),
            datefmt="%Y-%m-%d %H:%M:%S" if debug_mode else "%H:%M:%S",
        )

        self._console_handler = logging.StreamHandler(sys.stderr)
        self._console_handler.setLevel(log_level)
        self._console_handler.setFormatter(console_formatter)
        root_logger.addHandler(self._console_handler)

        if log_file:
            self._configure_file_logging(log_file, log_level, max_log_file_size, backup_count)

        # httpx logs every request at INFO; keep that for debug runs only
        logging.getLogger("httpx").setLevel(logging.DEBUG if debug_mode else logging.WARNING)

        self._configured = True
        logging.getLogger(__name__).debug(f"Logging configured: level={level}, file={log_file}")

    def _get_log_level(self, level_str: str) -> int:
        """Convert string log level to logging constant."""
        level_map = {
            LogLevel.DEBUG.value: logging.DEBUG,
            LogLevel.INFO.value: logging.INFO,
            LogLevel.WARNING.value: logging.WARNING,
            LogLevel.ERROR.value: logging.ERROR,
        }
        return level_map.get(level_str.lower(), logging.INFO)

    def _configure_file_logging(
        self,
        log_file: str,
        log_level: int,
        max_size: int,
        backup_count: int,
    ) -> None:
        """Configure file logging with rotation."""
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            self._log_file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=max_size,
                backupCount=backup_count,
                encoding='utf-8'
            )
        except OSError as e:
            # Continue with console only
            logging.getLogger(__name__).warning(f"Failed to setup log file {log_file}: {e}")
            return

        self._log_file_handler.setLevel(log_level)
        self._log_file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        logging.getLogger().addHandler(self._log_file_handler)

    def log_configuration_details(self, config: Dict[str, Any]) -> None:
        """Log a flattened configuration mapping at debug level, secrets masked."""
        logger = logging.getLogger(__name__)
        if not logger.isEnabledFor(logging.DEBUG):
            return

        logger.debug("=== Configuration Details ===")
        for key, value in config.items():
            logger.debug(f"  {key}: {mask_value(key, value)}")
        logger.debug("=== End Configuration ===")

    def log_provider_selection(self, provider: str, reason: str, available: Iterable[str]) -> None:
        """Log which provider was chosen and why."""
        logger = logging.getLogger(__name__)
        available = list(available)
        logger.info(f"Selected provider: {provider}")
        logger.debug(f"Selection reason: {reason}")
        logger.debug(f"Available providers: {', '.join(available) if available else 'none'}")

    def log_operation_timing(self, operation: str, duration: float) -> None:
        """Log operation timing information."""
        logger = logging.getLogger(__name__)
        if duration < 1.0:
            logger.debug(f"{operation} completed in {duration*1000:.0f}ms")
        else:
            logger.info(f"{operation} completed in {duration:.1f}s")

    @contextmanager
    def timed(self, operation: str):
        """Context manager that logs the duration of the wrapped block."""
        start = time.monotonic()
        try:
            yield
        finally:
            self.log_operation_timing(operation, time.monotonic() - start)

    def is_debug_enabled(self) -> bool:
        """Check if debug logging is enabled."""
        return logging.getLogger().isEnabledFor(logging.DEBUG)


def mask_value(key: str, value: Any) -> Any:
    """Replace the value of secret-looking keys with a mask."""
    if any(marker in key.lower() for marker in SENSITIVE_MARKERS):
        return "***MASKED***" if value else None
    return value


# Global logging configuration instance
logging_config = LoggingConfig()


def configure_logging(level: str = "info", log_file: Optional[str] = None) -> None:
    """
    Convenience function to configure logging.

    Args:
        level: Logging level (debug, info, warning, error)
        log_file: Optional log file path
    """
    logging_config.configure_logging(level=level, log_file=log_file)
