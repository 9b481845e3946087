import logging
import sys
from typing import TextIO


class Log:
    """Centralized console logging for sandbox runs."""

    _logger: logging.Logger = logging.getLogger("sandbox_sync")
    HANDLER_NAME = "sandbox_sync.console"

    @classmethod
    def configure(cls, log_level: str, stream: TextIO | None = None) -> None:
        """Set the level and attach a single console handler (stdout by default)."""
        cls._logger.setLevel(log_level.upper())
        if not any(handler.get_name() == cls.HANDLER_NAME for handler in cls._logger.handlers):
            handler = logging.StreamHandler(stream or sys.stdout)
            handler.set_name(cls.HANDLER_NAME)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)
        cls._logger.propagate = False

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        cls._logger.debug(message, extra=kwargs)
