import logging
import sys
from typing import ClassVar


class Log:
    """Process-wide logger for the document core.

    Every module logs through these classmethods so handler setup happens in
    exactly one place (``configure``, called from the entry point).
    """

    _logger: logging.Logger = logging.getLogger("doccore")
    _warned: ClassVar[set[str]] = set()

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Set the level and attach a stdout handler unless one exists."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def exception(cls, message: str, **kwargs: object) -> None:
        """Log an error together with the active traceback."""
        cls._logger.exception(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def warning_once(cls, key: str, message: str) -> None:
        """Log a warning the first time ``key`` is seen in this process."""
        if key in cls._warned:
            return
        cls._warned.add(key)
        cls._logger.warning(message)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        cls._logger.debug(message, extra=kwargs)
