import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class EngineConfig:
    """
    Runtime settings for one processing run.

    pipelined: read the input in a publisher thread and hand parsed
        transactions to the processing thread through a bounded queue.
    queue_max_size: capacity of that queue.
    log_level: level name passed to logging.basicConfig by the CLI.
    """

    pipelined: bool = False
    queue_max_size: int = 1024
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.queue_max_size < 1:
            raise ValueError(f"queue_max_size must be positive, got {self.queue_max_size}")
        if self.log_level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {self.log_level!r}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """Build a config from PAYMENTS_* environment variables. Raises ValueError on bad values."""
        environ = os.environ if environ is None else environ
        defaults = cls()

        queue_size = environ.get("PAYMENTS_QUEUE_SIZE", str(defaults.queue_max_size)).strip()
        try:
            queue_max_size = int(queue_size)
        except ValueError:
            raise ValueError(f"PAYMENTS_QUEUE_SIZE must be an integer, got {queue_size!r}") from None

        return cls(
            pipelined=environ.get("PAYMENTS_PIPELINED", str(defaults.pipelined)).strip().lower() in _TRUE_VALUES,
            queue_max_size=queue_max_size,
            log_level=environ.get("PAYMENTS_LOG_LEVEL", defaults.log_level).strip().upper(),
        )
