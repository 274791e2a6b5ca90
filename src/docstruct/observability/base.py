import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class MetricsHook(Protocol):
    """Sink for parser, scoring and validation metrics.

    Durations are reported in milliseconds. Names come from
    ``docstruct.observability.names``.
    """

    def record_latency(
        self,
        name: str,
        value_ms: float,
        labels: dict[str, str] | None = None,
    ) -> None: ...

    def increment(
        self,
        name: str,
        value: int = 1,
        labels: dict[str, str] | None = None,
    ) -> None: ...

    def record_gauge(
        self,
        name: str,
        value: float,
        labels: dict[str, str] | None = None,
    ) -> None: ...


class NoOpMetricsHook:
    def record_latency(
        self, name: str, value_ms: float, labels: dict[str, str] | None = None
    ) -> None:
        pass

    def increment(
        self, name: str, value: int = 1, labels: dict[str, str] | None = None
    ) -> None:
        pass

    def record_gauge(
        self, name: str, value: float, labels: dict[str, str] | None = None
    ) -> None:
        pass


class LoggingMetricsHook:
    """Writes every metric to the module logger at DEBUG level.

    Handy when running a document through the pipeline by hand.
    """

    def __init__(self, level: int = logging.DEBUG) -> None:
        self.level = level

    def record_latency(
        self, name: str, value_ms: float, labels: dict[str, str] | None = None
    ) -> None:
        logger.log(self.level, "latency %s=%.3fms labels=%s", name, value_ms, labels)

    def increment(
        self, name: str, value: int = 1, labels: dict[str, str] | None = None
    ) -> None:
        logger.log(self.level, "counter %s+=%d labels=%s", name, value, labels)

    def record_gauge(
        self, name: str, value: float, labels: dict[str, str] | None = None
    ) -> None:
        logger.log(self.level, "gauge %s=%.4f labels=%s", name, value, labels)
