import logging
from typing import Dict, Optional

from prompty.config import STATSD

logger = logging.getLogger("metrics")


class StatsdClient:
    """Log-backed metrics sink; each call emits one ``STATSD`` log line."""

    def __init__(self, prefix: str = STATSD.PREFIX):
        self.prefix = prefix
        logger.debug(f"Initialized StatsdClient with prefix: {prefix}")

    def timing(
        self,
        metric: str,
        value_ms: float,
        sample_rate: float = 1,
        tags: Optional[Dict[str, str]] = None,
    ):
        logger.info(f"STATSD TIMING: {self._format(metric, tags)} {value_ms:.2f}ms@{sample_rate}")

    def increment(
        self,
        metric: str,
        value: int = 1,
        sample_rate: float = 1,
        tags: Optional[Dict[str, str]] = None,
    ):
        logger.info(f"STATSD COUNT: {self._format(metric, tags)} +{value}@{sample_rate}")

    def _format(self, metric: str, tags: Optional[Dict[str, str]]) -> str:
        return f"{self.prefix}.{self._sanitize_metric(metric)}{self._format_tags(tags)}"

    def _sanitize_metric(self, metric: str) -> str:
        return metric.replace("/", ".").replace("-", "_").replace(" ", "_")

    def _format_tags(self, tags: Optional[Dict[str, str]]) -> str:
        if not tags:
            return ""
        return "," + ",".join(f"{k}:{v}" for k, v in tags.items())


# Create a singleton instance
statsd = StatsdClient()
