import logging
import os
import time
from contextlib import contextmanager
from typing import Dict, Union

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

log = logging.getLogger("cleaning-estimator")

MetricValue = Union[int, float]
_metrics: Dict[str, MetricValue] = {}


def inc_metric(name: str, amount: int = 1) -> None:
    _metrics[name] = int(_metrics.get(name, 0)) + amount


def record_estimate(method: str, images: int) -> None:
    """Count one priced estimate and the photos behind it."""
    inc_metric("estimates_total")
    inc_metric(f"estimates_{method}")
    inc_metric("images_received", images)


def get_metrics_snapshot() -> Dict[str, MetricValue]:
    return dict(_metrics)


def reset_metrics() -> None:
    _metrics.clear()


@contextmanager
def measure(name: str):
    """Log how long the block took and keep it as ``time_ms_last_<name>``."""
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        log.info(f"⏱️ {name} took {elapsed_ms:.1f}ms")
        _metrics[f"time_ms_last_{name}"] = round(elapsed_ms, 1)
