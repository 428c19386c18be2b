"""Prometheus text format encoder for metric samples."""

import math
from collections.abc import Iterable

from datasourcepy.core.models import MetricSample

CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def _format_labels(labels: dict[str, str]) -> str:
    if not labels:
        return ""
    # "le" goes last, as Prometheus client libraries write it
    keys = sorted(labels, key=lambda k: (k == "le", k))
    pairs = ",".join(f'{key}="{_escape(labels[key])}"' for key in keys)
    return "{" + pairs + "}"


def _format_value(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return repr(float(value))


def encode_metrics(samples: Iterable[MetricSample]) -> str:
    """Encode metric samples in the Prometheus text exposition format.

    Every sample is one increment, as produced by counter() and histogram().
    Samples of the same series (name and labels) are summed into one line.

    Args:
        samples: An iterable of MetricSample objects.

    Returns:
        One line per series, sorted by name and labels.
        Empty string if no samples.
    """
    totals: dict[tuple[str, str], float] = {}
    for sample in samples:
        key = (sample.name, _format_labels(sample.labels))
        totals[key] = totals.get(key, 0.0) + sample.value

    if not totals:
        return ""

    lines = [
        f"{name}{labels} {_format_value(value)}"
        for (name, labels), value in sorted(totals.items())
    ]
    return "\n".join(lines) + "\n"
