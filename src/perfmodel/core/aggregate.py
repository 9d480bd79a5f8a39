"""Aggregation of raw benchmark rows into observations."""

import logging
from typing import Iterable, Optional

import numpy as np

from perfmodel.core.models import METRIC_NAMES, Observation, RawBenchmarkRow

logger = logging.getLogger(__name__)

GroupKey = tuple[str, float, float, Optional[float]]


def _group_key(row: RawBenchmarkRow) -> GroupKey:
    return (row.benchmark_id, row.input_avg_len, row.output_avg_len, row.traffic_level)


def _sort_key(observation_key: GroupKey) -> tuple:
    benchmark_id, input_len, output_len, traffic = observation_key
    # Rows without a traffic level sort ahead of those with one
    return (
        input_len,
        output_len,
        traffic is not None,
        traffic if traffic is not None else 0.0,
        benchmark_id,
    )


def aggregate_observations(rows: Iterable[RawBenchmarkRow]) -> list[Observation]:
    """Group rows by (benchmark, input, output, traffic) and average each metric.

    Args:
        rows: Benchmark rows already filtered to a single model.

    Returns:
        One Observation per distinct group, ordered by input, output and
        traffic level ascending.
    """
    groups: dict[GroupKey, list[RawBenchmarkRow]] = {}
    for row in rows:
        groups.setdefault(_group_key(row), []).append(row)

    observations = []
    for key in sorted(groups, key=_sort_key):
        members = groups[key]
        _, input_len, output_len, traffic = key
        averaged = {
            metric: float(np.mean([row.metric_value(metric) for row in members]))
            for metric in METRIC_NAMES
        }
        observations.append(
            Observation(
                input_tokens=input_len,
                output_tokens=output_len,
                traffic_level=traffic,
                **averaged,
            )
        )

    logger.debug(f"Aggregated {sum(len(g) for g in groups.values())} rows into {len(observations)} observations")
    return observations
