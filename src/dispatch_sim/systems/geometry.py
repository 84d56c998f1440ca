"""
Stat-pool geometry and success scoring.

A stat pool is drawn as a pentagon on a radar chart: one vertex per pillar,
distance from the centre proportional to the stat. Success probability is
the share of the mission's pentagon covered by the team.

The covered region is approximated by the pentagon of the per-pillar
minimum of both pools, not the true polygon intersection. Scores match the
radar overlay players see.

All functions are pure.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..state.schema import PILLARS, StatPool

DEFAULT_MAX_VALUE = 10
DEFAULT_RADIUS = 100

ANGLE_STEP = 2 * math.pi / len(PILLARS)
START_ANGLE = -math.pi / 2  # First pillar points straight up


@dataclass(frozen=True)
class Point:
    x: float
    y: float


def pentagon_vertices(
    stats: StatPool,
    max_value: float = DEFAULT_MAX_VALUE,
    radius: float = DEFAULT_RADIUS,
) -> list[Point]:
    """Vertex positions for a stat pool, one per pillar in canonical order."""
    vertices = []
    for index, pillar in enumerate(PILLARS):
        angle = START_ANGLE + ANGLE_STEP * index
        distance = (stats[pillar] / max_value) * radius
        vertices.append(Point(distance * math.cos(angle), distance * math.sin(angle)))
    return vertices


def polygon_area(vertices: list[Point]) -> float:
    """Area of a simple polygon via the Shoelace formula."""
    n = len(vertices)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += vertices[i].x * vertices[j].y
        area -= vertices[j].x * vertices[i].y

    return abs(area) / 2


def encompasses(stats: StatPool, requirements: StatPool) -> bool:
    """True if every pillar of ``stats`` meets the requirement."""
    return all(stats[p] >= requirements[p] for p in PILLARS)


def combine_stats(*pools: StatPool) -> StatPool:
    """Team aggregation: the best specialist on each pillar wins."""
    if not pools:
        return StatPool.empty()
    return StatPool(**{p.field_name: max(pool[p] for pool in pools) for p in PILLARS})


def intersection_stats(a: StatPool, b: StatPool) -> StatPool:
    """Per-pillar minimum of two pools."""
    return StatPool(**{p.field_name: min(a[p], b[p]) for p in PILLARS})


def success_probability(
    stats: StatPool,
    requirements: StatPool,
    max_value: float = DEFAULT_MAX_VALUE,
) -> float:
    """
    Chance of success in [0, 1].

    1.0 when the stats fully cover the requirements, or when the mission
    has no area at all. Otherwise the area of the min-per-pillar pentagon
    divided by the area of the requirements pentagon.
    """
    if encompasses(stats, requirements):
        return 1.0

    mission_area = polygon_area(pentagon_vertices(requirements, max_value))
    if mission_area == 0:
        return 1.0

    overlap = intersection_stats(stats, requirements)
    overlap_area = polygon_area(pentagon_vertices(overlap, max_value))

    return min(overlap_area / mission_area, 1.0)


def team_success_probability(
    team_stats: list[StatPool],
    requirements: StatPool,
    max_value: float = DEFAULT_MAX_VALUE,
) -> float:
    """Success probability of a whole team, scored on its combined pool."""
    return success_probability(combine_stats(*team_stats), requirements, max_value)
