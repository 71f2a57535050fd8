"""
Nearby Context Assembler
========================

Renders the rider's closest sponsored businesses into the fixed-format
block spliced into the assistant prompt::

    1. Lune Cafe - Artisanal coffee in Pioneer Square (0.6 mi / 1.0 km away)
       Website: https://www.lunesglow.com/

Lines are 1-based, closest first; the website always sits on its own
``Website:`` sub-line.  An empty input yields ``NO_NEARBY_BUSINESSES``
rather than an empty string.
"""

from __future__ import annotations

from typing import Sequence

from ridelytics.models import MatchResult

NO_NEARBY_BUSINESSES = "No nearby businesses available."
DEFAULT_CONTEXT_LIMIT = 5
METERS_PER_MILE = 1609.34


def _format_line(index: int, match: MatchResult) -> str:
    record = match.record
    distance_km = match.precise_distance_m / 1000
    distance_mi = match.precise_distance_m / METERS_PER_MILE

    heading = f"{index}. {record.business_name}"
    if record.description:
        heading += f" - {record.description}"

    return (
        f"{heading} ({distance_mi:.1f} mi / {distance_km:.1f} km away)\n"
        f"   Website: {record.website_url}"
    )


def assemble_nearby_context(
    matches: Sequence[MatchResult],
    limit: int = DEFAULT_CONTEXT_LIMIT,
) -> str:
    """Format the ``limit`` closest matches as a prompt context block."""
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")

    closest = sorted(
        matches,
        key=lambda m: (m.precise_distance_m, m.record.catalog_index),
    )[:limit]

    if not closest:
        return NO_NEARBY_BUSINESSES

    return "\n".join(_format_line(i, match) for i, match in enumerate(closest, start=1))
