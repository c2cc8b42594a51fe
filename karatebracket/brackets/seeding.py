"""Seeding order that keeps competitors of the same dojo apart."""

from __future__ import annotations

import random
from typing import Optional

from .models import Competitor


def group_by_dojo(competitors: list[Competitor]) -> dict[str, list[Competitor]]:
    """Group competitors by dojo, keeping first-seen dojo order."""
    groups: dict[str, list[Competitor]] = {}
    for competitor in competitors:
        groups.setdefault(competitor.dojo_id or "", []).append(competitor)
    return groups


def seed_competitors(
    competitors: list[Competitor], rng: Optional[random.Random] = None
) -> list[Competitor]:
    """Return the round-1 seed order for the given competitors.

    A single dojo is shuffled uniformly. Otherwise each dojo is shuffled,
    dojos are taken largest first, and a dojo's members alternate between the
    top and bottom half of the draw. This spreads clubmates out but does not
    guarantee they never meet in round 1.
    """
    rng = rng or random.SystemRandom()
    groups = group_by_dojo(competitors)

    if len(groups) <= 1:
        seeded = list(competitors)
        rng.shuffle(seeded)
        return seeded

    shuffled_groups = []
    for members in groups.values():
        members = list(members)
        rng.shuffle(members)
        shuffled_groups.append(members)

    # sorted() is stable, so equally sized dojos keep first-seen order
    shuffled_groups = sorted(shuffled_groups, key=len, reverse=True)

    top_half: list[Competitor] = []
    bottom_half: list[Competitor] = []
    for members in shuffled_groups:
        for index, competitor in enumerate(members):
            if index % 2 == 0:
                top_half.append(competitor)
            else:
                bottom_half.append(competitor)

    return top_half + bottom_half
