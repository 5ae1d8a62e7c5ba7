"""
Scene ordering.

Two layers of ordering are applied while building a schedule:

1. Intra-location ordering, used by the packer to decide which scene of a
   location to try next. It is pluggable: `LocationTypeStrategy` front-loads
   exterior day work, `CastOverlapStrategy` keeps the same actors in front of
   the camera for as long as possible.
2. Day-level ordering, applied once a day is closed, so the call sheet runs
   from morning to night.

Orderings are returned as permutations of positions into the list they were
given, never as new scene objects.
"""

from typing import AbstractSet, Dict, List, Sequence

from .exceptions import ConfigurationError
from .models import Scene

# Rank of a scene on the final call sheet; unlisted values (DAY included) go last
DAY_TIME_ORDER = ["MORNING", "EVENING", "NIGHT", "UNKNOWN"]

OTHER_CLASS = 4


def sub_location_order(scenes: Sequence[Scene]) -> List[int]:
    """Positions grouped by sub-location, busiest sub-location first"""
    blocks: Dict[str, List[int]] = {}
    for position, scene in enumerate(scenes):
        blocks.setdefault(scene.sub_location_name, []).append(position)

    # sorted() is stable, so equal counts keep first-seen order
    ranked = sorted(blocks.values(), key=len, reverse=True)
    return [position for block in ranked for position in block]


def location_type_class(scene: Scene) -> int:
    """
    Shooting priority class of a scene.

    0: EXT day/evening (needs daylight, shoot first)
    1: INT day/evening
    2: INT night
    3: EXT night
    4: anything else (INT/EXT, I/E, UNKNOWN, morning scenes...)
    """
    daylight = scene.time_of_day in ("DAY", "EVENING")
    if scene.location_type == "EXT" and daylight:
        return 0
    if scene.location_type == "INT" and daylight:
        return 1
    if scene.location_type == "INT" and scene.time_of_day == "NIGHT":
        return 2
    if scene.location_type == "EXT" and scene.time_of_day == "NIGHT":
        return 3
    return OTHER_CLASS


class LocationTypeStrategy:
    """Sub-location blocks, each ordered by location-type/time-of-day class"""

    name = "location_type"

    def order(self, scenes: Sequence[Scene], day_cast: AbstractSet[str] = frozenset()) -> List[int]:
        result = []
        base = sub_location_order(scenes)
        # Walk the blocks in ranked order, sorting each one on its own
        start = 0
        while start < len(base):
            sub_location = scenes[base[start]].sub_location_name
            end = start
            while end < len(base) and scenes[base[end]].sub_location_name == sub_location:
                end += 1
            block = base[start:end]
            result.extend(sorted(block, key=lambda position: location_type_class(scenes[position])))
            start = end
        return result


class CastOverlapStrategy:
    """
    Greedy cast-continuity ordering.

    If nobody is on set yet, the scene with the largest cast goes first. After
    that, the next scene is always the one sharing the most cast members with
    everyone already called for the day. Ties go to the scene that came first
    in the script.
    """

    name = "cast_overlap"

    def order(self, scenes: Sequence[Scene], day_cast: AbstractSet[str] = frozenset()) -> List[int]:
        remaining = list(range(len(scenes)))
        on_set = set(day_cast)
        result = []

        while remaining:
            if on_set:
                best = max(remaining, key=lambda position: (
                    len(scenes[position].cast & on_set),
                    -position,
                ))
            else:
                best = max(remaining, key=lambda position: (
                    len(scenes[position].cast),
                    -position,
                ))
            remaining.remove(best)
            result.append(best)
            on_set.update(scenes[best].cast)

        return result


STRATEGIES = {
    LocationTypeStrategy.name: LocationTypeStrategy,
    CastOverlapStrategy.name: CastOverlapStrategy,
}


def get_strategy(name: str):
    """Look up an intra-location ordering strategy by name"""
    try:
        return STRATEGIES[name]()
    except (KeyError, TypeError):
        allowed = ", ".join(STRATEGIES)
        raise ConfigurationError(f"Unknown packing strategy {name!r} (expected one of: {allowed})") from None


def time_of_day_rank(scene: Scene) -> int:
    try:
        return DAY_TIME_ORDER.index(scene.time_of_day)
    except ValueError:
        return len(DAY_TIME_ORDER)


def sort_by_time_of_day(scenes: Sequence[Scene]) -> List[Scene]:
    """Order a day's scenes MORNING -> EVENING -> NIGHT -> UNKNOWN -> other, stably"""
    return sorted(scenes, key=time_of_day_rank)
