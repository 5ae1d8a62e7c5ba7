"""
Day packer: greedy assignment of scenes to shooting days.

Each day is filled location by location, busiest location first:

1. Locations are re-ranked at the start of every pass because counts change
   as scenes are consumed.
2. Once a day has work in it, the crew does not move to a location it has not
   touched yet if the time left is at or below the pack-up threshold.
3. At a location the strategy decides the order; every scene that fits the
   remaining budget is taken. Under `InclusionPolicy.FORCE_LAST` the last
   pending scene of a location is taken even if it overshoots, so it is never
   stranded. If nothing fits an empty day, the first candidate is taken
   anyway, so a scene longer than the whole budget still gets a day.
4. Passes repeat while they add scenes; then the day is closed and its scenes
   are put in time-of-day order.

Every day takes at least one scene, so N scenes need at most N days. Cost is
roughly O(days x locations x scenes), which is fine for a screenplay but is not
linear.
"""

import logging
from typing import List, Optional, Sequence, Set

from .config import InclusionPolicy, SchedulerConfig
from .grouping import LocationGroup, group_by_location, rank_locations
from .models import FIT_TOLERANCE, Day, Scene
from .sorting import get_strategy, sort_by_time_of_day

logger = logging.getLogger(__name__)


class DayPacker:
    """Packs scenes into shooting days under a per-day time budget"""

    def __init__(self, config: Optional[SchedulerConfig] = None, strategy=None):
        self.config = (config or SchedulerConfig()).validate()
        self.strategy = strategy or get_strategy(self.config.strategy)
        self.budget = float(self.config.day_budget_hours)

    def pack(self, scenes: Sequence[Scene]) -> List[Day]:
        """Schedule all scenes; returns days numbered from 1"""
        scenes = list(scenes)
        groups = group_by_location(scenes)
        days: List[Day] = []

        logger.info(
            f"Packing {len(scenes)} scenes across {len(groups)} locations "
            f"(budget {self.budget}h, strategy {self.strategy.name}, "
            f"policy {self.config.inclusion_policy.value})"
        )

        while any(group.pending for group in groups.values()):
            day = Day(day_number=len(days) + 1)
            self._fill_day(day, scenes, groups)
            day.scenes = sort_by_time_of_day(day.scenes)
            days.append(day)

            # Drop fully consumed locations
            for name in [name for name, group in groups.items() if not group.pending]:
                del groups[name]

            logger.debug(
                f"Day {day.day_number}: {len(day.scenes)} scenes, {day.total_time:.2f}h, "
                f"locations {day.locations}"
            )

        logger.info(f"Packed {len(scenes)} scenes into {len(days)} shooting days")
        return days

    def _fill_day(self, day: Day, scenes: List[Scene], groups) -> None:
        touched: Set[str] = set()

        while True:
            added = 0
            for group in rank_locations(groups):
                if group.location_name not in touched and self._packed_up(day):
                    logger.debug(
                        f"Day {day.day_number}: {self.budget - day.total_time:.2f}h left, "
                        f"not moving to '{group.location_name}'"
                    )
                    continue
                count = self._drain_location(day, scenes, group)
                if count:
                    touched.add(group.location_name)
                added += count
            if not added:
                break

    def _packed_up(self, day: Day) -> bool:
        """Too little time left to justify relocating the crew"""
        if not day.scenes:
            return False
        return self.budget - day.total_time <= self.config.packup_threshold_hours

    def _drain_location(self, day: Day, scenes: List[Scene], group: LocationGroup) -> int:
        """Append every schedulable scene of one location to the day"""
        added = 0
        while group.pending:
            pending_scenes = [scenes[position] for position in group.pending]
            day_cast = set()
            for scene in day.scenes:
                day_cast.update(scene.cast)

            order = self.strategy.order(pending_scenes, day_cast)
            picked = self._first_fitting(day, pending_scenes, order)
            forced = False
            if picked is None and order:
                if not day.scenes:
                    # Nothing fits an empty day: the scene is longer than the budget
                    picked, forced = order[0], True
                elif self.config.inclusion_policy == InclusionPolicy.FORCE_LAST and len(group.pending) == 1:
                    picked, forced = order[0], True

            if picked is None:
                break

            scene = pending_scenes[picked]
            del group.pending[picked]
            day.scenes.append(scene)
            if forced:
                day.forced.append(scene)
                logger.info(
                    f"Day {day.day_number}: forced scene {scene.scene_number} "
                    f"({scene.estimated_time}h) at '{group.location_name}', day now {day.total_time:.2f}h"
                )
            added += 1
        return added

    def _first_fitting(self, day: Day, scenes: List[Scene], order: List[int]) -> Optional[int]:
        remaining = self.budget - day.total_time
        for index in order:
            if scenes[index].estimated_time <= remaining + FIT_TOLERANCE:
                return index
        return None


def schedule_scenes(scenes: Sequence[Scene], day_budget_hours: float = 12.0,
                    strategy: str = "location_type",
                    inclusion_policy: InclusionPolicy = InclusionPolicy.FORCE_LAST,
                    packup_threshold_hours: float = 4.0) -> List[Day]:
    """Convenience wrapper around DayPacker"""
    config = SchedulerConfig(
        day_budget_hours=day_budget_hours,
        packup_threshold_hours=packup_threshold_hours,
        strategy=strategy,
        inclusion_policy=inclusion_policy,
    )
    return DayPacker(config).pack(scenes)
