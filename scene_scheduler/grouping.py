"""Location grouping and ranking"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .models import Scene

logger = logging.getLogger(__name__)


@dataclass
class LocationGroup:
    """Data structure for the unscheduled scenes of one location"""
    location_name: str
    first_seen: int
    pending: List[int] = field(default_factory=list)

    @property
    def scene_count(self) -> int:
        return len(self.pending)


def group_by_location(scenes: Sequence[Scene]) -> Dict[str, LocationGroup]:
    """
    Group scene positions by location name.

    The returned dict keeps first-seen order of locations. Groups hold
    positions into `scenes`, so duplicated scene records stay distinct.
    """
    groups: Dict[str, LocationGroup] = {}
    for position, scene in enumerate(scenes):
        group = groups.get(scene.location_name)
        if group is None:
            group = LocationGroup(location_name=scene.location_name, first_seen=position)
            groups[scene.location_name] = group
        group.pending.append(position)

    logger.debug(f"Grouped {len(scenes)} scenes into {len(groups)} locations")
    return groups


def rank_locations(groups: Dict[str, LocationGroup]) -> List[LocationGroup]:
    """Non-empty groups ordered by descending pending count, ties in first-seen order"""
    ranked = sorted(
        (group for group in groups.values() if group.pending),
        key=lambda group: (-group.scene_count, group.first_seen),
    )
    return ranked
