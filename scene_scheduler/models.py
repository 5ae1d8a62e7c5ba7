"""
Scene and shooting-day records.

Scenes arrive as loosely structured dictionaries from the breakdown extractor.
Every field is normalised here so that the scheduler never has to deal with
missing keys, stringly-typed numbers or unexpected enum values.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

LOCATION_TYPES = ("INT", "EXT", "INT/EXT", "I/E", "UNKNOWN")
TIMES_OF_DAY = ("DAY", "NIGHT", "MORNING", "EVENING", "UNKNOWN")

DESCRIPTIVE_FIELDS = (
    "props", "wardrobe", "set_dressing", "vehicles",
    "vfx", "sfx", "stunts", "extras",
)

DEFAULT_ESTIMATED_HOURS = 0.0

# Absorbs float noise such as 0.1 + 0.2 > 0.3
FIT_TOLERANCE = 1e-9


@dataclass(frozen=True)
class Scene:
    """Data structure for a single extracted screenplay scene"""
    scene_number: Optional[int]
    scene_heading: str = ""
    location_type: str = "UNKNOWN"
    location_name: str = ""
    sub_location_name: str = ""
    time_of_day: str = "UNKNOWN"
    characters: Tuple[str, ...] = ()
    props: Tuple[str, ...] = ()
    wardrobe: Tuple[str, ...] = ()
    set_dressing: Tuple[str, ...] = ()
    vehicles: Tuple[str, ...] = ()
    vfx: Tuple[str, ...] = ()
    sfx: Tuple[str, ...] = ()
    stunts: Tuple[str, ...] = ()
    extras: Tuple[str, ...] = ()
    estimated_time: float = DEFAULT_ESTIMATED_HOURS
    scene_summary: str = ""
    lines_count: Optional[int] = None
    page_estimate: Optional[float] = None

    @property
    def cast(self) -> FrozenSet[str]:
        return frozenset(self.characters)

    def to_dict(self) -> Dict[str, Any]:
        """Render the scene in the extractor's wire format"""
        data = {
            "scene_number": self.scene_number,
            "scene_heading": self.scene_heading,
            "location_type": self.location_type,
            "location_name": self.location_name,
            "sub_location_name": self.sub_location_name,
            "time_of_day": self.time_of_day,
            "characters": list(self.characters),
        }
        for name in DESCRIPTIVE_FIELDS:
            data[name] = list(getattr(self, name))
        data["lines_count"] = self.lines_count
        data["page_estimate"] = self.page_estimate
        data["scene_summary"] = self.scene_summary
        data["estimatedTime"] = self.estimated_time
        return data


@dataclass
class Day:
    """Data structure for a single shooting day"""
    day_number: int
    scenes: List[Scene] = field(default_factory=list)
    forced: List[Scene] = field(default_factory=list)

    @property
    def total_time(self) -> float:
        return sum(scene.estimated_time for scene in self.scenes)

    @property
    def locations(self) -> List[str]:
        seen = []
        for scene in self.scenes:
            if scene.location_name not in seen:
                seen.append(scene.location_name)
        return seen

    @property
    def cast_required(self) -> List[str]:
        cast = set()
        for scene in self.scenes:
            cast.update(scene.characters)
        return sorted(cast)

    def is_overshoot(self, day_budget_hours: float) -> bool:
        """True when the day runs past the budget (only forced scenes can cause this)"""
        return self.total_time > day_budget_hours + FIT_TOLERANCE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "day_number": self.day_number,
            "total_time": round(self.total_time, 2),
            "locations": self.locations,
            "cast_required": self.cast_required,
            "forced_scene_numbers": [scene.scene_number for scene in self.forced],
            "scenes": [scene.to_dict() for scene in self.scenes],
        }


def _clean_text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    return ""


def _clean_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def _unique(items: Iterable[str]) -> List[str]:
    result = []
    for item in items:
        if item not in result:
            result.append(item)
    return result


def _parse_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or not number.is_integer():
        return None
    return int(number)


def _parse_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def normalize_location_type(value: Any) -> str:
    """Map a raw slugline prefix onto the known location types ('INT.' -> 'INT')"""
    if not isinstance(value, str):
        return "UNKNOWN"
    parts = [part.strip().rstrip(".").strip() for part in value.upper().split("/")]
    normalized = "/".join(parts)
    if normalized in LOCATION_TYPES:
        return normalized
    return "UNKNOWN"


def normalize_time_of_day(value: Any) -> str:
    if not isinstance(value, str):
        return "UNKNOWN"
    normalized = value.strip().upper()
    if normalized in TIMES_OF_DAY:
        return normalized
    return "UNKNOWN"


def parse_estimated_time(value: Any, scene_label: str = "?") -> float:
    """Parse the estimated shooting hours, falling back to the default for bad values"""
    hours = _parse_float(value)
    if hours is None or hours < 0:
        logger.warning(
            f"Scene {scene_label} has invalid estimatedTime {value!r} - "
            f"defaulting to {DEFAULT_ESTIMATED_HOURS}"
        )
        return DEFAULT_ESTIMATED_HOURS
    return hours


def scene_from_dict(data: Dict[str, Any]) -> Scene:
    """Create a Scene from one extractor record, normalising every field"""
    scene_number = _parse_int(data.get("scene_number"))
    if scene_number is None:
        logger.warning(f"Scene record has unusable scene_number {data.get('scene_number')!r}")

    location_type = normalize_location_type(data.get("location_type"))
    time_of_day = normalize_time_of_day(data.get("time_of_day"))
    if data.get("time_of_day") not in (None, time_of_day):
        logger.debug(f"Scene {scene_number}: time_of_day {data.get('time_of_day')!r} -> {time_of_day}")

    descriptive = {name: tuple(_clean_list(data.get(name))) for name in DESCRIPTIVE_FIELDS}

    return Scene(
        scene_number=scene_number,
        scene_heading=_clean_text(data.get("scene_heading")),
        location_type=location_type,
        location_name=_clean_text(data.get("location_name")),
        sub_location_name=_clean_text(data.get("sub_location_name")),
        time_of_day=time_of_day,
        characters=tuple(_unique(_clean_list(data.get("characters")))),
        estimated_time=parse_estimated_time(data.get("estimatedTime"), str(scene_number)),
        scene_summary=_clean_text(data.get("scene_summary")),
        lines_count=_parse_int(data.get("lines_count")),
        page_estimate=_parse_float(data.get("page_estimate")),
        **descriptive,
    )


def scenes_from_records(records: Iterable[Any]) -> Tuple[List[Scene], int]:
    """
    Normalise a list of raw scene records.

    Records that are not JSON objects cannot be interpreted at all; they are
    logged and counted instead of being scheduled.

    Returns:
        (scenes, rejected_count)
    """
    scenes = []
    rejected = 0
    for i, record in enumerate(records):
        if not isinstance(record, dict):
            rejected += 1
            logger.warning(f"Rejected scene record {i + 1}: expected an object, got {type(record).__name__}")
            continue
        scenes.append(scene_from_dict(record))
    return scenes, rejected
