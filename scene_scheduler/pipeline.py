"""
Document-level orchestration: split -> extract -> normalise -> pack.

Fragments are extracted in page order and their scene lists concatenated.
Scene numbers are not de-duplicated across fragments; the scheduler tracks
scenes by position so repeated numbers are harmless.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .config import DEFAULT_PAGES_PER_CHUNK, SchedulerConfig
from .exceptions import ExtractionError
from .extractor import SceneExtractor
from .models import Day, Scene, scenes_from_records
from .packer import DayPacker
from .splitter import split_pdf

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """Data structure for the scenes extracted from one document"""
    scenes: List[Scene] = field(default_factory=list)
    fragments: int = 0
    failed_fragments: int = 0
    rejected_records: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fragments": self.fragments,
            "failed_fragments": self.failed_fragments,
            "rejected_records": self.rejected_records,
            "scene_count": len(self.scenes),
            "scenes": [scene.to_dict() for scene in self.scenes],
        }


@dataclass
class ScheduleResult:
    """Data structure for a finished schedule"""
    days: List[Day]
    config: SchedulerConfig
    extraction: Optional[ExtractionResult] = None
    rejected_records: int = 0

    def statistics(self) -> Dict[str, Any]:
        """Generate schedule statistics"""
        total_scenes = sum(len(day.scenes) for day in self.days)
        total_hours = sum(day.total_time for day in self.days)
        locations = {scene.location_name for day in self.days for scene in day.scenes}
        budget = self.config.day_budget_hours

        return {
            "total_shooting_days": len(self.days),
            "total_scenes_scheduled": total_scenes,
            "total_shooting_hours": round(total_hours, 2),
            "average_hours_per_day": round(total_hours / len(self.days) if self.days else 0, 2),
            "locations_scheduled": len(locations),
            "overshoot_days": sum(1 for day in self.days if day.is_overshoot(budget)),
            "rejected_records": self.rejected_records,
        }

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "config": {
                "day_budget_hours": self.config.day_budget_hours,
                "packup_threshold_hours": self.config.packup_threshold_hours,
                "strategy": self.config.strategy,
                "inclusion_policy": self.config.inclusion_policy.value,
            },
            "schedule": [day.to_dict() for day in self.days],
            "statistics": self.statistics(),
        }
        if self.extraction is not None:
            data["extraction"] = {
                "fragments": self.extraction.fragments,
                "failed_fragments": self.extraction.failed_fragments,
            }
        return data


def extract_document(data: bytes, extractor: SceneExtractor,
                     pages_per_chunk: int = DEFAULT_PAGES_PER_CHUNK) -> ExtractionResult:
    """Split a PDF and run the extractor over every fragment"""
    fragments = split_pdf(data, pages_per_chunk)
    result = ExtractionResult(fragments=len(fragments))
    records: List[Any] = []

    for i, fragment in enumerate(fragments, start=1):
        filename = f"chunk_{i}.pdf"
        logger.info(f"Now processing fragment {i}/{len(fragments)}")
        try:
            records.extend(extractor.extract(fragment, filename=filename))
        except ExtractionError as e:
            # One bad fragment only costs its own scenes
            result.failed_fragments += 1
            logger.error(f"Fragment {filename} skipped: {e}")

    result.scenes, result.rejected_records = scenes_from_records(records)
    logger.info(
        f"Extraction finished: {len(result.scenes)} scenes from {result.fragments} fragments "
        f"({result.failed_fragments} failed, {result.rejected_records} records rejected)"
    )
    return result


def schedule_records(records: Sequence[Any], config: SchedulerConfig) -> ScheduleResult:
    """Normalise raw scene records and pack them into days"""
    packer = DayPacker(config)
    scenes, rejected = scenes_from_records(records)
    days = packer.pack(scenes)
    return ScheduleResult(days=days, config=packer.config, rejected_records=rejected)


def schedule_document(data: bytes, extractor: SceneExtractor, config: SchedulerConfig,
                      pages_per_chunk: int = DEFAULT_PAGES_PER_CHUNK) -> ScheduleResult:
    """Extract every fragment of a PDF, then schedule the combined scene list"""
    # Validate before spending API calls on extraction
    packer = DayPacker(config)
    extraction = extract_document(data, extractor, pages_per_chunk)
    days = packer.pack(extraction.scenes)
    return ScheduleResult(
        days=days,
        config=packer.config,
        extraction=extraction,
        rejected_records=extraction.rejected_records,
    )
