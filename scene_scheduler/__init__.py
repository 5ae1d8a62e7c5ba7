"""Screenplay shooting-day scheduler."""

from .config import InclusionPolicy, SchedulerConfig, Settings, load_settings
from .exceptions import ConfigurationError, DocumentError, ExtractionError, SchedulerError
from .models import Day, Scene, scene_from_dict, scenes_from_records
from .packer import DayPacker, schedule_scenes
from .sorting import CastOverlapStrategy, LocationTypeStrategy, get_strategy, sort_by_time_of_day

__version__ = "1.0.0"
