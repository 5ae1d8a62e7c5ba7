"""
Screenplay Shooting-Day Scheduler - FastAPI service

Endpoints:
1. GET  /          service banner
2. GET  /health    health check for deployment
3. POST /extract   PDF screenplay -> extracted scene breakdown
4. POST /upload    PDF screenplay -> extracted scenes packed into shooting days
5. POST /schedule  already extracted scenes (JSON) -> shooting days

Scheduling groups scenes by location, fronts exterior day work, avoids moving
the crew late in the day and finishes each call sheet in time-of-day order.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
import logging
import traceback

import uvicorn
from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool

from scene_scheduler import __version__
from scene_scheduler.config import Settings, load_settings
from scene_scheduler.exceptions import ConfigurationError, DocumentError
from scene_scheduler.extractor import SceneExtractor
from scene_scheduler.pipeline import extract_document, schedule_document, schedule_records

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# FastAPI Application
app = FastAPI(
    title="Screenplay Shooting-Day Scheduler",
    description="Scene breakdown extraction and location-grouped shooting-day scheduling",
    version=__version__
)


class ScheduleResponse(BaseModel):
    """Pydantic model for every service response"""
    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    processing_time_seconds: Optional[float] = None


class ScheduleRequest(BaseModel):
    """Pydantic model for scheduling already extracted scenes"""
    scenes: List[Any]
    day_budget_hours: Optional[float] = None
    strategy: Optional[str] = None
    inclusion_policy: Optional[str] = None


def get_settings() -> Settings:
    return load_settings()


def get_extractor(settings: Settings = Depends(get_settings)) -> SceneExtractor:
    return SceneExtractor(api_key=settings.openai_api_key, model=settings.openai_model)


def _elapsed(start_time: datetime) -> float:
    return (datetime.now() - start_time).total_seconds()


def _error_response(status_code: int, message: str, start_time: datetime) -> JSONResponse:
    body = ScheduleResponse(success=False, error=message, processing_time_seconds=_elapsed(start_time))
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.get("/")
async def root():
    """Service banner"""
    return {
        "message": "Screenplay Shooting-Day Scheduler",
        "status": "active",
        "version": __version__,
        "description": "Location-grouped scene scheduling with pack-up guard"
    }


@app.get("/health")
async def health_check():
    """Detailed health check for deployment"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "service": "scene-scheduler",
        "version": __version__
    }


@app.post("/extract", response_model=ScheduleResponse)
async def extract_scenes(script: UploadFile = File(...),
                         settings: Settings = Depends(get_settings),
                         extractor: SceneExtractor = Depends(get_extractor)):
    """Extract the scene breakdown of an uploaded PDF without scheduling it"""
    start_time = datetime.now()
    data = await script.read()
    logger.info(f"Received extraction request: {script.filename} ({len(data)} bytes)")

    try:
        result = await run_in_threadpool(extract_document, data, extractor, settings.pages_per_chunk)
    except (ConfigurationError, DocumentError) as e:
        logger.error(f"Extraction request rejected: {e}")
        return _error_response(400, str(e), start_time)

    processing_time = _elapsed(start_time)
    logger.info(f"Extraction completed in {processing_time:.2f} seconds")
    return ScheduleResponse(success=True, data=result.to_dict(), processing_time_seconds=processing_time)


@app.post("/upload", response_model=ScheduleResponse)
async def upload_script(script: UploadFile = File(...),
                        day_budget_hours: Optional[float] = None,
                        strategy: Optional[str] = None,
                        inclusion_policy: Optional[str] = None,
                        settings: Settings = Depends(get_settings),
                        extractor: SceneExtractor = Depends(get_extractor)):
    """
    Main endpoint: extract every fragment of an uploaded PDF and schedule the scenes
    """
    start_time = datetime.now()
    data = await script.read()
    logger.info(f"Received scheduling request: {script.filename} ({len(data)} bytes)")

    try:
        config = settings.scheduler_config(day_budget_hours, strategy, inclusion_policy)
        result = await run_in_threadpool(
            schedule_document, data, extractor, config, settings.pages_per_chunk
        )
    except (ConfigurationError, DocumentError) as e:
        logger.error(f"Scheduling request rejected: {e}")
        return _error_response(400, str(e), start_time)

    processing_time = _elapsed(start_time)
    logger.info(f"Processing completed in {processing_time:.2f} seconds")
    return ScheduleResponse(success=True, data=result.to_dict(), processing_time_seconds=processing_time)


@app.post("/schedule", response_model=ScheduleResponse)
async def create_schedule(request: ScheduleRequest, settings: Settings = Depends(get_settings)):
    """Schedule scenes that were extracted earlier"""
    start_time = datetime.now()
    logger.info(f"Received scheduling request for {len(request.scenes)} scene records")

    try:
        config = settings.scheduler_config(
            request.day_budget_hours, request.strategy, request.inclusion_policy
        )
        result = await run_in_threadpool(schedule_records, request.scenes, config)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return _error_response(400, str(e), start_time)

    processing_time = _elapsed(start_time)
    logger.info(f"Processing completed in {processing_time:.2f} seconds")
    return ScheduleResponse(success=True, data=result.to_dict(), processing_time_seconds=processing_time)


@app.exception_handler(ConfigurationError)
async def configuration_exception_handler(request: Request, exc: ConfigurationError):
    """Configuration problems raised while resolving dependencies (e.g. missing API key)"""
    logger.error(f"Configuration error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Service misconfigured",
            "details": str(exc)
        }
    )


@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    """Handle Pydantic validation errors"""
    logger.error(f"Validation error: {exc}")
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": "Invalid request format",
            "details": exc.errors()
        }
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unexpected errors"""
    logger.error(f"Unhandled exception: {exc}")
    logger.error(f"Traceback: {traceback.format_exc()}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "details": str(exc)
        }
    )


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=load_settings().port)
