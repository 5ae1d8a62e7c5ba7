"""Scene breakdown extraction with the OpenAI Responses API."""

import json
import logging
import re
from typing import Any, List, Optional

from openai import OpenAI, OpenAIError

from .config import DEFAULT_OPENAI_MODEL
from .exceptions import ConfigurationError, ExtractionError

logger = logging.getLogger(__name__)

BREAKDOWN_PROMPT = """You are a professional script breakdown specialist and assistant director.

Extract the scenes of the attached screenplay exactly as they appear.

Rules:
1. Do not add, invent or guess any information.
2. Only extract what is explicitly written in the script.
3. A scene starts only at a proper slugline: INT., EXT., INT./EXT. or I/E.
4. Never create scenes, characters, props, locations or details that are not in the script.
5. If a field has no data in the script, return an empty array or empty string.

Return a single JSON object with a "scenes" array. Every item must follow this schema:

{
  "scene_number": number,
  "scene_heading": "string",
  "location_type": "INT | EXT | INT/EXT | I/E | UNKNOWN",
  "location_name": "string or empty",
  "sub_location_name": "string or empty",
  "time_of_day": "DAY | NIGHT | UNKNOWN",
  "characters": ["character names"],
  "props": ["props"],
  "wardrobe": ["wardrobe details"],
  "set_dressing": ["set dressing elements"],
  "vehicles": ["vehicles"],
  "vfx": ["visual effects"],
  "sfx": ["special effects"],
  "stunts": ["stunts"],
  "extras": ["extras"],
  "lines_count": number,
  "page_estimate": number,
  "scene_summary": "1-2 sentence factual summary using only what the scene states",
  "estimatedTime": number
}

estimatedTime is the estimated shooting time in hours, based on the length,
number of characters, props, stunts and overall complexity of the scene.
"""

_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)


def parse_scene_payload(text: Optional[str]) -> List[Any]:
    """
    Parse the model output into a list of raw scene records.

    Markdown code fences are stripped first. Both {"scenes": [...]} and a bare
    array are accepted; anything else yields an empty list.
    """
    if not text:
        logger.warning("Extractor returned no text")
        return []

    cleaned = _FENCE_RE.sub("", text).strip()
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning(f"Could not parse extractor output as JSON: {e}")
        return []

    if isinstance(payload, dict):
        payload = payload.get("scenes", [])
    if not isinstance(payload, list):
        logger.warning(f"Extractor output has no scene list (got {type(payload).__name__})")
        return []
    return payload


class SceneExtractor:
    """Sends screenplay fragments to OpenAI and returns raw scene records"""

    def __init__(self, api_key: Optional[str] = None, model: str = DEFAULT_OPENAI_MODEL,
                 client: Optional[OpenAI] = None):
        self.model = model
        if client is not None:
            self.client = client
            return
        if not api_key:
            raise ConfigurationError("OPENAI_API_KEY is not set")
        try:
            self.client = OpenAI(api_key=api_key)
        except OpenAIError as e:
            raise ConfigurationError(f"Could not create OpenAI client: {e}") from e

    def extract(self, fragment: bytes, filename: str = "script.pdf") -> List[Any]:
        """
        Extract raw scene records from one PDF fragment.

        Raises:
            ExtractionError: If the upload or the model call fails
        """
        logger.info(f"Uploading {filename} ({len(fragment)} bytes) to OpenAI")
        try:
            uploaded = self.client.files.create(
                file=(filename, fragment, "application/pdf"),
                purpose="user_data",
            )
        except OpenAIError as e:
            raise ExtractionError(f"Upload of {filename} failed: {e}") from e

        try:
            response = self.client.responses.create(
                model=self.model,
                input=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "input_text", "text": BREAKDOWN_PROMPT},
                            {"type": "input_file", "file_id": uploaded.id},
                        ],
                    }
                ],
            )
            text = response.output_text
        except OpenAIError as e:
            raise ExtractionError(f"Scene extraction for {filename} failed: {e}") from e
        finally:
            self._delete_file(uploaded.id)

        records = parse_scene_payload(text)
        logger.info(f"Extracted {len(records)} scene records from {filename}")
        return records

    def _delete_file(self, file_id: str) -> None:
        try:
            self.client.files.delete(file_id)
            logger.debug(f"Deleted uploaded file {file_id}")
        except OpenAIError as e:
            logger.warning(f"Failed to delete uploaded file {file_id}: {e}")

