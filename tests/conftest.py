"""
Shared pytest fixtures for the scene scheduler tests.
"""

import fitz
import pytest

from scene_scheduler.models import Scene


def make_scene(number, location="DINER", hours=1.0, location_type="INT",
               time_of_day="DAY", sub_location="", characters=None):
    """Build a Scene directly, bypassing normalisation"""
    return Scene(
        scene_number=number,
        scene_heading=f"{location_type}. {location} - {time_of_day}",
        location_type=location_type,
        location_name=location,
        sub_location_name=sub_location,
        time_of_day=time_of_day,
        characters=tuple(characters or ()),
        estimated_time=hours,
    )


def make_pdf(page_count):
    """Return the bytes of a PDF with `page_count` numbered pages"""
    doc = fitz.open()
    for i in range(page_count):
        page = doc.new_page()
        page.insert_text((72, 72), f"Page {i + 1}")
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def diner_park_scenes():
    """Three DINER scenes and two PARK scenes."""
    return [
        make_scene(1, "DINER", 2.0, "EXT", "DAY"),
        make_scene(2, "DINER", 3.0, "INT", "NIGHT"),
        make_scene(3, "DINER", 1.0, "EXT", "DAY"),
        make_scene(4, "PARK", 4.0, "EXT", "DAY"),
        make_scene(5, "PARK", 4.0, "EXT", "DAY"),
    ]


@pytest.fixture
def raw_records():
    """Scene records as the extractor returns them."""
    return [
        {
            "scene_number": 1,
            "scene_heading": "EXT. DINER - DAY",
            "location_type": "EXT",
            "location_name": "DINER",
            "sub_location_name": "PARKING LOT",
            "time_of_day": "DAY",
            "characters": ["ANNA", "BEN"],
            "props": ["coffee cup"],
            "estimatedTime": 2,
            "scene_summary": "Anna waits for Ben.",
        },
        {
            "scene_number": "2",
            "scene_heading": "INT. DINER - NIGHT",
            "location_type": "INT.",
            "location_name": "DINER",
            "sub_location_name": "BOOTH",
            "time_of_day": "night",
            "characters": ["ANNA", "ANNA", "CARL"],
            "estimatedTime": "3.5",
        },
        {
            "scene_number": 3,
            "scene_heading": "EXT. PARK - DAY",
            "location_type": "EXT",
            "location_name": "PARK",
            "time_of_day": "DAY",
            "characters": ["BEN"],
            "estimatedTime": "about an hour",
        },
    ]


@pytest.fixture
def pdf_factory():
    """Return the make_pdf helper."""
    return make_pdf
