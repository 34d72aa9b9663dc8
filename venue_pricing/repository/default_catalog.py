"""Default venue catalog seeded into an empty database."""

from __future__ import annotations

from typing import Any


_STANDARD_EVENING = {"public": 500, "private": 650, "type": "flat"}


DEFAULT_ROOM_RULES: dict[str, dict[str, Any]] = {
    "main-hall": {
        "all": {
            "daytime": {
                "public": 50,
                "private": 65,
                "type": "hourly",
                "crossoverRate": 70,
            },
            "evening": _STANDARD_EVENING,
            "minimumHours": 3,
        },
        "saturday": {
            "fullDay": {"public": 1200, "private": 1500, "type": "flat"},
        },
    },
    "southern-cross": {
        "all": {
            "daytime": {"public": 40, "private": 55, "type": "hourly"},
            "evening": {"public": 45, "private": 60, "type": "hourly"},
            "minimumHours": 4,
        },
    },
    "living-room": {
        "all": {
            "daytime": {"public": 30, "private": 40, "type": "hourly", "crossoverRate": 35},
            "evening": {"public": 250, "private": 325, "type": "flat"},
        },
    },
    "zine-library": {
        "all": {
            "daytime": {"public": 20, "private": 25, "type": "hourly"},
            "evening": {"public": 25, "private": 30, "type": "hourly"},
            "minimumHours": 2,
        },
    },
    "parking-lot": {
        "all": {
            "fullDay": {"public": 60, "private": 80, "type": "hourly", "minimumHours": 4},
        },
    },
    "the-full-building": {
        "all": {
            "fullDay": {"public": 3000, "private": 3600, "type": "flat"},
        },
    },
}


DEFAULT_RESOURCES: list[dict[str, Any]] = [
    {
        "id": "food",
        "cost": 75,
        "type": "flat",
        "description": "Cleaning Fee",
        "subDescription": "Required when food is served",
    },
    {
        "id": "door_staff",
        "cost": 25,
        "type": "hourly",
        "description": "Door Staff",
        "subDescription": "Dedicated staff for entrance management",
    },
    {
        "id": "piano_tuning",
        "cost": 150,
        "type": "flat",
        "description": "Piano Tuning",
        "subDescription": "One-time tuning service",
    },
    {
        "id": "backline",
        "cost": 100,
        "type": "flat",
        "description": "Backline",
        "rooms": {
            "main_hall": {"cost": 150, "type": "flat", "description": "Backline (Main Hall)"},
            "living_room": {
                "cost": 75,
                "type": "flat",
                "description": "Backline (Living Room, projector included)",
                "includes_projector": True,
            },
            "southern_cross": {"cost": 120, "type": "flat", "description": "Backline (Southern Cross)"},
        },
    },
    {
        "id": "projector",
        "cost": 50,
        "type": "flat",
        "description": "Projector",
    },
    {
        "id": "audio_tech",
        "cost": 300,
        "type": "base",
        "description": "Audio Technician",
    },
    {
        "id": "audio_tech_overtime",
        "cost": 45,
        "type": "hourly",
        "description": "Audio Technician Overtime",
    },
    {
        "id": "bartender",
        "cost": 35,
        "type": "hourly",
        "description": "Bartender",
    },
    {
        "id": "livestream",
        "cost": "Will quote separately",
        "type": "custom",
        "description": "Livestream Setup",
    },
]
