"""Shared fixtures: a small program document in the import JSON format."""

import copy
import json

import pytest

SAMPLE_PROGRAM = {
    "program_name": "Core & Push Foundations",
    "duration_weeks": 4,
    "goal_priority": ["core_stability", "push_strength"],
    "session_structure": {"main_minutes": 30},
    "exercise_library": {
        "plank": {
            "type": "hold_seconds",
            "rest_s": 60,
            "time_limit_s": 120,
            "description": "Forearm plank, neutral spine.",
        },
        "push_up": {"type": "reps", "rest_s": 90},
        "lunge": {"type": "reps_each_side", "rest_s": 45},
    },
    "weekly_targets": [
        {
            "week": 1,
            "day_prescription": {
                "monday": [
                    {"name": "plank", "sets": 3, "hold_seconds": 30},
                    {"name": "push_up", "sets": 3, "reps": 8},
                ],
                "thursday": [
                    {"name": "lunge", "sets": 2, "reps_each_side": 10},
                ],
            },
        },
        {"week": 2, "delta_from_previous_week": {"plank_hold_seconds": "+10", "push_up_reps": "+2"}},
        {"week": 4, "delta_from_previous_week": {"lunge_reps_each_side": "+2"}},
    ],
}


@pytest.fixture
def program_dict():
    """A fresh, mutable copy of the sample program document."""
    return copy.deepcopy(SAMPLE_PROGRAM)


@pytest.fixture
def program_json(program_dict):
    """The sample program serialized as JSON text."""
    return json.dumps(program_dict)
