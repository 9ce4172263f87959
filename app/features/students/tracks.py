"""Project tracks and the semesters they belong to.

Five fixed tracks. ``proyek*`` tracks are done in pairs, ``internship*``
tracks are done alone and never produce a group.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from app.common.errors import InvalidInputError


class Track(str, Enum):
    proyek1 = "proyek1"
    proyek2 = "proyek2"
    proyek3 = "proyek3"
    internship1 = "internship1"
    internship2 = "internship2"


TRACK_SEMESTER = {
    Track.proyek1: 2,
    Track.proyek2: 3,
    Track.proyek3: 5,
    Track.internship1: 7,
    Track.internship2: 8,
}

VALID_SEMESTERS = tuple(sorted(TRACK_SEMESTER.values()))

SEMESTER_LABELS = {
    2: "Proyek 1 (Semester 2)",
    3: "Proyek 2 (Semester 3)",
    5: "Proyek 3 (Semester 5)",
    7: "Internship 1 (Semester 7)",
    8: "Internship 2 (Semester 8)",
}


def parse_track(value: str | Track) -> Track:
    try:
        return Track(value)
    except ValueError:
        allowed = ", ".join(t.value for t in Track)
        raise InvalidInputError(f"track must be one of: {allowed}", {"field": "track", "value": value})


def is_team_track(track: Optional[Track | str]) -> bool:
    return bool(track) and Track(track).value.startswith("proyek")


def semester_for(track: Track | str) -> int:
    return TRACK_SEMESTER[Track(track)]


def tracks_for_semester(semester: int) -> List[Track]:
    return [t for t, sem in TRACK_SEMESTER.items() if sem == semester]


def validate_semester(semester: int) -> int:
    if semester not in VALID_SEMESTERS:
        raise InvalidInputError(
            f"semester must be one of {', '.join(str(s) for s in VALID_SEMESTERS)}",
            {"field": "semester", "value": semester},
        )
    return semester


__all__ = [
    "Track",
    "TRACK_SEMESTER",
    "VALID_SEMESTERS",
    "SEMESTER_LABELS",
    "parse_track",
    "is_team_track",
    "semester_for",
    "tracks_for_semester",
    "validate_semester",
]
