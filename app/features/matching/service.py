"""Mutual partner matching.

Each student writes their track and the npm of the partner they want. The
second student of a pair to reciprocate completes the handshake: a Group is
created and both rows point at it. Both rows are locked before the decision
so two reciprocal requests arriving together still produce one Group.
"""

from __future__ import annotations

import logging
from typing import Optional

from app.common.errors import ConflictError, InvalidInputError, NotFoundError, PreconditionFailedError
from app.db.session import transaction
from app.features.groups.repository import GroupRepository
from app.features.students.models import Student
from app.features.students.repository import StudentRepository
from app.features.students.tracks import Track, is_team_track, parse_track
from .schemas import MatchResult

logger = logging.getLogger(__name__)


def _normalize_npm(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _group_name(a: Student, b: Student) -> str:
    first, second = sorted((a, b), key=lambda s: s.id)
    return f"{first.nama} & {second.nama}"


class MatchingService:

    @staticmethod
    def select_track(student_id: int, track, desired_partner_npm: Optional[str] = None) -> MatchResult:
        track = parse_track(track)
        partner_npm = _normalize_npm(desired_partner_npm) if is_team_track(track) else None

        with transaction() as db:
            caller = StudentRepository.get(db, student_id)
            if caller is None or not caller.is_active:
                raise NotFoundError("Student", student_id)

            partner_id = None
            if partner_npm is not None:
                if partner_npm == caller.npm:
                    raise InvalidInputError("You cannot choose yourself as partner", {"field": "partner_npm"})
                partner = StudentRepository.get_by_npm(db, partner_npm)
                if partner is None or not partner.is_active:
                    raise NotFoundError("Student with npm", partner_npm)
                partner_id = partner.id

            locked = StudentRepository.lock_many(db, [caller.id] + ([partner_id] if partner_id else []))
            caller = locked[caller.id]
            partner = locked.get(partner_id) if partner_id else None

            if caller.group_id is not None:
                if caller.track == track:
                    group = GroupRepository.get(db, caller.group_id)
                    return MatchResult(
                        student_id=caller.id,
                        npm=caller.npm,
                        track=track,
                        matched=True,
                        kelompok_id=caller.group_id,
                        kelompok_nama=group.name if group else None,
                        message="You are already in a group for this track",
                    )
                raise PreconditionFailedError(
                    f"Track cannot be changed after joining a group (current track: {caller.track.value})",
                    {"field": "track", "current": caller.track.value},
                )

            caller.track = track
            caller.desired_partner_npm = partner_npm

            if not is_team_track(track):
                db.flush()
                logger.info("track.selected student_id=%s track=%s solo=true", caller.id, track.value)
                return MatchResult(
                    student_id=caller.id,
                    npm=caller.npm,
                    track=track,
                    matched=False,
                    solo=True,
                    message="Internship tracks are taken individually",
                )

            if partner is None:
                db.flush()
                logger.info("track.selected student_id=%s track=%s partner=none", caller.id, track.value)
                return MatchResult(
                    student_id=caller.id,
                    npm=caller.npm,
                    track=track,
                    matched=False,
                    message="Track saved, no partner chosen yet",
                )

            if partner.group_id is not None:
                raise ConflictError(
                    f"{partner.nama} ({partner.npm}) has already joined another group",
                    {"partner_npm": partner.npm},
                )

            if partner.track == track and partner.desired_partner_npm == caller.npm:
                group = GroupRepository.create(db, _group_name(caller, partner), track)
                for member in (caller, partner):
                    member.group_id = group.id
                    member.desired_partner_npm = None
                db.flush()
                logger.info(
                    "group.created group_id=%s track=%s members=%s,%s",
                    group.id, track.value, caller.id, partner.id,
                )
                return MatchResult(
                    student_id=caller.id,
                    npm=caller.npm,
                    track=track,
                    matched=True,
                    kelompok_id=group.id,
                    kelompok_nama=group.name,
                    message=f"Matched with {partner.nama}",
                )

            db.flush()
            logger.info(
                "track.selected student_id=%s track=%s partner=%s waiting=true",
                caller.id, track.value, partner.npm,
            )
            return MatchResult(
                student_id=caller.id,
                npm=caller.npm,
                track=track,
                matched=False,
                desired_partner_npm=partner_npm,
                message=f"Waiting for {partner.nama} to choose you as partner",
            )


__all__ = ["MatchingService", "Track"]
