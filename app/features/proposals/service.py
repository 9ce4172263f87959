"""Proposal lifecycle.

A submission is written to every member of the submitter's group in one
transaction. The decision (approve / reject) is recorded on the targeted
student only; coordinators decide per student.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from app.common.errors import InvalidInputError, NotFoundError, PreconditionFailedError
from app.db.session import transaction
from app.features.groups.broadcast import broadcast_update, lock_members
from app.features.lecturers.repository import LecturerRepository
from app.features.students.models import ProposalStatus, Student
from app.features.students.repository import StudentRepository
from .schemas import ProposalResponse, ProposalSubmitResult

logger = logging.getLogger(__name__)

_DECISIONS = (ProposalStatus.approved, ProposalStatus.rejected)


def _require_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise InvalidInputError(f"{field} is required", {"field": field})
    return value.strip()


def _parse_decision(status) -> ProposalStatus:
    try:
        parsed = ProposalStatus(status)
    except ValueError:
        parsed = None
    if parsed not in _DECISIONS:
        raise InvalidInputError("status must be one of: approved, rejected", {"field": "status", "value": status})
    return parsed


class ProposalService:

    @staticmethod
    def submit_proposal(
        student_id: int,
        title: str,
        file_ref: str,
        proposed_supervisor_id: Optional[int] = None,
    ) -> ProposalSubmitResult:
        title = _require_text(title, "title")
        file_ref = _require_text(file_ref, "file_ref")

        with transaction() as db:
            student = StudentRepository.get(db, student_id)
            if student is None:
                raise NotFoundError("Student", student_id)
            members = lock_members(db, student)
            if student.track is None:
                raise PreconditionFailedError("Choose a track before submitting a proposal", {"field": "track"})
            if proposed_supervisor_id is not None and LecturerRepository.get(db, proposed_supervisor_id) is None:
                raise NotFoundError("Lecturer", proposed_supervisor_id)

            member_ids = [m.id for m in members]
            if student.proposal_status in (ProposalStatus.pending, ProposalStatus.approved):
                raise PreconditionFailedError(
                    f"Proposal is already {student.proposal_status.value}",
                    {"student_id": student.id, "proposal_status": student.proposal_status.value},
                )

            broadcast_update(
                db,
                Student,
                Student.id,
                member_ids,
                {
                    "proposal_title": title,
                    "proposal_file_ref": file_ref,
                    "proposed_supervisor_id": proposed_supervisor_id,
                    "proposal_status": ProposalStatus.pending,
                },
            )
            db.refresh(student)
            logger.info("proposal.submitted student_id=%s members=%s", student.id, member_ids)
            return ProposalSubmitResult(proposal=ProposalResponse.from_student(student), member_ids=member_ids)

    @staticmethod
    def set_proposal_status(student_id: int, status) -> ProposalResponse:
        decision = _parse_decision(status)
        with transaction() as db:
            student = StudentRepository.get(db, student_id, lock=True)
            if student is None:
                raise NotFoundError("Student", student_id)
            if student.proposal_status == ProposalStatus.none:
                raise PreconditionFailedError(
                    f"{student.nama} has not submitted a proposal",
                    {"student_id": student.id},
                )
            student.proposal_status = decision
            db.flush()
            logger.info("proposal.%s student_id=%s", decision.value, student.id)
            return ProposalResponse.from_student(student)

    @staticmethod
    def assign_supervisors(
        student_id: int,
        supervisor_id: int,
        secondary_supervisor_id: Optional[int] = None,
    ) -> ProposalResponse:
        if secondary_supervisor_id is not None and secondary_supervisor_id == supervisor_id:
            raise InvalidInputError(
                "Primary and secondary supervisor must be different lecturers",
                {"field": "secondary_supervisor_id"},
            )
        with transaction() as db:
            student = StudentRepository.get(db, student_id, lock=True)
            if student is None:
                raise NotFoundError("Student", student_id)
            for lecturer_id in (supervisor_id, secondary_supervisor_id):
                if lecturer_id is not None and LecturerRepository.get(db, lecturer_id) is None:
                    raise NotFoundError("Lecturer", lecturer_id)
            student.supervisor_id = supervisor_id
            student.secondary_supervisor_id = secondary_supervisor_id
            db.flush()
            logger.info(
                "supervisor.assigned student_id=%s supervisor_id=%s secondary_id=%s",
                student.id, supervisor_id, secondary_supervisor_id,
            )
            return ProposalResponse.from_student(student)

    @staticmethod
    def get_proposal(student_id: int) -> ProposalResponse:
        with transaction() as db:
            student = StudentRepository.get(db, student_id)
            if student is None:
                raise NotFoundError("Student", student_id)
            return ProposalResponse.from_student(student)

    @staticmethod
    def pending_proposals() -> List[ProposalResponse]:
        """The coordinator's queue: every proposal still waiting for a decision."""
        with transaction() as db:
            return [ProposalResponse.from_student(s) for s in StudentRepository.pending_proposals(db)]
