"""Shared FastAPI dependencies for authentication and authorization."""

from __future__ import annotations

import logging
from typing import Any, Callable, List

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from app.core.config import get_settings
from app.db.session import SessionLocal
from app.features.lecturers.repository import LecturerRepository
from app.features.roles.repository import RoleRepository
from app.features.students.repository import StudentRepository


logger = logging.getLogger("auth.deps")
security = HTTPBearer(auto_error=True)

STUDENT_KIND = "mahasiswa"
LECTURER_KIND = "dosen"


class CurrentUser(BaseModel):
    """Minimal identity shared across endpoints."""
    id: int
    kind: str
    nama: str
    roles: List[str] = []

    @property
    def is_student(self) -> bool:
        return self.kind == STUDENT_KIND

    def has_role(self, role: str) -> bool:
        return role.lower() in self.roles


def decode_token(token: str) -> dict[str, Any]:
    settings = get_settings()
    if not settings.jwt_secret:
        logger.error("auth.jwt_secret_missing")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Authentication is not configured")
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid authentication credentials") from exc


def get_current_claims(credentials: HTTPAuthorizationCredentials = Depends(security)) -> dict[str, Any]:
    return decode_token(credentials.credentials)


def get_current_user(request: Request, claims: dict[str, Any] = Depends(get_current_claims)) -> CurrentUser:
    """Resolve the token subject against the students or lecturers table.

    Lecturer roles always come from the role assignment ledger, never from
    the token, so a revoked role takes effect on the next request.
    """
    cached: CurrentUser | None = getattr(request.state, "current_user", None)
    if cached is not None:
        return cached

    kind = claims.get("kind")
    try:
        subject = int(claims.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token: missing subject")

    with SessionLocal() as db:
        if kind == STUDENT_KIND:
            student = StudentRepository.get(db, subject)
            if student is None or not student.is_active:
                raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown student")
            current = CurrentUser(id=student.id, kind=kind, nama=student.nama)
        elif kind == LECTURER_KIND:
            lecturer = LecturerRepository.get(db, subject)
            if lecturer is None or not lecturer.is_active:
                raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown lecturer")
            roles = [r.role.value for r in RoleRepository.roles_of(db, lecturer.id)]
            current = CurrentUser(id=lecturer.id, kind=kind, nama=lecturer.nama, roles=roles)
        else:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token: unknown user kind")

    request.state.current_user = current
    logger.info(
        "auth_resolved user_id=%s kind=%s roles=%s request_id=%s path=%s",
        current.id,
        current.kind,
        ",".join(current.roles),
        getattr(request.state, "request_id", None),
        request.url.path,
    )
    return current


def require_student() -> Callable:
    def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not user.is_student:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized as student")
        return user

    return dependency


def require_lecturer() -> Callable:
    def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.kind != LECTURER_KIND:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized as lecturer")
        return user

    return dependency


def require_role(*roles: str) -> Callable:
    """Factory returning dependency enforcing that the lecturer holds one of the roles.

    Args:
      roles: Allowed ledger roles (case-insensitive). Empty -> any lecturer.
    """
    normalized = {r.lower() for r in roles if r}

    def _checker(user: CurrentUser = Depends(require_lecturer())) -> CurrentUser:
        if not normalized or normalized.intersection(user.roles):
            return user
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")

    return _checker


def require_coordinator() -> Callable:
    return require_role("koordinator")


def require_kaprodi() -> Callable:
    return require_role("kaprodi")
