from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.common.deps import require_role
from app.db.session import get_db
from .schemas import OverviewOut
from .service import overview_service

router = APIRouter(prefix="/stats", tags=["Stats"])


@router.get("/overview", response_model=OverviewOut, dependencies=[Depends(require_role("koordinator", "kaprodi"))])
def stats_overview(db: Session = Depends(get_db)):
    return overview_service(db)
