from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hrms.core.logging import get_logger
from hrms.db.session import get_session

router = APIRouter(prefix="/health", tags=["health"])
logger = get_logger(__name__)


@router.get("", summary="Liveness probe")
def healthcheck(db: Session = Depends(get_session)) -> dict[str, str]:
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("health_database_unreachable", error=str(exc))
        return {"status": "degraded", "database": "unreachable"}
    return {"status": "ok", "database": "ok"}
