from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from loudstock.app.api.deps import get_db, get_carrier

router = APIRouter(prefix="/health")


@router.get("")
def health(db: Session = Depends(get_db), carrier=Depends(get_carrier)):
    db.execute(text("SELECT 1"))
    return {"ok": True, "carrier_configured": carrier.is_configured()}
