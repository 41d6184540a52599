from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from badgeshop.db import get_barcode_db
from badgeshop.schemas.barcode_schema import BarcodeEntryIn
from badgeshop.services.barcode_service import BarcodeNotFound, BarcodeService, BarcodeServiceException

router = APIRouter(prefix="/barcode-entries", tags=["barcode"])


def _entry_id(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid entry ID")


@router.get("", summary="All punches, newest first")
def list_entries(db: Session = Depends(get_barcode_db)):
    return BarcodeService(db).list_entries()


@router.post("", summary="Record a punch")
def record_entry(payload: BarcodeEntryIn, db: Session = Depends(get_barcode_db)):
    svc = BarcodeService(db)
    try:
        entry = svc.record(payload.barcode, payload.timestamp, payload.photo, payload.action)
    except BarcodeServiceException as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "id": entry.id, "message": "Entry recorded successfully"}


@router.delete("", summary="Delete every punch")
def delete_all_entries(db: Session = Depends(get_barcode_db)):
    BarcodeService(db).delete_all()
    return {"success": True, "message": "All entries deleted successfully"}


# declared before /{entry_id} so "last" is never parsed as an id
@router.get("/last/{barcode}", summary="Latest punch for a badge")
def last_entry(barcode: str, db: Session = Depends(get_barcode_db)):
    try:
        return {"entry": BarcodeService(db).last_for(barcode)}
    except BarcodeNotFound as e:
        raise HTTPException(status_code=404, detail={"error": str(e), "message": str(e)})


@router.get("/{entry_id}", summary="One punch")
def get_entry(entry_id: str, db: Session = Depends(get_barcode_db)):
    try:
        return BarcodeService(db).get(_entry_id(entry_id))
    except BarcodeNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{entry_id}", summary="Delete one punch")
def delete_entry(entry_id: str, db: Session = Depends(get_barcode_db)):
    eid = _entry_id(entry_id)
    BarcodeService(db).delete(eid)
    return {"success": True, "message": f"Entry {eid} deleted successfully"}
