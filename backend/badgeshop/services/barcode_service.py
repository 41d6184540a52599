from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from badgeshop.models.barcode_entry import BarcodeEntry
from badgeshop.repositories.barcode_repo import BarcodeRepository
from badgeshop.utils.log import get_logger

log = get_logger("barcode")

DEFAULT_ACTION = "Entrada"


class BarcodeServiceException(Exception):
    pass


class BarcodeNotFound(BarcodeServiceException):
    pass


def entry_to_dict(e: BarcodeEntry) -> Dict:
    return {
        "id": e.id,
        "barcode": e.barcode,
        "timestamp": e.timestamp,
        "photo": e.photo,
        "action": e.action,
    }


class BarcodeService:
    """Append-only scan log for the employee punching clock."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BarcodeRepository(db)

    def list_entries(self) -> List[Dict]:
        return [entry_to_dict(e) for e in self.repo.list()]

    def record(self, barcode: str, timestamp: str, photo: Optional[str] = None, action: Optional[str] = None) -> BarcodeEntry:
        if not barcode or not timestamp:
            raise BarcodeServiceException("Barcode and timestamp are required")
        entry = self.repo.add(barcode, timestamp, photo, action or DEFAULT_ACTION)
        self.db.commit()
        log.info(f"Recorded {entry.action} for barcode {barcode} (id={entry.id})")
        return entry

    def get(self, entry_id: int) -> Dict:
        e = self.repo.get(entry_id)
        if not e:
            raise BarcodeNotFound("Entry not found")
        return entry_to_dict(e)

    def last_for(self, barcode: str) -> Dict:
        e = self.repo.last_for_barcode(barcode)
        if not e:
            raise BarcodeNotFound("No previous entries found for this barcode")
        return entry_to_dict(e)

    def delete(self, entry_id: int) -> int:
        n = self.repo.delete(entry_id)
        self.db.commit()
        return n

    def delete_all(self) -> int:
        n = self.repo.delete_all()
        self.db.commit()
        log.info(f"Deleted {n} barcode entries")
        return n
