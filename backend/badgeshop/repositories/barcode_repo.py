from typing import List, Optional

from sqlalchemy.orm import Session

from badgeshop.models.barcode_entry import BarcodeEntry


class BarcodeRepository:
    def __init__(self, db: Session):
        self.db = db

    def list(self) -> List[BarcodeEntry]:
        return (
            self.db.query(BarcodeEntry)
            .order_by(BarcodeEntry.timestamp.desc(), BarcodeEntry.id.desc())
            .all()
        )

    def get(self, entry_id: int) -> Optional[BarcodeEntry]:
        return self.db.get(BarcodeEntry, entry_id)

    def last_for_barcode(self, barcode: str) -> Optional[BarcodeEntry]:
        return (
            self.db.query(BarcodeEntry)
            .filter(BarcodeEntry.barcode == barcode)
            .order_by(BarcodeEntry.timestamp.desc(), BarcodeEntry.id.desc())
            .first()
        )

    def add(self, barcode: str, timestamp: str, photo: Optional[str], action: str) -> BarcodeEntry:
        entry = BarcodeEntry(barcode=barcode, timestamp=timestamp, photo=photo, action=action)
        self.db.add(entry)
        self.db.flush()
        return entry

    def delete(self, entry_id: int) -> int:
        return self.db.query(BarcodeEntry).filter(BarcodeEntry.id == entry_id).delete()

    def delete_all(self) -> int:
        return self.db.query(BarcodeEntry).delete()
