from typing import Optional

from pydantic import BaseModel


class BarcodeEntryIn(BaseModel):
    barcode: Optional[str] = None
    timestamp: Optional[str] = None
    photo: Optional[str] = None
    action: Optional[str] = None
