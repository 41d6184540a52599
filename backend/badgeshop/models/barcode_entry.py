from sqlalchemy import Column, Integer, String, Text

from badgeshop.db import BarcodeBase


class BarcodeEntry(BarcodeBase):
    __tablename__ = "barcode_entries"
    id = Column(Integer, primary_key=True, autoincrement=True)
    barcode = Column(String(128), nullable=False, index=True)
    # ISO-8601 text as sent by the scanner page, so ordering is lexical
    timestamp = Column(String(64), nullable=False, index=True)
    photo = Column(Text, nullable=True)
    action = Column(String(32), nullable=False, default="Entrada")
