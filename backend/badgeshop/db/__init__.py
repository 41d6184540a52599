from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from badgeshop.config import settings
from badgeshop.utils.log import get_logger

log = get_logger("db")


def _connect_args(url: str) -> dict:
    # TestClient and the scheduler hit SQLite from other threads
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


DATABASE_URL = settings.DATABASE_URL
engine = create_engine(
    DATABASE_URL, future=True, echo=False, pool_pre_ping=True, connect_args=_connect_args(DATABASE_URL)
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

# The time-clock log lives in its own SQLite file with its own metadata.
BARCODE_DATABASE_URL = settings.BARCODE_DATABASE_URL
barcode_engine = create_engine(
    BARCODE_DATABASE_URL, future=True, echo=False, connect_args=_connect_args(BARCODE_DATABASE_URL)
)
BarcodeSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=barcode_engine)
BarcodeBase = declarative_base()

CATALOGUE_SEED = [
    {
        "id": "1",
        "name": "Standard ID Badge",
        "description": "Professional ID badge with customizable color and text options. "
        "Perfect for office environments and corporate settings.",
        "price": "12.99",
        "image": "/images/id-badge.jpg",
        "colors": ["Blue", "Black", "Red", "Green", "White", "Clear"],
        "sizes": ["Standard", "Large"],
        "rating": 4.5,
        "badge_type": "ID Badge",
    },
    {
        "id": "2",
        "name": "Access Card Holder",
        "description": "Durable access card holder compatible with RFID and proximity cards. "
        "Protects cards from damage while maintaining full functionality.",
        "price": "8.99",
        "image": "/images/access-cards.jpg",
        "colors": ["Clear", "Black", "Blue", "Red"],
        "sizes": [],
        "rating": 4.7,
        "badge_type": "Card Holder",
    },
    {
        "id": "3",
        "name": "Badge Reel",
        "description": "Retractable badge reel with strong clip and durable cord. Easy to use and built to last.",
        "price": "6.99",
        "image": "/images/badge-reel.jpg",
        "colors": ["Black", "White", "Blue", "Silver"],
        "sizes": [],
        "rating": 4.3,
        "badge_type": "Accessory",
    },
]


def init_db(reset: bool = None):
    """
    Initialize both schemas and make sure the catalogue is seeded.

    Behavior:
      - If `reset` is True (or RESET_DB is set when reset is None), drop & recreate tables.
      - Otherwise leave existing tables in place.

    Model modules are imported here so the metadata is populated.
    """
    if reset is None:
        reset = settings.RESET_DB

    # registers the mapped classes on Base / BarcodeBase
    from badgeshop.models import barcode_entry, chat_session, order, product, user  # noqa: F401

    if reset:
        log.info("Resetting database (RESET_DB set)...")
        Base.metadata.drop_all(bind=engine)
        BarcodeBase.metadata.drop_all(bind=barcode_engine)

    Base.metadata.create_all(bind=engine)
    BarcodeBase.metadata.create_all(bind=barcode_engine)
    log.info("Database initialized.")

    seed_catalogue()


def seed_catalogue():
    from badgeshop.repositories.product_repo import ProductRepository

    s = SessionLocal()
    try:
        repo = ProductRepository(s)
        created = 0
        for ent in CATALOGUE_SEED:
            if repo.get(ent["id"]) is None:
                repo.create_or_update(**ent)
                created += 1
        if created:
            s.commit()
            log.info(f"Seeded {created} catalogue products.")
    except Exception:
        s.rollback()
        raise
    finally:
        s.close()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_barcode_db():
    db = BarcodeSessionLocal()
    try:
        yield db
    finally:
        db.close()
