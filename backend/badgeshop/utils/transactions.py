from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session, SessionTransaction

from badgeshop.utils.log import get_logger

log = get_logger("transactions")


@contextmanager
def smart_transaction(session: Session) -> Iterator[SessionTransaction]:
    """
    Run a block of DB work as one unit on the given Session.

    A session that already holds a transaction gets a SAVEPOINT (begin_nested),
    otherwise a normal transaction is started (begin). The block commits when it
    exits cleanly; any exception rolls everything back and is re-raised.

    Usage:
        with smart_transaction(db):
            ... DB work ...
    """
    nested = session.in_transaction()
    cm = session.begin_nested() if nested else session.begin()
    try:
        with cm as tx:
            yield tx
    except Exception:
        log.warning(f"rolled back {'savepoint' if nested else 'transaction'}")
        raise
