# pharma_ledger/core/unit_of_work.py
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import select
from sqlalchemy.orm import Session

from pharma_ledger.models.ledger_sequencer import LedgerSequencer

logger = logging.getLogger(__name__)

# in-process writer lock; the sequencer row lock orders writers across processes
_writer_lock = threading.RLock()


def lock_sequencer(db: Session) -> LedgerSequencer:
    seq = db.execute(
        select(LedgerSequencer)
        .where(LedgerSequencer.id == LedgerSequencer.SINGLETON_ID)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()
    if seq is None:
        raise RuntimeError("Ledger sequencer missing; run bootstrap_ledger first.")
    return seq


@contextmanager
def ledger_transaction(db: Session) -> Iterator[LedgerSequencer]:
    """
    Atomic unit of work for one ledger mutation.

    - serializes against every other mutation (global sequencer row)
    - commits on success
    - rolls back everything on any exception, then re-raises
    """
    with _writer_lock:
        try:
            seq = lock_sequencer(db)
            yield seq
            db.commit()
        except Exception:
            db.rollback()
            raise
