from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from pharma_ledger.core.errors import NotFoundError
from pharma_ledger.models.drug import Drug


def load_drug(db: Session, drug_id: int, *, for_update: bool = False) -> Drug:
    stmt = select(Drug).where(Drug.id == drug_id)
    if for_update:
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    drug = db.execute(stmt).scalar_one_or_none()
    if drug is None:
        raise NotFoundError(f"Drug {drug_id} not found.")
    return drug
