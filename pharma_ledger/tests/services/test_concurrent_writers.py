import threading
from collections import Counter
from datetime import timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker

from pharma_ledger.core.errors import AuthorizationError, ConflictError, LedgerError
from pharma_ledger.db.base import Base
from pharma_ledger.db.session import SessionLocal, build_engine
from pharma_ledger.models.drug import Drug
from pharma_ledger.models.enums import ParticipantRole, TransferKind
from pharma_ledger.models.quality_check import QualityCheck
from pharma_ledger.models.transfer_record import TransferRecord
from pharma_ledger.policies.access_control import Caller
from pharma_ledger.services.ledger import bootstrap_ledger
from pharma_ledger.tests.conftest import DISTRIBUTOR, INSPECTOR, MANUFACTURER, enroll


@pytest.fixture
def session_factory(request, settings, clock, tmp_path):
    """
    Sessions that really run side by side. The default in-memory sqlite is a
    single shared connection, so it is swapped for a file-backed database.
    """
    if not settings.database_url.startswith("sqlite"):
        request.getfixturevalue("tables")
        yield SessionLocal
        return

    engine = build_engine(f"sqlite+pysqlite:///{tmp_path / 'ledger.db'}")
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    session = factory()
    try:
        bootstrap_ledger(session, settings, clock)
    finally:
        session.close()
    yield factory
    engine.dispose()


@pytest.fixture
def session(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def actors(session, ledger, admin):
    return {
        "manufacturer": enroll(session, ledger, admin, MANUFACTURER, ParticipantRole.MANUFACTURER),
        "distributor": enroll(session, ledger, admin, DISTRIBUTOR, ParticipantRole.DISTRIBUTOR),
        "inspector": enroll(session, ledger, admin, INSPECTOR, ParticipantRole.QUALITY_INSPECTOR),
    }


def run_concurrently(session_factory, jobs):
    """
    Start every job at once, each on its own session. Returns the ledger
    errors raised; anything else fails the test.
    """
    barrier = threading.Barrier(len(jobs))
    rejected = []
    crashed = []

    def worker(job):
        s = session_factory()
        try:
            barrier.wait()
            job(s)
        except LedgerError as e:
            rejected.append(e)
        except Exception as e:  # surfaced below
            crashed.append(e)
        finally:
            s.close()

    threads = [threading.Thread(target=worker, args=(job,)) for job in jobs]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)

    assert not any(t.is_alive() for t in threads)
    assert crashed == []
    return rejected


def test_parallel_manufacture_assigns_gapless_ids(session_factory, session, ledger, clock, actors):
    m = actors["manufacturer"]
    batch_numbers = [f"LOT-{i % 4}" for i in range(10)]

    def manufacture(batch_number):
        def job(s):
            ledger.batches.manufacture(
                s,
                caller=m,
                name="Ibuprofen",
                batch_number=batch_number,
                evidence_hash=None,
                expiry=clock.now() + timedelta(days=90),
            )
        return job

    rejected = run_concurrently(session_factory, [manufacture(b) for b in batch_numbers])

    assert len(rejected) == 6
    assert all(isinstance(e, ConflictError) for e in rejected)

    rows = session.execute(select(Drug.id, Drug.batch_number)).all()
    assert sorted(r.id for r in rows) == [1, 2, 3, 4]
    assert Counter(r.batch_number for r in rows) == Counter({f"LOT-{i}": 1 for i in range(4)})
    assert ledger.batches.total_drugs(session) == 4
    assert ledger.events.verify_chain(session)


def test_parallel_transfers_and_checks_keep_history_consistent(session_factory, session, ledger, clock, actors):
    ledger.batches.manufacture(
        session,
        caller=actors["manufacturer"],
        name="Insulin",
        batch_number="LOT-1",
        evidence_hash=None,
        expiry=clock.now() + timedelta(days=90),
    )

    def transfer(frm, to):
        def job(s):
            ledger.batches.transfer_custody(s, caller=Caller(frm), drug_id=1, to=to)
        return job

    def inspect(i):
        def job(s):
            ledger.quality.add_quality_check(
                s,
                caller=actors["inspector"],
                drug_id=1,
                location="dock",
                temperature=4,
                humidity=50,
                passed=True,
                remarks=f"check {i}",
                evidence_hash=f"bafy-{i}",
            )
        return job

    jobs = []
    for i in range(4):
        jobs.append(transfer(MANUFACTURER, DISTRIBUTOR))
        jobs.append(transfer(DISTRIBUTOR, MANUFACTURER))
        jobs.append(inspect(i))

    rejected = run_concurrently(session_factory, jobs)
    assert all(isinstance(e, AuthorizationError) and e.reason == "NOT_OWNER" for e in rejected)

    session.expire_all()
    drug = ledger.batches.get(session, 1)
    transfers = session.execute(
        select(TransferRecord.idx, TransferRecord.kind).where(TransferRecord.drug_id == 1)
    ).all()
    custody = sum(1 for t in transfers if t.kind == TransferKind.CUSTODY.value)
    checks = session.execute(
        select(func.count()).select_from(QualityCheck).where(QualityCheck.drug_id == 1)
    ).scalar_one()

    assert custody == 8 - len(rejected)
    assert drug.transfer_count == len(transfers)
    assert sorted(t.idx for t in transfers) == list(range(len(transfers)))
    assert drug.ownership_count == custody + 1
    assert drug.quality_check_count == checks == 4
    assert ledger.provenance.is_consistent(session, 1)
    assert ledger.events.verify_chain(session)
