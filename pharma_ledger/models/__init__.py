# Import every model so Base.metadata is complete for create_all / alembic.
from pharma_ledger.models.participant import Participant
from pharma_ledger.models.participant_credential import ParticipantCredential
from pharma_ledger.models.drug import Drug
from pharma_ledger.models.ownership_entry import OwnershipEntry
from pharma_ledger.models.transfer_record import TransferRecord
from pharma_ledger.models.quality_check import QualityCheck
from pharma_ledger.models.ledger_sequencer import LedgerSequencer
from pharma_ledger.models.ledger_event import LedgerEvent

__all__ = [
    "Participant",
    "ParticipantCredential",
    "Drug",
    "OwnershipEntry",
    "TransferRecord",
    "QualityCheck",
    "LedgerSequencer",
    "LedgerEvent",
]
