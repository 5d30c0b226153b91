from pharma_ledger.schemas.participants import ParticipantCreate, ParticipantOut, ParticipantProfileUpdate
from pharma_ledger.schemas.drugs import DrugBasic, DrugManufactureRequest, BatchVerification, TransferRecordOut
from pharma_ledger.schemas.quality import QualityCheckCreate, QualityCheckOut
from pharma_ledger.schemas.events import LedgerEventOut, LedgerEventFeed
