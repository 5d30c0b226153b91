# pharma_ledger/models/enums.py
from __future__ import annotations
from enum import Enum


class ParticipantRole(str, Enum):
    UNKNOWN = "Unknown"  # never persisted; exists so requests can be rejected explicitly
    MANUFACTURER = "Manufacturer"
    DISTRIBUTOR = "Distributor"
    PHARMACY = "Pharmacy"
    REGULATOR = "Regulator"
    QUALITY_INSPECTOR = "QualityInspector"
    CONSUMER = "Consumer"


class DrugState(str, Enum):
    MANUFACTURED = "Manufactured"
    SHIPPED_TO_DISTRIBUTOR = "ShippedToDistributor"
    RECEIVED_BY_DISTRIBUTOR = "ReceivedByDistributor"
    SHIPPED_TO_PHARMACY = "ShippedToPharmacy"
    RECEIVED_BY_PHARMACY = "ReceivedByPharmacy"
    SOLD_TO_CUSTOMER = "SoldToCustomer"
    RECALLED = "Recalled"


class TransferKind(str, Enum):
    CUSTODY = "CUSTODY"
    RECALL = "RECALL"


class LedgerEventType(str, Enum):
    PARTICIPANT_REGISTERED = "ParticipantRegistered"
    PARTICIPANT_ACTIVATED = "ParticipantActivated"
    PARTICIPANT_DEACTIVATED = "ParticipantDeactivated"
    PARTICIPANT_UPDATED = "ParticipantUpdated"
    DRUG_MANUFACTURED = "DrugManufactured"
    STATE_CHANGED = "StateChanged"
    CUSTODY_TRANSFERRED = "CustodyTransferred"
    DRUG_RECALLED = "DrugRecalled"
    QUALITY_CHECK_ADDED = "QualityCheckAdded"
