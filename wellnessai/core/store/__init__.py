"""
Store Module

Patient record persistence collaborator.
"""
from .record_store import PatientRecord, PatientRecordStore

__all__ = ["PatientRecord", "PatientRecordStore"]
