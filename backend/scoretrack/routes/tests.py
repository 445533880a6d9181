"""
Tests API routes - history, test configuration and subject entries.

Each route delegates to RecordStore; store errors are translated into
HTTP responses by the exception handler registered in main.py.
"""

from typing import List
from fastapi import APIRouter, Depends

from scoretrack.database import Database, get_database
from scoretrack.schemas.records import SubjectInput, TestConfigInput, TestInput, TestRecord
from scoretrack.services.records import RecordStore

router = APIRouter()


def get_record_store(database: Database = Depends(get_database)) -> RecordStore:
    return RecordStore(database)


@router.get("/api/tests", response_model=List[TestRecord])
def list_history(store: RecordStore = Depends(get_record_store)):
    """All tests with derived statistics, newest first."""
    return store.list_history()


@router.get("/api/tests/{test_id}", response_model=TestRecord)
def get_test(test_id: int, store: RecordStore = Depends(get_record_store)):
    return store.get_test(test_id)


@router.post("/api/tests", status_code=201)
def create_test(request: TestInput, store: RecordStore = Depends(get_record_store)):
    """Create a test together with its subject entries."""
    test_id = store.create_test(request)
    return {"message": "Test created", "id": test_id}


@router.put("/api/tests/{test_id}")
def update_test(test_id: int, request: TestConfigInput,
                store: RecordStore = Depends(get_record_store)):
    """Change date, name or marking configuration; percentages are recalculated."""
    store.update_test(test_id, request)
    return {"message": "Test updated", "id": test_id}


@router.delete("/api/tests/{test_id}")
def delete_test(test_id: int, store: RecordStore = Depends(get_record_store)):
    store.delete_test(test_id)
    return {"message": "Test deleted", "id": test_id}


@router.post("/api/tests/{test_id}/subjects", status_code=201)
def add_subject(test_id: int, request: SubjectInput,
                store: RecordStore = Depends(get_record_store)):
    entry_id = store.add_subject(test_id, request)
    return {"message": "Subject added", "id": entry_id, "test_id": test_id}


@router.put("/api/subjects/{entry_id}")
def update_subject(entry_id: int, request: SubjectInput,
                   store: RecordStore = Depends(get_record_store)):
    store.update_subject(entry_id, request)
    return {"message": "Subject updated", "id": entry_id}


@router.delete("/api/subjects/{entry_id}")
def delete_subject(entry_id: int, store: RecordStore = Depends(get_record_store)):
    store.delete_subject(entry_id)
    return {"message": "Subject deleted", "id": entry_id}
