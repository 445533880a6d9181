"""
Record Store - tests and subject entries with transactionally consistent
derived fields.

Every mutation runs in one unit of work:
1. Apply the write (insert / update / delete)
2. Re-read the owning test's configuration and current entries
3. Re-run the aggregator and write score_pct / accuracy_pct back

Steps 1-3 commit together or not at all, so a test's cached
percentages never disagree with its entries between operations.
Subject-level percentages are never cached; list_history derives them
from the raw rows on every read.
"""

import time
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from scoretrack.database import Database
from scoretrack.errors import NotFound
from scoretrack.models.test import Test
from scoretrack.models.entry import SubjectEntry
from scoretrack.schemas.records import (
    SubjectInput, TestConfigInput, TestInput, SubjectRawOut, SubjectStats, TestRecord
)
from scoretrack.services.aggregator import SubjectRaw, aggregate
from scoretrack.services.marking import marking_display
from scoretrack.logging_config import get_logger, log_store_event

logger = get_logger("scoring")


def recalculate_test_stats(session: Session, test: Test):
    """
    Recompute and store a test's cached percentages from its current entries.

    Entries are queried rather than taken from the relationship collection
    so the result reflects every flushed insert, update and delete.
    """
    session.flush()
    entries = session.scalars(
        select(SubjectEntry).where(SubjectEntry.test_id == test.id).order_by(SubjectEntry.id)
    ).all()
    result = aggregate(test.marking, [entry.raw for entry in entries])
    test.score_pct = result.total_score_pct
    test.accuracy_pct = result.total_accuracy_pct
    session.flush()

    log_store_event(logger, "DEBUG",
        "Recalculated test {}: score={:.2f}%, accuracy={:.2f}%".format(
            test.id, test.score_pct, test.accuracy_pct),
        extra_data={"subjects": len(entries)}, test_id=test.id)


def build_test_record(test: Test) -> TestRecord:
    """Serialize a Test with its entries, deriving subject stats from raw counts."""
    entries = sorted(test.entries, key=lambda e: e.id)
    result = aggregate(test.marking, [entry.raw for entry in entries])

    subjects = [
        SubjectStats(
            id=entry.id,
            name=entry.subject_name,
            attempts_pct=stats.attempts_pct,
            accuracy_pct=stats.accuracy_pct,
            score_pct=stats.score_pct,
            raw=SubjectRawOut(total=entry.total_q, attempted=entry.attempted_q,
                              correct=entry.correct_q),
        )
        for entry, stats in zip(entries, result.subjects)
    ]

    return TestRecord(
        id=test.id,
        date=test.date,
        name=test.name,
        marking_display=marking_display(test.marking),
        total_score_pct=test.score_pct,
        total_accuracy_pct=test.accuracy_pct,
        subjects=subjects,
    )


class RecordStore:
    """Durable storage for tests and their subject entries."""

    def __init__(self, database: Database):
        self.database = database

    # ── Tests ────────────────────────────────────────────────

    def create_test(self, data: TestInput) -> int:
        """
        Insert a test and all its entries in one transaction.

        The cached percentages are computed from the supplied subjects
        before insertion, which is equivalent to inserting and then
        recalculating.

        Args:
            data: Date, name, marking configuration and initial subjects

        Returns:
            The id assigned to the new test

        Raises:
            StorageError: the write failed; nothing was persisted
            LockContention: the store lock was not acquired in time
        """
        start_time = time.time()
        result = aggregate(
            data.marking,
            [SubjectRaw(total=s.total_q, attempted=s.attempted_q, correct=s.correct_q)
             for s in data.subjects]
        )

        with self.database.unit_of_work() as session:
            test = Test(
                date=data.date,
                name=data.name,
                correct_points=data.correct_points,
                wrong_points=data.wrong_points,
                is_negative=data.is_negative,
                score_pct=result.total_score_pct,
                accuracy_pct=result.total_accuracy_pct,
            )
            session.add(test)
            session.flush()

            for subject in data.subjects:
                session.add(SubjectEntry(
                    test_id=test.id,
                    subject_name=subject.name,
                    total_q=subject.total_q,
                    attempted_q=subject.attempted_q,
                    correct_q=subject.correct_q,
                ))
            session.flush()
            test_id = test.id

        log_store_event(logger, "INFO",
            "Test created: score={:.2f}%, accuracy={:.2f}%".format(
                result.total_score_pct, result.total_accuracy_pct),
            start_time=start_time, extra_data={"subjects": len(data.subjects)},
            test_id=test_id)
        return test_id

    def update_test(self, test_id: int, data: TestConfigInput):
        """
        Replace a test's date, name and marking configuration, then
        recalculate its percentages from the current entries.

        Args:
            test_id: Test to update
            data: New date, name and marking configuration

        Raises:
            NotFound: no test with this id
        """
        start_time = time.time()

        with self.database.unit_of_work() as session:
            test = session.get(Test, test_id)
            if test is None:
                raise NotFound("Test", test_id)

            test.date = data.date
            test.name = data.name
            test.correct_points = data.correct_points
            test.wrong_points = data.wrong_points
            test.is_negative = data.is_negative
            recalculate_test_stats(session, test)

        log_store_event(logger, "INFO", "Test {} configuration updated".format(test_id),
                        start_time=start_time, test_id=test_id)

    def delete_test(self, test_id: int):
        """Delete a test and, by cascade, its entries. A missing id is a no-op."""
        with self.database.unit_of_work() as session:
            test = session.get(Test, test_id)
            if test is None:
                log_store_event(logger, "WARNING",
                                "Delete requested for missing test {}; nothing to do".format(test_id),
                                test_id=test_id)
                return
            session.delete(test)

        log_store_event(logger, "INFO", "Test {} deleted".format(test_id), test_id=test_id)

    # ── Subject entries ──────────────────────────────────────

    def add_subject(self, test_id: int, data: SubjectInput) -> int:
        """
        Insert an entry into an existing test and recalculate that test.

        Args:
            test_id: Owning test
            data: Subject name and raw counts

        Returns:
            The id assigned to the new entry

        Raises:
            NotFound: no test with this id; nothing is inserted
        """
        start_time = time.time()

        with self.database.unit_of_work() as session:
            test = session.get(Test, test_id)
            if test is None:
                raise NotFound("Test", test_id)

            entry = SubjectEntry(
                test_id=test.id,
                subject_name=data.name,
                total_q=data.total_q,
                attempted_q=data.attempted_q,
                correct_q=data.correct_q,
            )
            session.add(entry)
            recalculate_test_stats(session, test)
            entry_id = entry.id

        log_store_event(logger, "INFO", "Subject '{}' added to test {}".format(data.name, test_id),
                        start_time=start_time, test_id=test_id, entry_id=entry_id)
        return entry_id

    def update_subject(self, entry_id: int, data: SubjectInput):
        """
        Update an entry's name and counts, then recalculate its owning test.

        Args:
            entry_id: Entry to update
            data: New subject name and raw counts

        Raises:
            NotFound: no entry with this id
        """
        start_time = time.time()

        with self.database.unit_of_work() as session:
            entry = session.get(SubjectEntry, entry_id)
            if entry is None:
                raise NotFound("Subject entry", entry_id)

            entry.subject_name = data.name
            entry.total_q = data.total_q
            entry.attempted_q = data.attempted_q
            entry.correct_q = data.correct_q
            test_id = entry.test_id
            recalculate_test_stats(session, session.get(Test, test_id))

        log_store_event(logger, "INFO", "Subject entry {} updated".format(entry_id),
                        start_time=start_time, test_id=test_id, entry_id=entry_id)

    def delete_subject(self, entry_id: int):
        """
        Delete an entry and recalculate the remaining entries of its test.

        Raises:
            NotFound: no entry with this id
        """
        start_time = time.time()

        with self.database.unit_of_work() as session:
            entry = session.get(SubjectEntry, entry_id)
            if entry is None:
                raise NotFound("Subject entry", entry_id)

            test_id = entry.test_id
            session.delete(entry)
            recalculate_test_stats(session, session.get(Test, test_id))

        log_store_event(logger, "INFO", "Subject entry {} deleted".format(entry_id),
                        start_time=start_time, test_id=test_id, entry_id=entry_id)

    # ── Reads ────────────────────────────────────────────────

    def list_history(self) -> List[TestRecord]:
        """
        All tests with their entries and derived statistics.

        Returns:
            Records ordered by date descending, ties broken by id
            descending; subjects in insertion order
        """
        start_time = time.time()

        with self.database.unit_of_work() as session:
            tests = session.scalars(
                select(Test)
                .options(selectinload(Test.entries))
                .order_by(Test.date.desc(), Test.id.desc())
            ).all()
            records = [build_test_record(test) for test in tests]

        log_store_event(logger, "DEBUG", "Listed {} tests".format(len(records)),
                        start_time=start_time)
        return records

    def get_test(self, test_id: int) -> TestRecord:
        """
        One test with its entries and derived statistics.

        Args:
            test_id: Test to read

        Returns:
            The same record list_history would return for this test

        Raises:
            NotFound: no test with this id
        """
        with self.database.unit_of_work() as session:
            test = session.scalars(
                select(Test).options(selectinload(Test.entries)).where(Test.id == test_id)
            ).first()
            if test is None:
                raise NotFound("Test", test_id)
            return build_test_record(test)
