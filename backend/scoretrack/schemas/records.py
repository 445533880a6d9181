"""
Record Schemas - pydantic payloads for tests and subject entries.

Input models validate caller payloads (counts are integers between 0
and MAX_COUNT); read models describe one history record as returned
by RecordStore.list_history.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from scoretrack.services.marking import MarkingConfig

# Counts are stored in 32-bit unsigned range
MAX_COUNT = 4294967295


class SubjectInput(BaseModel):
    """Raw counts for one subject entry."""
    name: str = Field(..., description="Subject name")
    total_q: int = Field(..., ge=0, le=MAX_COUNT, description="Questions in the subject")
    attempted_q: int = Field(..., ge=0, le=MAX_COUNT, description="Questions attempted")
    correct_q: int = Field(..., ge=0, le=MAX_COUNT, description="Questions answered correctly")


class TestConfigInput(BaseModel):
    """Date, name and marking configuration of a test."""
    date: str = Field(..., description="Date string, stored as given")
    name: Optional[str] = Field(None, description="Optional display name")
    correct_points: float = Field(..., description="Points per correct answer")
    wrong_points: float = Field(0.0, description="Points deducted per wrong answer")
    is_negative: bool = Field(False, description="Apply negative marking")

    @property
    def marking(self) -> MarkingConfig:
        return MarkingConfig(
            points_correct=self.correct_points,
            points_wrong=self.wrong_points,
            negative=self.is_negative,
        )


class TestInput(TestConfigInput):
    """A new test together with its initial subject entries."""
    subjects: List[SubjectInput] = Field(default_factory=list)


class SubjectRawOut(BaseModel):
    total: int
    attempted: int
    correct: int


class SubjectStats(BaseModel):
    """One subject entry with percentages derived on read."""
    id: int
    name: str
    attempts_pct: float
    accuracy_pct: float
    score_pct: float
    raw: SubjectRawOut


class TestRecord(BaseModel):
    """One test as listed in the history view."""
    id: int
    date: str
    name: Optional[str] = None
    marking_display: str
    total_score_pct: float
    total_accuracy_pct: float
    subjects: List[SubjectStats] = Field(default_factory=list)
