"""
SubjectEntry model - one subject's raw counts within one test.
"""

from sqlalchemy import Column, Integer, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
from scoretrack.database import Base
from scoretrack.services.aggregator import SubjectRaw


class SubjectEntry(Base):
    """
    SQLAlchemy model for the entries table.

    attempted_q is not checked against total_q, and correct_q may exceed
    attempted_q; the marking model tolerates both.
    """
    __tablename__ = "entries"

    id = Column(Integer, primary_key=True, autoincrement=True,
                doc="Store-assigned entry identifier")
    test_id = Column(Integer, ForeignKey("tests.id", ondelete="CASCADE"), nullable=False,
                     doc="Owning test")
    subject_name = Column(Text, nullable=False,
                          doc="Subject name (not unique)")
    total_q = Column(Integer, nullable=False, default=0)
    attempted_q = Column(Integer, nullable=False, default=0)
    correct_q = Column(Integer, nullable=False, default=0)

    test = relationship("Test", back_populates="entries")

    __table_args__ = (
        Index("ix_entries_test_id", "test_id"),
    )

    @property
    def raw(self) -> SubjectRaw:
        return SubjectRaw(total=self.total_q, attempted=self.attempted_q, correct=self.correct_q)

    def __repr__(self):
        return f"<SubjectEntry(id={self.id}, test={self.test_id}, subject='{self.subject_name}')>"
