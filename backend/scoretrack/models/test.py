"""
Test model - one exam attempt with its marking configuration.

The marking configuration is stored as plain columns. score_pct and
accuracy_pct are a cached projection of the aggregator output over the
test's entries; the record store rewrites them in the same transaction
as every mutation that affects them.
"""

from sqlalchemy import Column, Integer, Float, Boolean, Text
from sqlalchemy.orm import relationship
from scoretrack.database import Base
from scoretrack.services.marking import MarkingConfig


class Test(Base):
    """
    SQLAlchemy model for the tests table.

    Deleting a test deletes its entries through the ON DELETE CASCADE
    foreign key on entries.test_id.
    """
    __tablename__ = "tests"

    id = Column(Integer, primary_key=True, autoincrement=True,
                doc="Store-assigned test identifier")
    date = Column(Text, nullable=False,
                  doc="Caller-supplied date string, stored as-is")
    name = Column(Text, nullable=True,
                  doc="Optional display name")
    correct_points = Column(Float, nullable=False, default=0.0,
                            doc="Points awarded per correct answer")
    wrong_points = Column(Float, nullable=False, default=0.0,
                          doc="Points deducted per wrong answer")
    is_negative = Column(Boolean, nullable=False, default=False,
                         doc="Whether wrong answers are penalised")
    score_pct = Column(Float, nullable=False, default=0.0,
                       doc="Derived: grand raw score / grand max score * 100")
    accuracy_pct = Column(Float, nullable=False, default=0.0,
                          doc="Derived: total correct / total attempted * 100")

    entries = relationship(
        "SubjectEntry",
        back_populates="test",
        order_by="SubjectEntry.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def marking(self) -> MarkingConfig:
        return MarkingConfig(
            points_correct=self.correct_points,
            points_wrong=self.wrong_points,
            negative=bool(self.is_negative),
        )

    def __repr__(self):
        return f"<Test(id={self.id}, date='{self.date}', score_pct={self.score_pct})>"
