"""
Template model - a named preset of marking rules and expected subjects.

The subject list is kept as a JSON text blob; the template store
validates it on the way in and out but never computes anything from it.
"""

from sqlalchemy import Column, Integer, Float, Boolean, Text
from scoretrack.database import Base


class Template(Base):
    """SQLAlchemy model for the templates table. Names are unique."""
    __tablename__ = "templates"

    id = Column(Integer, primary_key=True, autoincrement=True,
                doc="Store-assigned template identifier")
    name = Column(Text, nullable=False, unique=True,
                  doc="Globally unique template name")
    correct_points = Column(Float, nullable=False, default=0.0)
    wrong_points = Column(Float, nullable=False, default=0.0)
    is_negative = Column(Boolean, nullable=False, default=False)
    subjects_json = Column(Text, nullable=False, default="[]",
                           doc="Subject presets as JSON: [{name, default_total}]")

    def __repr__(self):
        return f"<Template(id={self.id}, name='{self.name}')>"
