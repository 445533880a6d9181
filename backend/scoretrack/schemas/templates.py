"""
Template Schemas - pydantic payloads for named presets.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from scoretrack.schemas.records import MAX_COUNT


class TemplateSubject(BaseModel):
    """Expected subject and its default question count."""
    name: str
    default_total: int = Field(0, ge=0, le=MAX_COUNT)


class TemplateInput(BaseModel):
    name: str = Field(..., min_length=1, description="Unique template name")
    correct_points: float
    wrong_points: float = 0.0
    is_negative: bool = False
    subjects: List[TemplateSubject] = Field(default_factory=list)


class TemplateRecord(TemplateInput):
    id: Optional[int] = None
