from scoretrack.schemas.records import (
    SubjectInput, TestConfigInput, TestInput, SubjectRawOut, SubjectStats, TestRecord
)
from scoretrack.schemas.templates import TemplateSubject, TemplateInput, TemplateRecord

__all__ = [
    "SubjectInput", "TestConfigInput", "TestInput", "SubjectRawOut", "SubjectStats",
    "TestRecord", "TemplateSubject", "TemplateInput", "TemplateRecord",
]
