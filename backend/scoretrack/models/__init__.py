from scoretrack.models.test import Test
from scoretrack.models.entry import SubjectEntry
from scoretrack.models.template import Template

__all__ = ["Test", "SubjectEntry", "Template"]
