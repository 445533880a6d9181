"""
Template Store - named presets of marking rules and expected subjects.

No derived computation happens here. The subject list is validated
with pydantic, serialized to a JSON blob, and parsed back on read.
Template names are unique; a collision raises DuplicateName and leaves
the existing template untouched.
"""

import json
from typing import List

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from scoretrack.database import Database
from scoretrack.errors import NotFound, DuplicateName
from scoretrack.models.template import Template
from scoretrack.schemas.templates import TemplateSubject, TemplateInput, TemplateRecord
from scoretrack.logging_config import get_logger, log_with_context, log_store_event

logger = get_logger("templates")

_subjects_adapter = TypeAdapter(List[TemplateSubject])


def serialize_subjects(subjects: List[TemplateSubject]) -> str:
    return json.dumps([s.model_dump() for s in subjects])


def deserialize_subjects(blob: str) -> List[TemplateSubject]:
    """
    Parse a stored subject blob.

    A blob that is not valid JSON or does not match the preset shape
    reads back as an empty list so one bad row cannot break the listing.
    """
    try:
        return _subjects_adapter.validate_json(blob or "[]")
    except ValidationError as e:
        log_with_context(logger, "WARNING", "Unreadable template subjects blob",
                         extra_data={"error": str(e)})
        return []


def _check_name_free(session: Session, name: str, template_id: int = None):
    query = select(Template.id).where(Template.name == name)
    if template_id is not None:
        query = query.where(Template.id != template_id)
    if session.scalars(query).first() is not None:
        raise DuplicateName(name)


def _flush_unique(session: Session, name: str):
    # The UNIQUE constraint is the final word if the pre-check raced
    try:
        session.flush()
    except IntegrityError as e:
        raise DuplicateName(name) from e


class TemplateStore:
    """Durable storage for template presets."""

    def __init__(self, database: Database):
        self.database = database

    def create_template(self, data: TemplateInput) -> int:
        """
        Store a new template.

        Args:
            data: Name, marking configuration and subject presets

        Returns:
            The id assigned to the new template

        Raises:
            DuplicateName: a template with this name already exists
        """
        with self.database.unit_of_work() as session:
            _check_name_free(session, data.name)
            template = Template(
                name=data.name,
                correct_points=data.correct_points,
                wrong_points=data.wrong_points,
                is_negative=data.is_negative,
                subjects_json=serialize_subjects(data.subjects),
            )
            session.add(template)
            _flush_unique(session, data.name)
            template_id = template.id

        log_store_event(logger, "INFO", "Template '{}' created".format(data.name),
                        template_id=template_id, extra_data={"subjects": len(data.subjects)})
        return template_id

    def update_template(self, template_id: int, data: TemplateInput):
        """
        Replace every field of an existing template.

        Args:
            template_id: Template to update
            data: New name, marking configuration and subject presets

        Raises:
            NotFound: no template with this id
            DuplicateName: another template already uses the new name
        """
        with self.database.unit_of_work() as session:
            template = session.get(Template, template_id)
            if template is None:
                raise NotFound("Template", template_id)
            _check_name_free(session, data.name, template_id)

            template.name = data.name
            template.correct_points = data.correct_points
            template.wrong_points = data.wrong_points
            template.is_negative = data.is_negative
            template.subjects_json = serialize_subjects(data.subjects)
            _flush_unique(session, data.name)

        log_store_event(logger, "INFO", "Template {} updated".format(template_id),
                        template_id=template_id)

    def delete_template(self, template_id: int):
        """Delete a template. A missing id is a no-op."""
        with self.database.unit_of_work() as session:
            template = session.get(Template, template_id)
            if template is None:
                log_store_event(logger, "WARNING",
                                "Delete requested for missing template {}; nothing to do".format(template_id),
                                template_id=template_id)
                return
            session.delete(template)

        log_store_event(logger, "INFO", "Template {} deleted".format(template_id),
                        template_id=template_id)

    def list_templates(self) -> List[TemplateRecord]:
        """
        All stored templates.

        Returns:
            Records ordered by name; a row whose subject blob cannot be
            parsed is returned with an empty subject list
        """
        with self.database.unit_of_work() as session:
            templates = session.scalars(select(Template).order_by(Template.name)).all()
            return [
                TemplateRecord(
                    id=t.id,
                    name=t.name,
                    correct_points=t.correct_points,
                    wrong_points=t.wrong_points,
                    is_negative=bool(t.is_negative),
                    subjects=deserialize_subjects(t.subjects_json),
                )
                for t in templates
            ]
