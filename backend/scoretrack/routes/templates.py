"""
Templates API routes - CRUD for marking/subject presets.
"""

from typing import List
from fastapi import APIRouter, Depends

from scoretrack.database import Database, get_database
from scoretrack.schemas.templates import TemplateInput, TemplateRecord
from scoretrack.services.templates import TemplateStore

router = APIRouter()


def get_template_store(database: Database = Depends(get_database)) -> TemplateStore:
    return TemplateStore(database)


@router.get("/api/templates", response_model=List[TemplateRecord])
def list_templates(store: TemplateStore = Depends(get_template_store)):
    """All templates ordered by name."""
    return store.list_templates()


@router.post("/api/templates", status_code=201)
def create_template(request: TemplateInput, store: TemplateStore = Depends(get_template_store)):
    template_id = store.create_template(request)
    return {"message": "Template created", "id": template_id}


@router.put("/api/templates/{template_id}")
def update_template(template_id: int, request: TemplateInput,
                    store: TemplateStore = Depends(get_template_store)):
    store.update_template(template_id, request)
    return {"message": "Template updated", "id": template_id}


@router.delete("/api/templates/{template_id}")
def delete_template(template_id: int, store: TemplateStore = Depends(get_template_store)):
    store.delete_template(template_id)
    return {"message": "Template deleted", "id": template_id}
