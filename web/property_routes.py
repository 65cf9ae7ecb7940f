"""
Property Routes - Web API for Property Onboarding

CRUD and wizard endpoints over the onboarding service.

Error mapping:
- PropertyNotFoundError -> 404
- PropertyValidationError (incl. invalid step number) -> 400
- Anything else raised by a mutation -> 400 with a generic message
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from core.onboarding import (
    PropertyNotFoundError,
    PropertyService,
    PropertyStatus,
    PropertyType,
    PropertyValidationError,
    get_progress_summary,
    get_property_repository,
    get_step_status,
    validate_property,
    validate_submission_data,
)
from web.schemas import (
    AutosaveRequest,
    CreatePropertyRequest,
    DraftRequest,
    StepUpdateRequest,
    UpdatePropertyRequest,
    to_payload,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Router Setup
# =============================================================================

router = APIRouter(prefix="/property", tags=["property"])


def get_property_service() -> PropertyService:
    """Service bound to the repository singleton."""
    return PropertyService(get_property_repository())


def _to_http_error(exc: Exception, action: str) -> HTTPException:
    """Translate a service exception into an HTTP error."""
    if isinstance(exc, PropertyNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, PropertyValidationError):
        return HTTPException(status_code=400, detail={"message": exc.message, "errors": exc.errors})
    logger.exception("Unexpected error while trying to %s", action)
    return HTTPException(status_code=400, detail=f"Failed to {action}")


# =============================================================================
# Queries
# =============================================================================


@router.get("")
async def list_properties(
    property_type: Optional[PropertyType] = Query(None, alias="type"),
    status: Optional[PropertyStatus] = Query(None),
):
    """List all properties, optionally filtered by type and/or status."""
    service = get_property_service()
    if property_type is not None:
        properties = service.find_by_type(property_type)
        if status is not None:
            properties = [p for p in properties if p.status == status]
    elif status is not None:
        properties = service.find_by_status(status)
    else:
        properties = service.find_all()

    return [p.to_dict() for p in properties]


@router.get("/stats")
async def get_stats():
    """Portfolio statistics."""
    return get_property_service().get_stats().to_dict()


@router.get("/drafts")
async def list_drafts():
    """Properties whose onboarding is below 100%."""
    return [p.to_dict() for p in get_property_service().find_drafts()]


@router.post("/validate")
async def validate(body: DraftRequest, strict: bool = Query(False)):
    """
    Pre-check wizard data without saving it.

    Returns the validator outcome plus the per-step completion and field
    progress, so the UI can show errors and progress bars before the user
    continues.
    """
    payload = to_payload(body)
    result = validate_submission_data(payload) if strict else validate_property(payload)
    response = result.to_dict()
    response["completion"] = get_step_status(payload).to_dict()
    response["progress"] = get_progress_summary(payload).to_dict()
    return response


# =============================================================================
# Drafts
# =============================================================================


@router.post("/draft")
async def create_draft(body: DraftRequest):
    """Create a draft from partial data."""
    try:
        prop = get_property_service().create_draft(to_payload(body))
    except Exception as e:
        raise _to_http_error(e, "create draft")
    return prop.to_dict()


@router.delete("/draft/{property_id}")
async def delete_draft(property_id: str):
    """Delete a draft permanently."""
    try:
        get_property_service().delete_draft(property_id)
    except Exception as e:
        raise _to_http_error(e, "delete draft")
    return {"message": "Draft deleted successfully"}


# =============================================================================
# Single Property
# =============================================================================


@router.get("/{property_id}")
async def get_property(property_id: str):
    """Get a property, or null if it does not exist."""
    prop = get_property_service().find_one(property_id)
    return prop.to_dict() if prop else None


@router.post("", status_code=201)
async def create_property(body: CreatePropertyRequest):
    """Create a fully onboarded property (strict validation)."""
    try:
        prop = get_property_service().create(to_payload(body))
    except Exception as e:
        raise _to_http_error(e, "create property")
    return prop.to_dict()


@router.put("/{property_id}")
async def update_property(property_id: str, body: UpdatePropertyRequest):
    """Merge changes into an existing property."""
    try:
        prop = get_property_service().update(property_id, to_payload(body))
    except Exception as e:
        raise _to_http_error(e, "update property")

    if prop is None:
        raise HTTPException(status_code=404, detail=f"Property {property_id} not found")
    return prop.to_dict()


@router.patch("/{property_id}/autosave")
async def autosave(property_id: str, body: AutosaveRequest):
    """Lenient partial save; progress is recomputed."""
    try:
        prop = get_property_service().autosave(property_id, to_payload(body))
    except Exception as e:
        raise _to_http_error(e, "autosave property")
    return prop.to_dict()


@router.patch("/{property_id}/step/{step_number}")
async def update_step(property_id: str, step_number: int, body: StepUpdateRequest):
    """Save one wizard step (1 = general info, 2 = buildings, 3 = units)."""
    try:
        prop = get_property_service().update_step(property_id, step_number, to_payload(body))
    except Exception as e:
        raise _to_http_error(e, "update step")
    return prop.to_dict()


@router.post("/{property_id}/finalize")
async def finalize(property_id: str):
    """Complete onboarding of a draft."""
    try:
        prop = get_property_service().finalize(property_id)
    except Exception as e:
        raise _to_http_error(e, "finalize property")
    return prop.to_dict()
