"""
Form schema management gated by the hotel's subscription plan
"""

from datetime import datetime
from typing import List

import structlog

from guestfeedback.core.plans import check_form_fields
from guestfeedback.core.store import Store
from guestfeedback.models import Form, FormField, Hotel
from guestfeedback.schemas.form import FormCreate, FormFieldIn, FormUpdate

logger = structlog.get_logger(__name__)


def _build_fields(fields_in: List[FormFieldIn]) -> List[FormField]:
    return [
        FormField(
            position=position,
            label=field.label,
            type=field.type,
            required=field.required,
            placeholder=field.placeholder,
            options=list(field.options) if field.options else None,
            semantic_role=field.semantic_role,
        )
        for position, field in enumerate(fields_in)
    ]


def create_form(store: Store, hotel: Hotel, data: FormCreate) -> Form:
    """Validate against the current plan, then insert form and fields together"""
    check_form_fields(hotel.subscription_plan, [f.type for f in data.fields])

    form = Form(
        hotel_id=hotel.id,
        name=data.name,
        description=data.description,
        is_public=data.is_public,
        is_active=True,
    )
    form.fields = _build_fields(data.fields)

    store.add(form)
    store.commit()
    store.refresh(form)

    logger.info("Form created", form_id=str(form.id), hotel_id=str(hotel.id), fields=len(form.fields))
    return form


def update_form(store: Store, hotel: Hotel, form: Form, data: FormUpdate) -> Form:
    """
    Apply a partial update.

    Replacing the field list is checked against the plan the hotel has now;
    metadata-only updates never re-check existing fields.
    """
    if data.fields is not None:
        check_form_fields(hotel.subscription_plan, [f.type for f in data.fields])

    changes = data.model_dump(exclude_unset=True, exclude={"fields"})
    for key, value in changes.items():
        if value is not None or key == "description":
            setattr(form, key, value)

    if data.fields is not None:
        store.replace_form_fields(form, _build_fields(data.fields))

    form.updated_at = datetime.utcnow()
    store.add(form)
    store.commit()
    store.refresh(form)

    logger.info(f"Form updated: {form.id}")
    return form


def toggle_form_active(store: Store, form: Form) -> Form:
    form.is_active = not form.is_active
    form.updated_at = datetime.utcnow()
    store.add(form)
    store.commit()
    store.refresh(form)
    return form
