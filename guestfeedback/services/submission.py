"""
Guest review submission pipeline

Steps, in order: resolve the hotel by slug, resolve the form, validate the
answers, derive guest details and overall rating, decide the initial status,
insert the review in a single commit, then notify the hotel owner. The
notification runs after the commit and cannot fail the submission.
"""

from math import floor
from typing import Any, Dict, List, Optional
import re
import uuid

import structlog

from guestfeedback.core.errors import NotFound, ValidationError
from guestfeedback.core.notifications import NewReview, NotificationDispatcher, signal
from guestfeedback.core.store import Store
from guestfeedback.models import FieldType, Form, FormField, Review, ReviewStatus, SemanticRole

logger = structlog.get_logger(__name__)

MIN_RATING = 1
MAX_RATING = 5
APPROVAL_THRESHOLD = 4

_email_re = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_empty(answer: Any) -> bool:
    if answer is None:
        return True
    if isinstance(answer, str):
        return not answer.strip()
    if isinstance(answer, (list, dict)):
        return len(answer) == 0
    return False


def is_rating(answer: Any) -> bool:
    return (
        isinstance(answer, int)
        and not isinstance(answer, bool)
        and MIN_RATING <= answer <= MAX_RATING
    )


def _answer_problem(field: FormField, answer: Any) -> Optional[str]:
    """Reason an answer does not fit its field, or None"""
    options = field.options or []

    if field.type == FieldType.RATING:
        if not is_rating(answer):
            return f"must be a whole number from {MIN_RATING} to {MAX_RATING}"
    elif field.type == FieldType.SINGLE_CHOICE:
        if not isinstance(answer, str) or answer not in options:
            return "must be one of the field options"
    elif field.type == FieldType.MULTIPLE_CHOICE:
        if not isinstance(answer, list) or not all(
            isinstance(item, str) and item in options for item in answer
        ):
            return "must be a list of field options"
    elif field.type == FieldType.EMAIL:
        if not isinstance(answer, str) or not _email_re.match(answer.strip()):
            return "must be a valid email address"
    elif field.type == FieldType.FILE_UPLOAD:
        if not isinstance(answer, (str, list)) or (
            isinstance(answer, list) and not all(isinstance(item, str) for item in answer)
        ):
            return "must be a file reference or a list of file references"
    elif not isinstance(answer, str):
        return "must be text"
    return None


def validate_responses(form: Form, responses: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Collect every problem with the answers instead of stopping at the first"""
    problems: List[Dict[str, Any]] = []
    fields_by_id = {str(field.id): field for field in form.fields}

    missing = [
        field_id for field_id, field in fields_by_id.items()
        if field.required and is_empty(responses.get(field_id))
    ]
    for field_id in missing:
        problems.append({"field": field_id, "code": "required", "message": "This field is required"})

    for field_id, answer in responses.items():
        field = fields_by_id.get(field_id)
        if field is None:
            problems.append({"field": field_id, "code": "unknown_field", "message": "Not a field of this form"})
            continue
        if is_empty(answer):
            continue
        reason = _answer_problem(field, answer)
        if reason:
            problems.append({"field": field_id, "code": "invalid", "message": reason})

    return problems


def _single(candidates: List[FormField], purpose: str, form: Form) -> Optional[FormField]:
    if len(candidates) == 1:
        return candidates[0]
    if len(candidates) > 1:
        logger.warning(
            "Ambiguous guest field match, nothing derived",
            form_id=str(form.id),
            purpose=purpose,
            field_ids=[str(f.id) for f in candidates],
        )
    return None


def _field_with_role(form: Form, role: SemanticRole) -> Optional[FormField]:
    for field in form.fields:
        if field.semantic_role == role:
            return field
    return None


def guest_fields(form: Form) -> Dict[SemanticRole, Optional[FormField]]:
    """
    Map each guest-identity role to a field.

    A field declaring a semantic role always wins. Without one, the label
    heuristics apply only when exactly one field matches; several matches
    derive nothing rather than picking the first.
    """
    heuristics = {
        SemanticRole.GUEST_NAME: lambda f: "name" in f.label.lower(),
        SemanticRole.GUEST_EMAIL: lambda f: f.type == FieldType.EMAIL,
        SemanticRole.GUEST_PHONE: lambda f: "phone" in f.label.lower(),
    }

    resolved: Dict[SemanticRole, Optional[FormField]] = {}
    for role, matches in heuristics.items():
        field = _field_with_role(form, role)
        if field is None:
            candidates = [f for f in form.fields if f.semantic_role is None and matches(f)]
            field = _single(candidates, role.value, form)
        resolved[role] = field
    return resolved


def overall_rating(form: Form, responses: Dict[str, Any]) -> Optional[int]:
    """
    Rating that drives the initial status.

    The RATING-role field if declared, else the only RATING field. With
    several RATING fields, the mean of the answered ones, rounded half up.
    """
    rating_field = _field_with_role(form, SemanticRole.RATING)
    if rating_field is not None:
        answer = responses.get(str(rating_field.id))
        return answer if is_rating(answer) else None

    answers = [
        responses.get(str(field.id))
        for field in form.fields
        if field.type == FieldType.RATING
    ]
    answers = [a for a in answers if is_rating(a)]
    if not answers:
        return None
    if len(answers) == 1:
        return answers[0]
    return int(floor(sum(answers) / len(answers) + 0.5))


def initial_status(rating: Optional[int]) -> ReviewStatus:
    """High ratings are approved for sharing prompts, the rest wait for follow-up"""
    if rating is not None and rating >= APPROVAL_THRESHOLD:
        return ReviewStatus.APPROVED
    return ReviewStatus.PENDING


def _text(answer: Any) -> Optional[str]:
    if isinstance(answer, str) and answer.strip():
        return answer.strip()
    return None


async def submit(
    store: Store,
    dispatcher: NotificationDispatcher,
    hotel_slug: str,
    form_id: uuid.UUID,
    responses: Dict[str, Any],
) -> Review:
    """Create a review from a guest submission; each call creates a new review"""
    hotel = store.get_hotel_by_slug(hotel_slug)
    if hotel is None or not hotel.is_active:
        raise NotFound("Hotel not found or inactive")

    form = store.get_form(form_id, hotel.id)
    if form is None or not form.is_active:
        raise NotFound("Form not found or inactive")

    problems = validate_responses(form, responses)
    if problems:
        raise ValidationError(problems)

    roles = guest_fields(form)

    def answer_for(role: SemanticRole) -> Optional[str]:
        field = roles[role]
        return _text(responses.get(str(field.id))) if field is not None else None

    rating = overall_rating(form, responses)

    review = Review(
        hotel_id=hotel.id,
        form_id=form.id,
        guest_name=answer_for(SemanticRole.GUEST_NAME),
        guest_email=answer_for(SemanticRole.GUEST_EMAIL),
        guest_phone=answer_for(SemanticRole.GUEST_PHONE),
        responses=responses,
        overall_rating=rating,
        status=initial_status(rating),
    )
    store.add(review)
    store.commit()
    store.refresh(review)

    logger.info(
        "Review submitted",
        review_id=str(review.id),
        hotel_id=str(hotel.id),
        form_id=str(form.id),
        rating=rating,
        status=review.status.value,
    )

    await signal(dispatcher, store, NewReview(
        hotel_id=hotel.id,
        review_id=review.id,
        owner_id=hotel.owner_id,
        guest_name=review.guest_name,
        rating=rating,
    ))
    return review
