"""
Subscription plan limits for form schemas

The table is built once at import and never mutated. Limits are checked
when a form is created or its fields are replaced, using the hotel's plan
at that moment; existing forms are not re-checked after a downgrade.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping

import structlog

from guestfeedback.core.errors import PlanLimitExceeded
from guestfeedback.models import FieldType, SubscriptionPlan

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PlanLimits:
    max_fields: int
    allowed_field_types: FrozenSet[FieldType]


_BASIC_TYPES = frozenset({
    FieldType.TEXT,
    FieldType.TEXTAREA,
    FieldType.RATING,
    FieldType.EMAIL,
})
_PREMIUM_TYPES = _BASIC_TYPES | {
    FieldType.SINGLE_CHOICE,
    FieldType.MULTIPLE_CHOICE,
    FieldType.PHONE,
}
_ENTERPRISE_TYPES = frozenset(FieldType)

PLAN_LIMITS: Mapping[SubscriptionPlan, PlanLimits] = MappingProxyType({
    SubscriptionPlan.BASIC: PlanLimits(max_fields=5, allowed_field_types=_BASIC_TYPES),
    SubscriptionPlan.PREMIUM: PlanLimits(max_fields=15, allowed_field_types=_PREMIUM_TYPES),
    SubscriptionPlan.ENTERPRISE: PlanLimits(max_fields=50, allowed_field_types=_ENTERPRISE_TYPES),
})


def limits_for(plan: SubscriptionPlan) -> PlanLimits:
    """Get limits for a plan tier"""
    return PLAN_LIMITS[SubscriptionPlan(plan)]


def check_form_fields(plan: SubscriptionPlan, field_types: Iterable[FieldType]) -> None:
    """Raise PlanLimitExceeded if the field list does not fit the plan"""
    limits = limits_for(plan)
    field_types = [FieldType(t) for t in field_types]

    details = {}
    if len(field_types) > limits.max_fields:
        details["max_fields"] = limits.max_fields
        details["actual_fields"] = len(field_types)

    invalid = sorted({t.value for t in field_types if t not in limits.allowed_field_types})
    if invalid:
        details["invalid_types"] = invalid

    if details:
        logger.info("Form rejected by plan limits", plan=SubscriptionPlan(plan).value, **details)
        raise PlanLimitExceeded(plan=SubscriptionPlan(plan).value, **details)
