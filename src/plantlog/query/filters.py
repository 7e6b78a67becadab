"""Turn raw filter text into the minimal set of exact-match criteria."""

from typing import Any, Dict, Mapping, Optional

FILTER_FIELDS = ("name", "type", "location")

FILTER_REQUIRED_MESSAGE = "Please enter at least one filter category."

FilterCriteria = Dict[str, str]


class FilterValidationError(ValueError):
    """Raised when an explicit filter action carries no criteria."""


def _is_present(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def build_filter_criteria(
    name: Optional[str] = "",
    type_: Optional[str] = "",
    location: Optional[str] = "",
) -> FilterCriteria:
    """
    Build filter criteria from the three raw inputs.

    A key is included only when its input has non-whitespace content; the
    value itself is kept exactly as typed. All-empty input gives {}, which
    means "no filter".
    """
    inputs = {"name": name, "type": type_, "location": location}
    return {key: inputs[key] for key in FILTER_FIELDS if _is_present(inputs[key])}


def criteria_from_params(params: Optional[Mapping[str, Any]]) -> FilterCriteria:
    """Build criteria from navigation parameters, ignoring unrecognized keys."""
    if not params:
        return {}
    return build_filter_criteria(
        params.get("name"),
        params.get("type"),
        params.get("location"),
    )


def require_criteria(criteria: FilterCriteria) -> FilterCriteria:
    """
    Validate criteria for an explicit filter action.

    Raises:
        FilterValidationError: If no criteria were supplied
    """
    if not criteria:
        raise FilterValidationError(FILTER_REQUIRED_MESSAGE)
    return criteria


def is_filtered(criteria: Optional[FilterCriteria]) -> bool:
    return bool(criteria)
