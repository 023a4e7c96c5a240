"""Predicate model

A predicate is the claim a verifier asks the holder to prove, expressed as a
comparison triple (attribute, operator, value). Predicates are built from a
small fixed catalog rather than parsed from free text, so the only parsing
surface is catalog-key lookup.

The same predicate has two renderings:

- a short human-readable string, used for display and recorded verbatim on
  every audit record
- the structured triple, which the backend evaluates against the attributes a
  holder reveals
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Dict, Final, List, Literal, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from returns.result import Failure, Result, Success

from mediguard.domain.value_objects import PredicateOperator


class Predicate(BaseModel):
    """
    Immutable comparison predicate.

    Attributes:
        type: Predicate kind, only COMPARISON is defined
        attribute: Name of the credential attribute being tested
        operator: Comparison operator
        value: Right-hand side of the comparison, always carried as text
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["COMPARISON"] = Field("COMPARISON", description="Predicate kind")
    attribute: str = Field(..., min_length=1, description="Credential attribute name")
    operator: PredicateOperator = Field(..., description="Comparison operator")
    value: str = Field(..., min_length=1, description="Comparison value")

    @field_validator("attribute", "value")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field cannot be blank")
        return v


# ======================
# Errors
# ======================


@dataclass(frozen=True)
class PredicateError:
    """Base error type for predicate operations"""

    message: str = ""


@dataclass(frozen=True)
class UnknownPredicateKind(PredicateError):
    """Catalog key does not name a known predicate"""

    key: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "message",
            f"Unknown predicate kind: {self.key!r}. Expected one of {', '.join(catalog_keys())}",
        )


# ======================
# Catalog
# ======================

_CATALOG: Final[Dict[str, Predicate]] = {
    "vaccination_covid": Predicate(
        attribute="vaccination_type", operator=PredicateOperator.CONTAINS, value="COVID"
    ),
    "age_18": Predicate(attribute="age", operator=PredicateOperator.GTE, value="18"),
    "insurance_active": Predicate(
        attribute="insurance_status", operator=PredicateOperator.EQ, value="active"
    ),
}


def catalog_keys() -> List[str]:
    """Keys of every predicate the verifier UI may offer"""
    return list(_CATALOG)


def from_catalog_key(key: str) -> Result[Predicate, UnknownPredicateKind]:
    """
    Resolve a catalog key to its predicate.

    Args:
        key: Catalog key such as "age_18"

    Returns:
        Success(Predicate) or Failure(UnknownPredicateKind)
    """
    predicate = _CATALOG.get(key)
    if predicate is None:
        return Failure(UnknownPredicateKind(key=key))
    return Success(predicate)


# ======================
# Rendering
# ======================

_ATTRIBUTE_TEMPLATES: Final[Dict[Tuple[str, PredicateOperator], str]] = {
    ("vaccination_type", PredicateOperator.CONTAINS): "vaccinated against {value}",
    ("insurance_status", PredicateOperator.EQ): "insurance status is {value}",
}

_OPERATOR_TEMPLATES: Final[Dict[PredicateOperator, str]] = {
    PredicateOperator.GT: "{attribute} > {value}",
    PredicateOperator.GTE: "{attribute} >= {value}",
    PredicateOperator.LT: "{attribute} < {value}",
    PredicateOperator.LTE: "{attribute} <= {value}",
    PredicateOperator.EQ: "{attribute} = {value}",
    PredicateOperator.CONTAINS: "{attribute} contains {value}",
}


def to_human_readable(predicate: Predicate) -> str:
    """
    Render a predicate as a short human-readable string.

    Pure: the same predicate always yields the same text.
    """
    template = _ATTRIBUTE_TEMPLATES.get((predicate.attribute, predicate.operator))
    if template is None:
        template = _OPERATOR_TEMPLATES[predicate.operator]
    attribute = predicate.attribute.replace("_", " ").strip()
    return template.format(attribute=attribute, value=predicate.value)


# ======================
# Evaluation
# ======================


def _as_number(text: str) -> Optional[Decimal]:
    try:
        number = Decimal(text.strip())
    except InvalidOperation:
        return None
    if not number.is_finite():
        return None
    return number


def evaluate(predicate: Predicate, attributes: Mapping[str, str]) -> bool:
    """
    Check whether revealed attributes satisfy a predicate.

    Ordering operators need both sides to be numbers and fail closed otherwise.
    A missing attribute never satisfies a predicate.

    Args:
        predicate: Predicate to test
        attributes: Revealed attribute values

    Returns:
        True if the predicate holds
    """
    actual = attributes.get(predicate.attribute)
    if actual is None:
        return False
    actual = str(actual)

    if predicate.operator == PredicateOperator.CONTAINS:
        return predicate.value.casefold() in actual.casefold()

    left = _as_number(actual)
    right = _as_number(predicate.value)

    if predicate.operator == PredicateOperator.EQ:
        if left is not None and right is not None:
            return left == right
        return actual.strip() == predicate.value.strip()

    if left is None or right is None:
        return False

    if predicate.operator == PredicateOperator.GT:
        return left > right
    if predicate.operator == PredicateOperator.GTE:
        return left >= right
    if predicate.operator == PredicateOperator.LT:
        return left < right
    if predicate.operator == PredicateOperator.LTE:
        return left <= right
    return False
