"""
Schema Registry - Section identifier to expected shape.

Each section is described once, declaratively: the extraction prompt sent to
the backend and the field rules the validator walks. Adding a section is a
data change here, not a new validator function.

The registry is read-only after construction and shared by every concurrent
extraction task.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Union

from siteanalyst.config.errors import UnknownSectionError

from .models import CANONICAL_ORDER, SectionId, Severity
from .prompts import SECTION_PROMPTS

__all__ = [
    "ArrayRule",
    "ChoiceRule",
    "DEFAULT_REGISTRY",
    "LeafRule",
    "ObjectRule",
    "SchemaDescriptor",
    "SchemaRegistry",
    "ValueKind",
    "coerce_risk_payload",
]


class ValueKind(str, Enum):
    """Primitive JSON types a leaf may be required to have."""

    STRING = "string"
    NON_EMPTY_STRING = "non_empty_string"
    NUMBER = "number"
    BOOLEAN = "boolean"

    def accepts(self, value: Any) -> bool:
        """Check a JSON value against this kind (booleans and NaN are never numbers)."""
        if self is ValueKind.STRING:
            return isinstance(value, str)
        if self is ValueKind.NON_EMPTY_STRING:
            return isinstance(value, str) and bool(value.strip())
        if self is ValueKind.NUMBER:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return False
            return isinstance(value, int) or math.isfinite(value)
        return isinstance(value, bool)


@dataclass(frozen=True)
class LeafRule:
    """Required primitive field."""

    key: str
    kind: ValueKind
    message: str


@dataclass(frozen=True)
class ChoiceRule:
    """Required string field restricted to a closed, case-insensitive set."""

    key: str
    choices: tuple[str, ...]
    message: str


@dataclass(frozen=True)
class ObjectRule:
    """Required nested object with its own required fields."""

    key: str
    fields: tuple["FieldRule", ...]
    message: str


@dataclass(frozen=True)
class ArrayRule:
    """
    Required array.

    Elements are either objects checked against `fields`, or primitives
    checked against `item_kind`.
    """

    key: str
    message: str
    fields: tuple["FieldRule", ...] = ()
    item_kind: ValueKind | None = None
    item_message: str = ""


FieldRule = Union[LeafRule, ChoiceRule, ObjectRule, ArrayRule]


@dataclass(frozen=True)
class SchemaDescriptor:
    """Shape contract and extraction instruction for one section."""

    section: SectionId
    prompt: str
    data_schema: str
    rules: tuple[FieldRule, ...]
    coerce: Callable[[Any], Any] | None = None

    def prepare(self, data: Any) -> Any:
        """Apply the section's shape coercion (if any) before validation."""
        return self.coerce(data) if self.coerce is not None else data


class SchemaRegistry:
    """
    Immutable mapping from section identifier to schema descriptor.

    Example:
        >>> descriptor = DEFAULT_REGISTRY.lookup("demographics")
        >>> descriptor.data_schema
        'DemographicData interface structure'
    """

    def __init__(self, descriptors: Iterable[SchemaDescriptor]) -> None:
        self._descriptors = MappingProxyType({d.section: d for d in descriptors})

    def lookup(self, section: str | SectionId) -> SchemaDescriptor:
        """
        Get the descriptor for a section.

        Raises:
            UnknownSectionError: identifier is not a registered section
        """
        section_id = SectionId.parse(section)
        try:
            return self._descriptors[section_id]
        except KeyError:
            raise UnknownSectionError(section_id.value) from None

    def sections(self) -> list[SectionId]:
        """Registered sections in canonical order."""
        return [s for s in CANONICAL_ORDER if s in self._descriptors]

    def __contains__(self, section: object) -> bool:
        try:
            return SectionId(section) in self._descriptors
        except ValueError:
            return False

    def __iter__(self) -> Iterator[SchemaDescriptor]:
        return (self._descriptors[s] for s in self.sections())

    def __len__(self) -> int:
        return len(self._descriptors)


def coerce_risk_payload(data: Any) -> Any:
    """
    Bring the accepted risk-factor shapes to `{"riskFactors": [...]}`.

    Accepted: a `riskFactors` array, a `riskFactors` lone object, a root-level
    lone risk object, or a root-level array of risks.
    """
    if isinstance(data, list):
        return {"riskFactors": data}
    if isinstance(data, dict):
        risks = data.get("riskFactors")
        if isinstance(risks, dict):
            return {**data, "riskFactors": [risks]}
        if "riskFactors" not in data and "title" in data:
            return {"riskFactors": [data]}
    return data


def _str(key: str, message: str) -> LeafRule:
    return LeafRule(key, ValueKind.STRING, message)


def _num(key: str, message: str) -> LeafRule:
    return LeafRule(key, ValueKind.NUMBER, message)


_DESCRIPTORS = (
    SchemaDescriptor(
        section=SectionId.SUPPLY_PIPELINE,
        prompt=SECTION_PROMPTS[SectionId.SUPPLY_PIPELINE],
        data_schema="SupplyData interface structure",
        rules=(
            ArrayRule(
                "yearlySupply",
                "Missing or invalid yearly supply data",
                fields=(
                    _str("year", "Year must be a string"),
                    _num("office", "Office must be a number"),
                    _num("retail", "Retail must be a number"),
                    _num("multifamily", "Multifamily must be a number"),
                ),
            ),
            ArrayRule(
                "nearbyProjects",
                "Missing or invalid nearby projects data",
                fields=(
                    _str("name", "Project name must be a string"),
                    _str("type", "Project type must be a string"),
                    _str("size", "Project size must be a string"),
                    _str("completion", "Completion date must be a string"),
                ),
            ),
        ),
    ),
    SchemaDescriptor(
        section=SectionId.LAND_SALES,
        prompt=SECTION_PROMPTS[SectionId.LAND_SALES],
        data_schema="LandSaleData interface structure",
        rules=(
            ArrayRule(
                "recentSales",
                "Missing or invalid recent sales data",
                fields=(
                    _str("address", "Address must be a string"),
                    _str("price", "Price must be a string"),
                    _str("pricePSF", "Price per square foot must be a string"),
                    _str("date", "Date must be a string"),
                ),
            ),
            ObjectRule(
                "marketTrends",
                (
                    _str("averagePSF", "Average price per square foot must be a string"),
                    _str("salesVolume", "Sales volume must be a string"),
                    _num("numberOfTransactions", "Number of transactions must be a number"),
                ),
                "Missing market trends data",
            ),
        ),
    ),
    SchemaDescriptor(
        section=SectionId.DEMOGRAPHICS,
        prompt=SECTION_PROMPTS[SectionId.DEMOGRAPHICS],
        data_schema="DemographicData interface structure",
        rules=(
            ArrayRule(
                "population",
                "Missing or invalid population data",
                fields=(
                    _num("year", "Year must be a number"),
                    _num("count", "Count must be a number"),
                ),
            ),
            ObjectRule(
                "incomeStats",
                (
                    _num("medianIncome", "Median income must be a number"),
                    _str("growthRate", "Growth rate must be a string"),
                ),
                "Missing income statistics data",
            ),
        ),
    ),
    SchemaDescriptor(
        section=SectionId.PROXIMITY_INSIGHTS,
        prompt=SECTION_PROMPTS[SectionId.PROXIMITY_INSIGHTS],
        data_schema="ProximityData interface structure",
        rules=(
            ArrayRule(
                "transportation",
                "Missing or invalid transportation data",
                fields=(
                    _str("type", "Transportation type must be a string"),
                    _str("distance", "Distance must be a string"),
                ),
            ),
            ObjectRule(
                "scores",
                (
                    _num("walkScore", "Walk score must be a number"),
                    _num("transitScore", "Transit score must be a number"),
                    _num("bikeScore", "Bike score must be a number"),
                ),
                "Missing scores data",
            ),
        ),
    ),
    SchemaDescriptor(
        section=SectionId.ZONING_OVERLAYS,
        prompt=SECTION_PROMPTS[SectionId.ZONING_OVERLAYS],
        data_schema="ZoningData interface structure",
        rules=(
            ObjectRule(
                "current",
                (
                    _str("designation", "Designation must be a string"),
                    _str("far", "FAR must be a string"),
                    _str("heightLimit", "Height limit must be a string"),
                ),
                "Missing current zoning data",
            ),
            ArrayRule(
                "allowedUses",
                "Missing or invalid allowed uses data",
                item_kind=ValueKind.STRING,
                item_message="Allowed use must be a string",
            ),
        ),
    ),
    SchemaDescriptor(
        section=SectionId.RISK_FACTORS,
        prompt=SECTION_PROMPTS[SectionId.RISK_FACTORS],
        data_schema="RiskFactor interface structure",
        rules=(
            ArrayRule(
                "riskFactors",
                "Risk factors must be an array",
                fields=(
                    _str("title", "Risk title must be a string"),
                    _str("description", "Risk description must be a string"),
                    ChoiceRule(
                        "severity",
                        tuple(s.value for s in Severity),
                        "Severity must be high, medium, or low",
                    ),
                ),
            ),
        ),
        coerce=coerce_risk_payload,
    ),
    SchemaDescriptor(
        section=SectionId.SUBMARKET,
        prompt=SECTION_PROMPTS[SectionId.SUBMARKET],
        data_schema="Submarket interface structure",
        rules=(
            LeafRule("submarket", ValueKind.NON_EMPTY_STRING, "Submarket must be a non-empty string"),
        ),
    ),
    SchemaDescriptor(
        section=SectionId.PROPERTY_TYPE,
        prompt=SECTION_PROMPTS[SectionId.PROPERTY_TYPE],
        data_schema="PropertyType interface structure",
        rules=(
            LeafRule(
                "propertyType", ValueKind.NON_EMPTY_STRING, "Property type must be a non-empty string"
            ),
        ),
    ),
    SchemaDescriptor(
        section=SectionId.PROPERTY_NAME,
        prompt=SECTION_PROMPTS[SectionId.PROPERTY_NAME],
        data_schema="PropertyName interface structure",
        rules=(
            LeafRule(
                "propertyName", ValueKind.NON_EMPTY_STRING, "Property name must be a non-empty string"
            ),
        ),
    ),
)

DEFAULT_REGISTRY = SchemaRegistry(_DESCRIPTORS)
