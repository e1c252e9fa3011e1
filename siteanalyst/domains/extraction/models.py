"""
Extraction Models - Data types for extraction domain.

Two families live here:
- pipeline records (outcomes, parsed sections, validation results, failures)
- the Location Analysis Record produced for rendering/export collaborators

Record models use snake_case attributes with camelCase aliases so that
`to_payload()` reproduces the wire shape the dashboards consume.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from siteanalyst.config.errors import UnknownSectionError

Number = int | float


class SectionId(str, Enum):
    """Independently extracted facets of a location analysis."""

    SUPPLY_PIPELINE = "supplyPipeline"
    LAND_SALES = "landSales"
    DEMOGRAPHICS = "demographics"
    PROXIMITY_INSIGHTS = "proximityInsights"
    ZONING_OVERLAYS = "zoningOverlays"
    RISK_FACTORS = "riskFactors"
    SUBMARKET = "submarket"
    PROPERTY_TYPE = "propertyType"
    PROPERTY_NAME = "propertyName"

    @classmethod
    def parse(cls, value: "str | SectionId") -> "SectionId":
        """Coerce a raw identifier, raising UnknownSectionError on a miss."""
        try:
            return cls(value)
        except ValueError:
            raise UnknownSectionError(str(value)) from None


# Fixed reporting order; independent of task completion order.
CANONICAL_ORDER: tuple[SectionId, ...] = tuple(SectionId)


class Severity(str, Enum):
    """Closed set of risk severities."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# --- Pipeline records ---


class ExtractionOutcome(BaseModel):
    """Raw backend answer for one section."""

    section: SectionId
    raw_text: str
    confidence: float = Field(ge=0.0, le=1.0)
    metadata: dict[str, Any] = Field(default_factory=dict)


class ParsedSection(BaseModel):
    """Backend answer after JSON coercion."""

    section: SectionId
    data: Any
    confidence: float = Field(ge=0.0, le=1.0)


class FieldError(BaseModel):
    """Single field-level shape violation."""

    field: str
    message: str

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ValidationResult(BaseModel):
    """Accumulated validation outcome for one section."""

    errors: list[FieldError] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


class SectionFailure(BaseModel):
    """Every error reported for one failed section."""

    section: SectionId
    errors: list[FieldError]


# --- Location Analysis Record ---


class RecordModel(BaseModel):
    """Base for record sub-structures (alias-aware, immutable)."""

    model_config = {"populate_by_name": True, "frozen": True}


class YearlySupply(RecordModel):
    year: str
    office: Number
    retail: Number
    multifamily: Number


class NearbyProject(RecordModel):
    name: str
    type: str
    size: str
    completion: str
    distance: Number | str | None = None


class SupplyPipeline(RecordModel):
    """Deliveries by year plus projects under way nearby."""

    yearly_supply: list[YearlySupply] = Field(alias="yearlySupply")
    nearby_projects: list[NearbyProject] = Field(alias="nearbyProjects")


class LandSale(RecordModel):
    address: str
    price: str
    price_psf: str = Field(alias="pricePSF")
    date: str
    zoning: str | None = None
    buyer: str | None = None


class MarketTrends(RecordModel):
    average_psf: str = Field(alias="averagePSF")
    sales_volume: str = Field(alias="salesVolume")
    number_of_transactions: Number = Field(alias="numberOfTransactions")


class LandSales(RecordModel):
    """Land sale comparables and the market rollup."""

    recent_sales: list[LandSale] = Field(alias="recentSales")
    market_trends: MarketTrends = Field(alias="marketTrends")


class PopulationPoint(RecordModel):
    year: Number
    count: Number
    projected: bool | None = None


class IncomeStats(RecordModel):
    median_income: Number = Field(alias="medianIncome")
    growth_rate: str = Field(alias="growthRate")


class ShareItem(RecordModel):
    """Named percentage share (industry or education bucket)."""

    name: str
    value: Number


class Demographics(RecordModel):
    population: list[PopulationPoint]
    income_stats: IncomeStats = Field(alias="incomeStats")
    industry_breakdown: list[ShareItem] | None = Field(default=None, alias="industryBreakdown")
    education_levels: list[ShareItem] | None = Field(default=None, alias="educationLevels")


class TransportationLink(RecordModel):
    type: str
    distance: str


class LocationScores(RecordModel):
    walk_score: Number = Field(alias="walkScore")
    transit_score: Number = Field(alias="transitScore")
    bike_score: Number = Field(alias="bikeScore")


class NamedDistance(RecordModel):
    name: str
    distance: str


class ProximityInsights(RecordModel):
    transportation: list[TransportationLink]
    scores: LocationScores
    employers: list[NamedDistance] | None = None
    amenities: list[NamedDistance] | None = None


class ZoningDesignation(RecordModel):
    designation: str
    far: str
    height_limit: str = Field(alias="heightLimit")
    description: str | None = None


class ZoningOverlays(RecordModel):
    current: ZoningDesignation
    allowed_uses: list[str] = Field(alias="allowedUses")
    overlay_districts: list[str] | None = Field(default=None, alias="overlayDistricts")
    special_requirements: list[str] | None = Field(default=None, alias="specialRequirements")


class RiskFactor(RecordModel):
    title: str
    description: str
    severity: Severity


class Submarket(RecordModel):
    submarket: str


class PropertyType(RecordModel):
    property_type: str = Field(alias="propertyType")


class PropertyName(RecordModel):
    property_name: str = Field(alias="propertyName")


class LocationAnalysisRecord(RecordModel):
    """
    Terminal data model: one normalized sub-structure per section.

    Every field is required; the orchestrator never builds a partial record.
    """

    supply_pipeline: SupplyPipeline = Field(alias="supplyPipeline")
    land_sales: LandSales = Field(alias="landSales")
    demographics: Demographics
    proximity_insights: ProximityInsights = Field(alias="proximityInsights")
    zoning_overlays: ZoningOverlays = Field(alias="zoningOverlays")
    risk_factors: list[RiskFactor] = Field(alias="riskFactors")
    submarket: Submarket
    property_type: PropertyType = Field(alias="propertyType")
    property_name: PropertyName = Field(alias="propertyName")

    # Processing info
    confidence: dict[str, float] = Field(default_factory=dict, exclude=True)
    extracted_at: datetime = Field(default_factory=datetime.now, exclude=True)

    def to_payload(self) -> dict[str, Any]:
        """Plain nested dict in the camelCase shape rendering consumers expect."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
