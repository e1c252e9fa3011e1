"""
Section Normalizer - Validated payloads to the typed record model.

Pure remapping. Validation only guarantees required fields, so every optional
sub-structure is read with a fallback and passed through as present or absent.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel

from .models import (
    CANONICAL_ORDER,
    Demographics,
    IncomeStats,
    LandSale,
    LandSales,
    LocationAnalysisRecord,
    LocationScores,
    MarketTrends,
    NamedDistance,
    NearbyProject,
    ParsedSection,
    PopulationPoint,
    PropertyName,
    PropertyType,
    ProximityInsights,
    RiskFactor,
    SectionId,
    Severity,
    ShareItem,
    Submarket,
    SupplyPipeline,
    TransportationLink,
    YearlySupply,
    ZoningDesignation,
    ZoningOverlays,
)
from .schemas import ValueKind, coerce_risk_payload

__all__ = ["build_record", "normalize"]

NormalizedSection = BaseModel | list[RiskFactor]


def _list(data: Mapping[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    return value if isinstance(value, list) else []


def _optional_list(data: Mapping[str, Any], key: str) -> list[Any] | None:
    value = data.get(key)
    return value if isinstance(value, list) else None


def _optional(value: Any, *kinds: ValueKind) -> Any:
    return value if any(kind.accepts(value) for kind in kinds) else None


def _well_formed(item: Any, **kinds: ValueKind) -> bool:
    return isinstance(item, dict) and all(kind.accepts(item.get(k)) for k, kind in kinds.items())


def _shares(data: Mapping[str, Any], key: str) -> list[ShareItem] | None:
    items = _optional_list(data, key)
    if items is None:
        return None
    return [
        ShareItem(name=i["name"], value=i["value"])
        for i in items
        if _well_formed(i, name=ValueKind.STRING, value=ValueKind.NUMBER)
    ]


def _named_distances(data: Mapping[str, Any], key: str) -> list[NamedDistance] | None:
    items = _optional_list(data, key)
    if items is None:
        return None
    return [
        NamedDistance(name=i["name"], distance=i["distance"])
        for i in items
        if _well_formed(i, name=ValueKind.STRING, distance=ValueKind.STRING)
    ]


def _strings(data: Mapping[str, Any], key: str) -> list[str] | None:
    items = _optional_list(data, key)
    if items is None:
        return None
    return [i for i in items if isinstance(i, str)]


def normalize_supply_pipeline(data: Mapping[str, Any]) -> SupplyPipeline:
    return SupplyPipeline(
        yearly_supply=[
            YearlySupply(
                year=s["year"],
                office=s["office"],
                retail=s["retail"],
                multifamily=s["multifamily"],
            )
            for s in _list(data, "yearlySupply")
        ],
        nearby_projects=[
            NearbyProject(
                name=p["name"],
                type=p["type"],
                size=p["size"],
                completion=p["completion"],
                distance=_optional(p.get("distance"), ValueKind.NUMBER, ValueKind.STRING),
            )
            for p in _list(data, "nearbyProjects")
        ],
    )


def normalize_land_sales(data: Mapping[str, Any]) -> LandSales:
    trends = data["marketTrends"]
    return LandSales(
        recent_sales=[
            LandSale(
                address=s["address"],
                price=s["price"],
                price_psf=s["pricePSF"],
                date=s["date"],
                zoning=_optional(s.get("zoning"), ValueKind.STRING),
                buyer=_optional(s.get("buyer"), ValueKind.STRING),
            )
            for s in _list(data, "recentSales")
        ],
        market_trends=MarketTrends(
            average_psf=trends["averagePSF"],
            sales_volume=trends["salesVolume"],
            number_of_transactions=trends["numberOfTransactions"],
        ),
    )


def normalize_demographics(data: Mapping[str, Any]) -> Demographics:
    income = data["incomeStats"]
    return Demographics(
        population=[
            PopulationPoint(
                year=p["year"],
                count=p["count"],
                projected=_optional(p.get("projected"), ValueKind.BOOLEAN),
            )
            for p in _list(data, "population")
        ],
        income_stats=IncomeStats(
            median_income=income["medianIncome"],
            growth_rate=income["growthRate"],
        ),
        industry_breakdown=_shares(data, "industryBreakdown"),
        education_levels=_shares(data, "educationLevels"),
    )


def normalize_proximity_insights(data: Mapping[str, Any]) -> ProximityInsights:
    scores = data["scores"]
    return ProximityInsights(
        transportation=[
            TransportationLink(type=t["type"], distance=t["distance"])
            for t in _list(data, "transportation")
        ],
        scores=LocationScores(
            walk_score=scores["walkScore"],
            transit_score=scores["transitScore"],
            bike_score=scores["bikeScore"],
        ),
        employers=_named_distances(data, "employers"),
        amenities=_named_distances(data, "amenities"),
    )


def normalize_zoning_overlays(data: Mapping[str, Any]) -> ZoningOverlays:
    current = data["current"]
    return ZoningOverlays(
        current=ZoningDesignation(
            designation=current["designation"],
            far=current["far"],
            height_limit=current["heightLimit"],
            description=_optional(current.get("description"), ValueKind.STRING),
        ),
        allowed_uses=list(_list(data, "allowedUses")),
        overlay_districts=_strings(data, "overlayDistricts"),
        special_requirements=_strings(data, "specialRequirements"),
    )


def normalize_risk_factors(data: Any) -> list[RiskFactor]:
    """Risk factors may arrive as a lone object; always return a list."""
    payload = coerce_risk_payload(data)
    return [
        RiskFactor(
            title=r["title"],
            description=r["description"],
            severity=Severity(r["severity"].strip().lower()),
        )
        for r in _list(payload, "riskFactors")
    ]


def normalize_submarket(data: Mapping[str, Any]) -> Submarket:
    return Submarket(submarket=data["submarket"].strip())


def normalize_property_type(data: Mapping[str, Any]) -> PropertyType:
    return PropertyType(property_type=data["propertyType"].strip())


def normalize_property_name(data: Mapping[str, Any]) -> PropertyName:
    return PropertyName(property_name=data["propertyName"].strip())


_NORMALIZERS: dict[SectionId, Callable[[Any], NormalizedSection]] = {
    SectionId.SUPPLY_PIPELINE: normalize_supply_pipeline,
    SectionId.LAND_SALES: normalize_land_sales,
    SectionId.DEMOGRAPHICS: normalize_demographics,
    SectionId.PROXIMITY_INSIGHTS: normalize_proximity_insights,
    SectionId.ZONING_OVERLAYS: normalize_zoning_overlays,
    SectionId.RISK_FACTORS: normalize_risk_factors,
    SectionId.SUBMARKET: normalize_submarket,
    SectionId.PROPERTY_TYPE: normalize_property_type,
    SectionId.PROPERTY_NAME: normalize_property_name,
}


def normalize(section: str | SectionId, parsed: ParsedSection) -> NormalizedSection:
    """
    Map one validated section payload onto its record sub-structure.

    Raises:
        UnknownSectionError: section is not registered
    """
    return _NORMALIZERS[SectionId.parse(section)](parsed.data)


def build_record(parsed: Mapping[SectionId, ParsedSection]) -> LocationAnalysisRecord:
    """Assemble the full record from one parsed section per identifier."""
    normalized = {section: normalize(section, parsed[section]) for section in CANONICAL_ORDER}
    return LocationAnalysisRecord(
        supply_pipeline=normalized[SectionId.SUPPLY_PIPELINE],
        land_sales=normalized[SectionId.LAND_SALES],
        demographics=normalized[SectionId.DEMOGRAPHICS],
        proximity_insights=normalized[SectionId.PROXIMITY_INSIGHTS],
        zoning_overlays=normalized[SectionId.ZONING_OVERLAYS],
        risk_factors=normalized[SectionId.RISK_FACTORS],
        submarket=normalized[SectionId.SUBMARKET],
        property_type=normalized[SectionId.PROPERTY_TYPE],
        property_name=normalized[SectionId.PROPERTY_NAME],
        confidence={section.value: parsed[section].confidence for section in CANONICAL_ORDER},
    )
