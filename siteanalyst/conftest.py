"""
Shared pytest fixtures: schema-valid section payloads and a scripted backend.
"""

from __future__ import annotations

import asyncio
import copy
import json
from collections.abc import Callable, Mapping
from typing import Any

import pytest

from siteanalyst.domains.extraction.models import ExtractionOutcome, SectionId

VALID_PAYLOADS: dict[SectionId, Any] = {
    SectionId.SUPPLY_PIPELINE: {
        "yearlySupply": [
            {"year": "2024", "office": 120000, "retail": 45000, "multifamily": 310},
            {"year": "2025", "office": 80000, "retail": 30000, "multifamily": 540},
        ],
        "nearbyProjects": [
            {
                "name": "Pearl West",
                "type": "Mixed-Use",
                "size": "220,000 SF",
                "completion": "Q3 2025",
                "distance": "0.4 miles",
            }
        ],
    },
    SectionId.LAND_SALES: {
        "recentSales": [
            {
                "address": "1200 NW Marshall St",
                "price": "$12,500,000",
                "pricePSF": "$310",
                "date": "2024-03-15",
                "zoning": "EX",
            }
        ],
        "marketTrends": {
            "averagePSF": "$295",
            "salesVolume": "$48.2M",
            "numberOfTransactions": 14,
        },
    },
    SectionId.DEMOGRAPHICS: {
        "population": [
            {"year": 2020, "count": 652503},
            {"year": 2025, "count": 671000, "projected": True},
        ],
        "incomeStats": {"medianIncome": 78476, "growthRate": "3.2%"},
        "industryBreakdown": [{"name": "Technology", "value": 18.5}],
    },
    SectionId.PROXIMITY_INSIGHTS: {
        "transportation": [{"type": "Streetcar", "distance": "0.1 miles"}],
        "scores": {"walkScore": 96, "transitScore": 78, "bikeScore": 94},
        "employers": [{"name": "Providence Health", "distance": "1.2 miles"}],
    },
    SectionId.ZONING_OVERLAYS: {
        "current": {"designation": "EX", "far": "4:1", "heightLimit": "250 ft"},
        "allowedUses": ["Office", "Residential", "Retail"],
        "overlayDistricts": ["Design Overlay"],
    },
    SectionId.RISK_FACTORS: {
        "riskFactors": [
            {
                "title": "Rising construction costs",
                "description": "Material costs up 12% year over year.",
                "severity": "medium",
            }
        ]
    },
    SectionId.SUBMARKET: {"submarket": "Pearl District"},
    SectionId.PROPERTY_TYPE: {"propertyType": "Mixed-Use"},
    SectionId.PROPERTY_NAME: {"propertyName": "The Marshall"},
}

Response = str | BaseException


class ScriptedBackend:
    """
    Extraction backend that replays canned responses per section.

    Sections without a script answer with their valid payload. An exception
    in the script is raised instead of returning text.
    """

    def __init__(
        self,
        script: Mapping[SectionId, Response] | None = None,
        delays: Mapping[SectionId, float] | None = None,
        confidence: float = 0.95,
    ) -> None:
        self.script = dict(script or {})
        self.delays = dict(delays or {})
        self.confidence = confidence
        self.calls: list[SectionId] = []
        self.completed: list[SectionId] = []

    async def extract(self, document: bytes, section: SectionId) -> ExtractionOutcome:
        self.calls.append(section)
        await asyncio.sleep(self.delays.get(section, 0))
        response = self.script.get(section, json.dumps(VALID_PAYLOADS[section]))
        self.completed.append(section)
        if isinstance(response, BaseException):
            raise response
        return ExtractionOutcome(
            section=section,
            raw_text=response,
            confidence=self.confidence,
        )


@pytest.fixture
def valid_payloads() -> dict[SectionId, Any]:
    """Independent copy of the valid payloads, safe to mutate."""
    return copy.deepcopy(VALID_PAYLOADS)


@pytest.fixture
def scripted_backend() -> Callable[..., ScriptedBackend]:
    """Factory for ScriptedBackend instances."""
    return ScriptedBackend
