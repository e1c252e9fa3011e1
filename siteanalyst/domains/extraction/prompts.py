"""
Section Prompts - Extraction instructions and shape contracts per section.

Each prompt ends with the exact JSON structure the validator enforces.
"""

from __future__ import annotations

from .models import SectionId

_INFER = (
    "If a value is not stated explicitly, infer a realistic estimate from market "
    "trends, comparable properties, location context and any figures the document "
    "does mention."
)

SUPPLY_PIPELINE_PROMPT = f"""Extract the development supply pipeline around the property.
{_INFER}

Focus on:
- New deliveries by property type (office, retail, multifamily) in square feet
- The delivery timeline for the coming years
- Development projects within roughly 2 miles

The response MUST match this exact structure:
{{
  "yearlySupply": [
    {{"year": "string (e.g. '2024')", "office": number, "retail": number, "multifamily": number}}
  ],
  "nearbyProjects": [
    {{"name": "string", "type": "string (Office, Retail, Multifamily)",
      "size": "string (e.g. '350,000 SF' or '220 units')",
      "completion": "string (e.g. 'Q2 2025')", "distance": number (miles)}}
  ]
}}"""

LAND_SALES_PROMPT = f"""Extract land sale comparables and the land market rollup.
{_INFER}

Focus on:
- Recent land or development-site transactions with address, date and price
- Price per square foot for each transaction
- Total dollar volume, average price per square foot and transaction count

The response MUST match this exact structure:
{{
  "recentSales": [
    {{"address": "string ([Number] [Street], [City], [State], [Country])",
      "price": "string (with $)", "pricePSF": "string (with $)",
      "zoning": "string", "buyer": "string", "date": "string"}}
  ],
  "marketTrends": {{
    "averagePSF": "string (with $)", "salesVolume": "string (with $)",
    "numberOfTransactions": number
  }}
}}

Include between 5 and 7 transactions when the document supports it."""

DEMOGRAPHICS_PROMPT = f"""Extract the demographic profile of the property's trade area.
{_INFER}

Focus on:
- Historical and projected population
- Median household income and its growth rate
- Employment by industry and educational attainment shares

The response MUST match this exact structure:
{{
  "population": [{{"year": number, "count": number, "projected": boolean (optional)}}],
  "incomeStats": {{"medianIncome": number, "growthRate": "string (with %)"}},
  "industryBreakdown": [{{"name": "string", "value": number (percentage)}}],
  "educationLevels": [{{"name": "string", "value": number (percentage)}}]
}}

Include at least 3 population years (past, present, projected). Counts and incomes
are plain numbers without commas or currency symbols."""

PROXIMITY_INSIGHTS_PROMPT = f"""Extract accessibility and proximity information for the property.
{_INFER}

Focus on:
- Transportation infrastructure (airports, highways, rail, transit, ports)
- Walk, transit and bike scores
- Major employers and amenities nearby

The response MUST match this exact structure:
{{
  "transportation": [{{"type": "string", "distance": "string (with units)"}}],
  "scores": {{"walkScore": number (0-100), "transitScore": number (0-100), "bikeScore": number (0-100)}},
  "employers": [{{"name": "string", "distance": "string (with units)"}}],
  "amenities": [{{"name": "string", "distance": "string (with units)"}}]
}}

Include at least 5 transportation options."""

ZONING_OVERLAYS_PROMPT = f"""Extract the zoning and land-use regulation for the property.
{_INFER}

Focus on:
- Current designation with floor area ratio and height limit
- Permitted uses
- Overlay districts and special requirements

The response MUST match this exact structure:
{{
  "current": {{"designation": "string (code and name, e.g. 'M1-1: Light Manufacturing')",
               "description": "string", "far": "string (e.g. '3.0')",
               "heightLimit": "string (feet or stories)"}},
  "allowedUses": ["string"],
  "overlayDistricts": ["string"],
  "specialRequirements": ["string"]
}}

Include at least 3 allowed uses."""

RISK_FACTORS_PROMPT = f"""Identify the principal investment risks of the property.
{_INFER}

Focus on property-specific risks (tenancy, condition, capital needs) and broader
market risks (supply, demand, capital markets, regulation).

The response MUST match this exact structure:
{{
  "riskFactors": [
    {{"title": "string", "description": "string",
      "severity": "string (exactly one of: high, medium, low)"}}
  ]
}}

Include at most 3 risk factors."""

SUBMARKET_PROMPT = """Identify the named submarket in which the property sits.

Use broker-recognized submarket names, more specific than the city
(e.g. "Red Hook, Brooklyn" rather than "Brooklyn").

The response MUST match this exact structure:
{"submarket": "string"}"""

PROPERTY_TYPE_PROMPT = """Classify the property with an industry-standard property type.

Be as specific as the document supports (e.g. "Last-Mile Logistics Facility"
rather than "Industrial"); for mixed-use assets name the predominant use.

The response MUST match this exact structure:
{"propertyType": "string"}"""

PROPERTY_NAME_PROMPT = """Identify the marketed name of the property.

Prefer the branded or project name; fall back to the street address when the
property is known by it.

The response MUST match this exact structure:
{"propertyName": "string"}"""

SECTION_PROMPTS: dict[SectionId, str] = {
    SectionId.SUPPLY_PIPELINE: SUPPLY_PIPELINE_PROMPT,
    SectionId.LAND_SALES: LAND_SALES_PROMPT,
    SectionId.DEMOGRAPHICS: DEMOGRAPHICS_PROMPT,
    SectionId.PROXIMITY_INSIGHTS: PROXIMITY_INSIGHTS_PROMPT,
    SectionId.ZONING_OVERLAYS: ZONING_OVERLAYS_PROMPT,
    SectionId.RISK_FACTORS: RISK_FACTORS_PROMPT,
    SectionId.SUBMARKET: SUBMARKET_PROMPT,
    SectionId.PROPERTY_TYPE: PROPERTY_TYPE_PROMPT,
    SectionId.PROPERTY_NAME: PROPERTY_NAME_PROMPT,
}

OUTPUT_REQUIREMENTS = """IMPORTANT REQUIREMENTS:
1. Return ONLY the JSON object, no other text
2. All number fields must be actual numbers, not strings (except for formatted prices)
3. Use consistent formatting:
   - Prices must include the $ symbol
   - Distances must include units (miles)
   - Dates should use one consistent format
   - Percentages must include the % symbol
4. Arrays must have at least one item
5. If specific data is missing, infer values by logical deduction from the document
6. Never return empty arrays; estimate from context when needed"""
