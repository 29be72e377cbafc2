"""
constants.py — shared constants used across the pipeline and API.

State FIPS codes, BLS area codes, series templates, ACS variables and the
fixed enrichment stage order are defined here so they stay in sync between
the pipeline, the API and the tests.
"""

from __future__ import annotations

from typing import Final

# ---------------------------------------------------------------------------
# States: FIPS code -> (USPS abbreviation, name)
# ---------------------------------------------------------------------------
STATES: Final[dict[str, tuple[str, str]]] = {
    "01": ("AL", "Alabama"),
    "02": ("AK", "Alaska"),
    "04": ("AZ", "Arizona"),
    "05": ("AR", "Arkansas"),
    "06": ("CA", "California"),
    "08": ("CO", "Colorado"),
    "09": ("CT", "Connecticut"),
    "10": ("DE", "Delaware"),
    "11": ("DC", "District of Columbia"),
    "12": ("FL", "Florida"),
    "13": ("GA", "Georgia"),
    "15": ("HI", "Hawaii"),
    "16": ("ID", "Idaho"),
    "17": ("IL", "Illinois"),
    "18": ("IN", "Indiana"),
    "19": ("IA", "Iowa"),
    "20": ("KS", "Kansas"),
    "21": ("KY", "Kentucky"),
    "22": ("LA", "Louisiana"),
    "23": ("ME", "Maine"),
    "24": ("MD", "Maryland"),
    "25": ("MA", "Massachusetts"),
    "26": ("MI", "Michigan"),
    "27": ("MN", "Minnesota"),
    "28": ("MS", "Mississippi"),
    "29": ("MO", "Missouri"),
    "30": ("MT", "Montana"),
    "31": ("NE", "Nebraska"),
    "32": ("NV", "Nevada"),
    "33": ("NH", "New Hampshire"),
    "34": ("NJ", "New Jersey"),
    "35": ("NM", "New Mexico"),
    "36": ("NY", "New York"),
    "37": ("NC", "North Carolina"),
    "38": ("ND", "North Dakota"),
    "39": ("OH", "Ohio"),
    "40": ("OK", "Oklahoma"),
    "41": ("OR", "Oregon"),
    "42": ("PA", "Pennsylvania"),
    "44": ("RI", "Rhode Island"),
    "45": ("SC", "South Carolina"),
    "46": ("SD", "South Dakota"),
    "47": ("TN", "Tennessee"),
    "48": ("TX", "Texas"),
    "49": ("UT", "Utah"),
    "50": ("VT", "Vermont"),
    "51": ("VA", "Virginia"),
    "53": ("WA", "Washington"),
    "54": ("WV", "West Virginia"),
    "55": ("WI", "Wisconsin"),
    "56": ("WY", "Wyoming"),
    "72": ("PR", "Puerto Rico"),
}

ABBREVIATION_TO_FIPS: Final[dict[str, str]] = {
    abbr: fips for fips, (abbr, _name) in STATES.items()
}

# BLS OEWS statewide area code: 2-digit FIPS padded to 7 digits
STATE_AREA_CODES: Final[dict[str, str]] = {
    fips: f"{fips}00000" for fips in STATES
}

# ---------------------------------------------------------------------------
# BLS series
# ---------------------------------------------------------------------------
WAREHOUSE_OCCUPATION_SOC: Final[str] = "537062"  # laborers and material movers

# OEWS: OE + U + S (statewide) + area(7) + industry(6) + occupation(6) + datatype(2)
# datatype 03 = hourly mean wage
OES_WAGE_SERIES: Final[str] = "OEUS{area_code}000000{occupation}03"

# LAUS county series, measure code suffix
LAUS_COUNTY_SERIES: Final[str] = "LAUCN{state}{county}000000000{measure}"
LAUS_UNEMPLOYMENT_RATE: Final[str] = "3"
LAUS_UNEMPLOYMENT: Final[str] = "4"
LAUS_EMPLOYMENT: Final[str] = "5"

# CPI-U all items, seasonally adjusted, U.S. city average
CPI_ALL_ITEMS_SERIES: Final[str] = "CUSR0000SA0"

# ---------------------------------------------------------------------------
# Census ACS 1-year variables and vintages
# ---------------------------------------------------------------------------
ACS_TOTAL_POPULATION: Final[str] = "B01003_001E"
ACS_MEDIAN_HOUSEHOLD_INCOME: Final[str] = "B19013_001E"

# 2020 ACS 1-year standard estimates were never released
POPULATION_YEARS: Final[tuple[int, ...]] = (
    2014, 2015, 2016, 2017, 2018, 2019, 2021, 2022, 2023,
)
MEDIAN_INCOME_YEARS: Final[tuple[int, ...]] = (
    2015, 2016, 2017, 2018, 2019, 2021, 2022, 2023,
)

# ---------------------------------------------------------------------------
# Enrichment stages — fixed order; names double as EconomicsData columns
# ---------------------------------------------------------------------------
FRAGMENT_NAMES: Final[tuple[str, ...]] = (
    "warehouseWagesPerHour",
    "employmentData",
    "unemploymentData",
    "unemploymentRate",
    "consumerSpending",
    "populationTrends",
    "medianIncomeTrends",
    "incentives",
    "utilityRates",
)

# ---------------------------------------------------------------------------
# Structured documents
# ---------------------------------------------------------------------------
DOCUMENT_SECTIONS: Final[tuple[str, ...]] = (
    "supply_pipeline",
    "land_sale_comparables",
    "demographic_trends",
    "proximity_insights",
    "zoning_overlays",
)

# ---------------------------------------------------------------------------
# Record store tables
# ---------------------------------------------------------------------------
ECONOMICS_TABLE: Final[str] = "EconomicsData"
DOCUMENTS_TABLE: Final[str] = "GeminiResponse"
ADDRESSES_TABLE: Final[str] = "Address"
CREATED_AT_COLUMN: Final[str] = "createdAt"
