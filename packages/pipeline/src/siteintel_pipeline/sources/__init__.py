"""
siteintel_pipeline.sources — external provider adapters.

Geography:
  CensusGeocoder          — address → state/county FIPS (Census Geocoder)
  NYCGeoclient            — NYC address → Geoclient record

Enrichment stages (BaseSource subclasses, in pipeline order):
  WageSource              — BLS OEWS hourly wage
  EmploymentSource        — BLS LAUS employment
  UnemploymentCountSource — BLS LAUS unemployment
  UnemploymentRateSource  — BLS LAUS unemployment rate
  ConsumerSpendingSource  — BLS CPI-U all items
  PopulationTrendSource   — Census ACS total population by year
  MedianIncomeSource      — Census ACS median household income by year
  TaxIncentiveSource      — OpenAI web search over irs.gov
  UtilityRateSource       — static utility rates dataset

Other:
  OpenRouteServiceClient  — travel-time matrix
  TomTomClient            — single route
  Assistant               — free-form JSON prompt
"""

from siteintel_pipeline.sources.assistant import Assistant
from siteintel_pipeline.sources.base import BaseSource
from siteintel_pipeline.sources.bls import (
    ConsumerSpendingSource,
    EmploymentSource,
    UnemploymentCountSource,
    UnemploymentRateSource,
    WageSource,
)
from siteintel_pipeline.sources.census_acs import MedianIncomeSource, PopulationTrendSource
from siteintel_pipeline.sources.census_geocoder import CensusGeocoder
from siteintel_pipeline.sources.incentives import TaxIncentiveSource
from siteintel_pipeline.sources.nyc_geoclient import NYCGeoclient
from siteintel_pipeline.sources.routing import OpenRouteServiceClient, TomTomClient
from siteintel_pipeline.sources.utility_rates import UtilityRateSource

__all__ = [
    "BaseSource",
    "CensusGeocoder",
    "NYCGeoclient",
    "WageSource",
    "EmploymentSource",
    "UnemploymentCountSource",
    "UnemploymentRateSource",
    "ConsumerSpendingSource",
    "PopulationTrendSource",
    "MedianIncomeSource",
    "TaxIncentiveSource",
    "UtilityRateSource",
    "OpenRouteServiceClient",
    "TomTomClient",
    "Assistant",
]
