"""
siteintel_shared — shared configuration, errors and models for siteintel.

Usage:
    from siteintel_shared.config import settings
    from siteintel_shared.db import get_supabase_client
    from siteintel_shared.errors import UpstreamFailure, NoDataFound
    from siteintel_shared.models import Address, GeoIdentifiers, AggregateRecord
    from siteintel_shared.constants import STATE_AREA_CODES, FRAGMENT_NAMES
"""

__version__ = "0.1.0"
