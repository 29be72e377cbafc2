"""
sources/utility_rates.py — static utility rate and premium reference data.

Reads the JSON dataset at settings.utility_rates_path (relative paths are
resolved from the working directory). No network call is made; the
configured path plays the role of the credential for this stage.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from siteintel_shared.errors import NoDataFound, ParseError
from siteintel_shared.models import GeoIdentifiers, UtilityRateFragment
from siteintel_pipeline.sources.base import BaseSource


class UtilityRateSource(BaseSource):
    name = "UtilityRates"
    fragment_name = "utilityRates"
    credential_setting = "utility_rates_path"
    requires_geography = False

    @property
    def path(self) -> Path:
        return Path(self.settings.utility_rates_path)

    async def fetch(self, geo: GeoIdentifiers | None) -> UtilityRateFragment:
        path = self.path
        if not path.is_file():
            raise NoDataFound(
                "Utility rates document not found",
                details={"path": str(path)},
            )
        try:
            rates = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
            raise ParseError(
                "Failed to load utility rate data",
                details={"path": str(path), "error": str(exc)},
            ) from exc
        return UtilityRateFragment(source=path.name, rates=rates)

    def get_metadata(self) -> dict[str, Any]:
        return {
            "source_name": self.name,
            "path": str(self.path),
            "description": "Static utility rates and premiums reference dataset",
        }
