"""
pipelines/enrichment.py — address → economic profile enrichment pipeline.

Orchestrates:
  1. CensusGeocoder → GeoIdentifiers (state FIPS, county FIPS, GEOID, area code)
  2. Nine indicator stages, strictly in this order:
       warehouseWagesPerHour → employmentData → unemploymentData →
       unemploymentRate → consumerSpending → populationTrends →
       medianIncomeTrends → incentives → utilityRates
  3. Merge every fragment into one AggregateRecord
  4. Append the record to EconomicsData (exactly once)

Run lifecycle:
  IDLE → RESOLVING → FETCHING (stage 1..9) → COMMITTING → DONE
  Any failure moves the run to FAILED, skips every remaining stage and
  discards the partial record; nothing is persisted.

Each run owns a fresh RunContext and PipelineAccumulator. Stages run one
after another; each awaits its provider before the next one starts.

Usage:
    from siteintel_pipeline.pipelines.enrichment import run
    record = await run(Address(streetNumber="123", streetName="Main St",
                               city="Springfield", state="IL", zipCode="62701"))
    record.fragments["unemploymentRate"]["series"][0]
"""

from __future__ import annotations

import enum
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field

from siteintel_shared.config import Settings, settings as default_settings
from siteintel_shared.errors import AddressIncomplete, SiteIntelError
from siteintel_shared.models import (
    Address,
    AggregateRecord,
    GeoIdentifiers,
    IndicatorFragment,
)
from siteintel_pipeline.loaders.record_store import RecordStore
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
from siteintel_pipeline.sources.utility_rates import UtilityRateSource
from siteintel_pipeline.utils.logging import configure_logging, get_logger

log = get_logger(__name__, pipeline="enrichment")


class DuplicateFragmentError(ValueError):
    """A second fragment was added under a name already present."""


class RunState(str, enum.Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    FETCHING = "fetching"
    COMMITTING = "committing"
    DONE = "done"
    FAILED = "failed"


TERMINAL_STATES = frozenset({RunState.DONE, RunState.FAILED})


# ---------------------------------------------------------------------------
# Accumulator
# ---------------------------------------------------------------------------


class PipelineAccumulator:
    """
    In-progress AggregateRecord for exactly one run.

    Fragments are only ever added. Adding a name twice raises
    DuplicateFragmentError while assertions are enabled (the default); under
    ``python -O`` the later fragment replaces the earlier one.
    """

    def __init__(self) -> None:
        self._address: Address | None = None
        self._geo: GeoIdentifiers | None = None
        self._fragments: dict[str, IndicatorFragment] = {}

    def set_address(self, address: Address, geo: GeoIdentifiers) -> None:
        self._address = address
        self._geo = geo

    def add_fragment(self, name: str, fragment: IndicatorFragment) -> None:
        if __debug__ and name in self._fragments:
            raise DuplicateFragmentError(f"fragment {name!r} already added")
        self._fragments[name] = fragment

    @property
    def fragment_names(self) -> list[str]:
        return list(self._fragments)

    def snapshot(self) -> AggregateRecord:
        """Freeze the accumulated state into an AggregateRecord."""
        if self._address is None or self._geo is None:
            raise AddressIncomplete("Address information is incomplete")
        return AggregateRecord(
            address=self._address,
            geography=self._geo,
            fragments={
                name: fragment.model_dump(by_alias=True, mode="json")
                for name, fragment in self._fragments.items()
            },
        )


# ---------------------------------------------------------------------------
# Run context
# ---------------------------------------------------------------------------


@dataclass
class RunContext:
    """Per-run state: lifecycle, current stage, accumulator and outcome."""

    run_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    state: RunState = RunState.IDLE
    stage: str | None = None
    stage_index: int = 0
    accumulator: PipelineAccumulator = field(default_factory=PipelineAccumulator)
    error: BaseException | None = None
    history: list[tuple[RunState, str | None]] = field(default_factory=list)

    def transition(self, state: RunState, stage: str | None = None) -> None:
        if self.state in TERMINAL_STATES:
            raise RuntimeError(f"run {self.run_id} already {self.state.value}")
        self.state = state
        self.stage = stage
        self.history.append((state, stage))

    def fail(self, exc: BaseException) -> None:
        self.error = exc
        self.transition(RunState.FAILED, self.stage)
        # The partial record is never returned or persisted
        self.accumulator = PipelineAccumulator()


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


def build_sources(settings: Settings | None = None) -> list[BaseSource]:
    """The nine indicator stages in pipeline order."""
    cfg = settings or default_settings
    return [
        WageSource(cfg),
        EmploymentSource(cfg),
        UnemploymentCountSource(cfg),
        UnemploymentRateSource(cfg),
        ConsumerSpendingSource(cfg),
        PopulationTrendSource(cfg),
        MedianIncomeSource(cfg),
        TaxIncentiveSource(cfg),
        UtilityRateSource(cfg),
    ]


class EnrichmentPipeline:
    """Resolves an address, runs every stage in order, commits once."""

    def __init__(
        self,
        resolver: CensusGeocoder,
        sources: Sequence[BaseSource],
        store: RecordStore,
    ) -> None:
        names = [source.fragment_name for source in sources]
        if len(set(names)) != len(names):
            raise ValueError(f"duplicate fragment names in stage list: {names}")
        self.resolver = resolver
        self.sources = list(sources)
        self.store = store

    @classmethod
    def default(
        cls,
        store: RecordStore,
        settings: Settings | None = None,
    ) -> "EnrichmentPipeline":
        return cls(CensusGeocoder(settings), build_sources(settings), store)

    @property
    def stage_names(self) -> list[str]:
        return [source.fragment_name for source in self.sources]

    async def run(
        self,
        address: Address,
        *,
        context: RunContext | None = None,
    ) -> AggregateRecord:
        """
        Enrich one address and persist the merged record.

        Args:
            address: The address to enrich.
            context: Optional caller-owned RunContext to observe the run.

        Returns:
            The AggregateRecord as stored.

        Raises:
            SiteIntelError: the first stage failure, with ``stage`` set.
        """
        ctx = context or RunContext()
        run_log = log.bind(run_id=ctx.run_id)
        run_log.info("enrichment_start", stages=len(self.sources))

        try:
            ctx.transition(RunState.RESOLVING, "geocode")
            geo = await self.resolver.resolve(address)
            ctx.accumulator.set_address(address, geo)
            run_log = run_log.bind(county_geoid=geo.full_county_geoid)

            for index, source in enumerate(self.sources, start=1):
                ctx.transition(RunState.FETCHING, source.fragment_name)
                ctx.stage_index = index
                run_log.debug("stage_start", stage=source.fragment_name, index=index)
                fragment = await source.run(geo)
                ctx.accumulator.add_fragment(source.fragment_name, fragment)

            ctx.transition(RunState.COMMITTING, "commit")
            record = ctx.accumulator.snapshot()
            stored = await self.store.append(record)
        except SiteIntelError as exc:
            if exc.stage is None:
                exc.stage = ctx.stage
            run_log.warning(
                "stage_failed",
                stage=ctx.stage,
                stage_index=ctx.stage_index,
                error_code=exc.error_code,
                error=exc.message,
            )
            ctx.fail(exc)
            raise
        except Exception as exc:
            run_log.error("enrichment_crashed", stage=ctx.stage, error=str(exc), exc_info=True)
            ctx.fail(exc)
            raise

        ctx.transition(RunState.DONE)
        run_log.info("enrichment_complete", record_id=stored.id, fragments=len(stored.fragments))
        return stored

    async def latest(self) -> AggregateRecord | None:
        """Most recently committed record, or None."""
        return await self.store.most_recent()


async def run(
    address: Address,
    *,
    store: RecordStore | None = None,
    settings: Settings | None = None,
) -> AggregateRecord:
    """Run the enrichment pipeline end-to-end with default stages."""
    configure_logging()
    pipeline = EnrichmentPipeline.default(store or RecordStore(), settings)
    return await pipeline.run(address)
