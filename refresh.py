"""Refresh cycle: discover, normalize, dedupe, merge and persist every domain."""

from __future__ import annotations

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from config import Settings
from dedup import dedupe, identity_key
from errors import PersistenceError
from json_store import JsonStore
from merge import merge_records
from model_client import ModelClient
from models import DOMAINS, HARDWARE, PAPERS, CycleReport, Domain, DomainResult, Record
from normalizer import normalize_batch, utc_now_iso
from sources import (
    ArxivSource,
    IEEESource,
    ModelDiscoverySource,
    RoboticsNewsSource,
    ScholarHardwareSource,
    SourceAdapter,
    VendorCatalogSource,
    gather,
)

LOGGER = logging.getLogger(__name__)

RECENT_WINDOW = timedelta(hours=24)

_DEFAULT_QUERIES: dict[str, str] = {
    HARDWARE.name: "dexterous robotic hand hardware",
    PAPERS.name: "dexterous hand manipulation",
}


@dataclass(slots=True)
class DomainPipeline:
    domain: Domain
    adapters: list[SourceAdapter] = field(default_factory=list)
    query: str = ""


class RefreshOrchestrator:
    """Runs discovery cycles over injected pipelines and a shared store.

    Startup, the interval scheduler and on-demand requests all call
    ``run_cycle``; the trigger name only shows up in logs and the report.
    """

    def __init__(self, store: JsonStore, pipelines: list[DomainPipeline]) -> None:
        self.store = store
        self.pipelines = pipelines

    def on_startup(self) -> CycleReport:
        for pipeline in self.pipelines:
            try:
                self.store.ensure(pipeline.domain)
            except PersistenceError as exc:
                LOGGER.error("Could not initialize %s collection: %s", pipeline.domain.name, exc)
        return self.run_cycle(trigger="startup")

    def run_cycle(self, trigger: str = "manual") -> CycleReport:
        """Run one discovery cycle. Never raises; failures are reported per domain."""
        LOGGER.info("Starting refresh cycle (trigger=%s)", trigger)
        report = CycleReport(trigger=trigger)
        if not self.pipelines:
            return report

        with ThreadPoolExecutor(max_workers=len(self.pipelines)) as executor:
            futures = [executor.submit(self.run_domain, p) for p in self.pipelines]
            for pipeline, future in zip(self.pipelines, futures):
                report.results[pipeline.domain.name] = future.result()

        for result in report.results.values():
            LOGGER.info(
                "Refresh %s: discovered=%s new=%s updated=%s total=%s recent_24h=%s written=%s",
                result.domain,
                result.discovered,
                result.new,
                result.updated,
                result.total,
                result.recent,
                result.written,
            )
        LOGGER.info("Refresh cycle complete (trigger=%s ok=%s)", trigger, report.ok)
        return report

    def run_domain(self, pipeline: DomainPipeline) -> DomainResult:
        domain = pipeline.domain
        result = DomainResult(domain=domain.name)

        batch = self.discover(pipeline)
        result.discovered = len(batch)

        try:
            with self.store.lock(domain):
                current = self.store.read(domain)
                known = {identity_key(r.get(domain.key_field)) for r in current}
                batch_keys = {identity_key(r.get(domain.key_field)) for r in batch}
                result.updated = len(batch_keys & known)
                result.new = len(batch_keys - known)

                merged = merge_records(current, batch, domain.key_field)
                self.store.write(domain, merged)
        except Exception as exc:  # keep the cycle alive; the old snapshot stays on disk
            LOGGER.exception("Persisting %s failed: %s", domain.name, exc)
            result.error = str(exc)
            return result

        result.written = True
        result.total = len(merged)
        result.recent = count_recent(merged)
        return result

    def discover(self, pipeline: DomainPipeline) -> list[Record]:
        """Gather, normalize and dedupe one domain's batch; failure yields ``[]``."""
        domain = pipeline.domain
        try:
            raw = gather(pipeline.adapters, pipeline.query)
            normalized = normalize_batch(raw, domain.key_field, now=utc_now_iso())
            return dedupe(normalized, domain.key_field)
        except Exception as exc:  # degrade to an empty batch, never wipe state
            LOGGER.exception("Discovery for %s failed: %s", domain.name, exc)
            return []


def count_recent(records: list[Record], window: timedelta = RECENT_WINDOW) -> int:
    """Count records whose ``lastUpdated`` falls within ``window`` of now."""
    cutoff = datetime.now(UTC) - window
    count = 0
    for record in records:
        stamp = _parse_timestamp(record.get("lastUpdated"))
        if stamp is not None and stamp > cutoff:
            count += 1
    return count


def _parse_timestamp(raw: object) -> datetime | None:
    if not isinstance(raw, str) or not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed


def build_pipelines(
    client: ModelClient,
    seed: int | None = None,
    master: random.Random | None = None,
) -> list[DomainPipeline]:
    """Default source wiring; ``seed`` makes every simulated scan reproducible.

    Pass ``master`` instead of ``seed`` to draw the per-source streams from a
    generator the caller also uses elsewhere.
    """
    if master is None:
        master = random.Random(seed)

    def rng() -> random.Random:
        return random.Random(master.getrandbits(64))

    adapters: dict[str, list[SourceAdapter]] = {
        HARDWARE.name: [
            ModelDiscoverySource(HARDWARE, client),
            RoboticsNewsSource(rng()),
            VendorCatalogSource(rng()),
            ScholarHardwareSource(rng()),
        ],
        PAPERS.name: [
            ModelDiscoverySource(PAPERS, client),
            ArxivSource(rng()),
            IEEESource(rng()),
        ],
    }
    return [
        DomainPipeline(domain=d, adapters=adapters[d.name], query=_DEFAULT_QUERIES[d.name])
        for d in DOMAINS
    ]


def build_orchestrator(settings: Settings, client: ModelClient | None = None) -> RefreshOrchestrator:
    store = JsonStore(settings.data_dir)
    master = random.Random(settings.seed)
    if client is None:
        # Jitter stream is drawn from the master, never from the raw seed.
        client_rng = random.Random(master.getrandbits(64)) if settings.seed is not None else None
        client = ModelClient(rng=client_rng)
    return RefreshOrchestrator(store, build_pipelines(client, master=master))
