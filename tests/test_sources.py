from __future__ import annotations

import json
import random
from unittest.mock import MagicMock, patch

import pytest

from model_client import ModelClient
from models import HARDWARE, PAPERS
from sources import (
    ArxivSource,
    IEEESource,
    ModelDiscoverySource,
    RoboticsNewsSource,
    ScholarHardwareSource,
    SourceAdapter,
    VendorCatalogSource,
    gather,
    parse_or_empty,
)
from synthetic import synthesize


class _StaticSource:
    def __init__(self, name: str, records: list[dict]) -> None:
        self.name = name
        self.records = records

    def discover(self, query: str) -> list[dict]:
        return list(self.records)


class _FailingSource:
    name = "failing"

    def discover(self, query: str) -> list[dict]:
        raise RuntimeError("site down")


def _without_timestamps(records: list[dict]) -> list[dict]:
    return [{k: v for k, v in r.items() if k != "foundAt"} for r in records]


# ---------------------------------------------------------------------------
# parse_or_empty
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("content", [None, "", "not json at all", '{"name": "X"}', "42", '"text"', "[1, 2"])
def test_parse_or_empty_rejects_unusable_output(content: str | None) -> None:
    assert parse_or_empty(content) == []


def test_parse_or_empty_reads_plain_array() -> None:
    assert parse_or_empty('[{"name": "A"}, {"name": "B"}]') == [{"name": "A"}, {"name": "B"}]


def test_parse_or_empty_extracts_array_from_prose() -> None:
    content = 'Here are the hands:\n```json\n[{"name": "A"}]\n```\nHope this helps!'

    assert parse_or_empty(content) == [{"name": "A"}]


def test_parse_or_empty_drops_non_object_items() -> None:
    assert parse_or_empty('[{"name": "A"}, "B", 3, null]') == [{"name": "A"}]


# ---------------------------------------------------------------------------
# Model-backed discovery
# ---------------------------------------------------------------------------

def test_model_source_parses_client_output() -> None:
    client = MagicMock()
    client.generate.return_value = '[{"name": "Ability Hand", "price": 10000}]'

    records = ModelDiscoverySource(HARDWARE, client).discover("dexterous hands")

    assert records == [{"name": "Ability Hand", "price": 10000}]
    prompt = client.generate.call_args.args[0]
    assert HARDWARE.marker in prompt
    assert "Search focus: dexterous hands" in prompt


def test_model_source_malformed_output_is_empty() -> None:
    client = MagicMock()
    client.generate.return_value = "Sorry, I cannot help with that."

    assert ModelDiscoverySource(PAPERS, client).discover("q") == []


def test_fallback_discovery_is_non_empty_and_schema_stable_without_credential() -> None:
    with patch.dict("os.environ", {}, clear=True):
        source = ModelDiscoverySource(HARDWARE, ModelClient(provider="qwen", rng=random.Random()))
        first = source.discover("dexterous hands")
        second = source.discover("dexterous hands")

    assert first and second
    assert [sorted(r) for r in first] == [sorted(r) for r in second]
    assert [r["name"] for r in first] == [r["name"] for r in second]


def test_paper_fallback_prompt_yields_papers() -> None:
    with patch.dict("os.environ", {}, clear=True):
        records = ModelDiscoverySource(PAPERS, ModelClient(provider="qwen")).discover("")

    assert len(records) == 5
    assert all("title" in r for r in records)


# ---------------------------------------------------------------------------
# Simulated sources
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("source_cls", [
    RoboticsNewsSource,
    VendorCatalogSource,
    ScholarHardwareSource,
    ArxivSource,
    IEEESource,
])
def test_simulated_sources_are_reproducible_with_seed(source_cls: type) -> None:
    runs = [_without_timestamps(source_cls(random.Random(11)).discover("q")) for _ in range(2)]

    assert runs[0] == runs[1]
    assert isinstance(source_cls(), SourceAdapter)


def test_hardware_scans_emit_name_key() -> None:
    for source_cls in (RoboticsNewsSource, VendorCatalogSource, ScholarHardwareSource):
        source = source_cls(random.Random(0))
        source.threshold = -1.0  # always hit
        records = source.discover("q")
        assert records
        assert all(isinstance(r["name"], str) and r["name"] for r in records)


def test_vendor_catalog_specs_are_in_range() -> None:
    source = VendorCatalogSource(random.Random(5))
    source.threshold = -1.0

    records = source.discover("q")

    assert len(records) == len(VendorCatalogSource.entries)
    for record in records:
        assert record["fingers"] in (4, 5)
        assert 12 <= record["dofs"] < 24
        assert 8 <= record["actuatedDofs"] < 16
        assert 20000 <= record["price"] < 100000


def test_arxiv_source_returns_one_to_three_papers_per_term() -> None:
    records = ArxivSource(random.Random(2)).discover("q")

    terms = [r["searchTerm"] for r in records]
    for term in ArxivSource.entries:
        assert 1 <= terms.count(term) <= 3
    assert all(r["publishedDate"][:4] in ("2023", "2024") for r in records)


def test_gate_never_hit_returns_nothing() -> None:
    source = IEEESource(random.Random(1))
    source.threshold = 1.0

    assert source.discover("q") == []


def test_one_failing_entry_does_not_abort_scan() -> None:
    class FlakyVendors(VendorCatalogSource):
        def probe(self, entry, query):
            if entry[0] == "Barrett Technology":
                raise ConnectionError("timeout")
            return super().probe(entry, query)

    source = FlakyVendors(random.Random(0))
    source.threshold = -1.0

    records = source.discover("q")

    assert len(records) == len(VendorCatalogSource.entries) - 1
    assert "Barrett Technology" not in {r["manufacturer"] for r in records}


# ---------------------------------------------------------------------------
# gather
# ---------------------------------------------------------------------------

def test_gather_tolerates_one_failing_adapter_of_three() -> None:
    first = _StaticSource("first", [{"name": "A"}, {"name": "B"}])
    third = _StaticSource("third", [{"name": "C"}])

    batch = gather([first, _FailingSource(), third], "q")

    assert batch == [{"name": "A"}, {"name": "B"}, {"name": "C"}]


def test_gather_all_failing_is_empty() -> None:
    assert gather([_FailingSource(), _FailingSource()], "q") == []


def test_gather_no_adapters() -> None:
    assert gather([], "q") == []


def test_gather_with_model_source_and_synthetic_fallback() -> None:
    with patch.dict("os.environ", {}, clear=True):
        model = ModelDiscoverySource(PAPERS, ModelClient(provider="qwen"))
        batch = gather([model, _FailingSource()], "q")

    expected = [p["title"] for p in json.loads(synthesize("research papers"))]
    assert [r["title"] for r in batch] == expected
