"""Discovery sources: model-backed discovery plus simulated auxiliary scans.

Every source exposes ``name`` and ``discover(query) -> list[Record]``. Sources
return partial records (whatever fields they found); identity and freshness are
stamped later by the normalizer. The simulated scans stand in for real site
scraping: each decides per entry, via its injectable ``random.Random``, whether
it "found" something.
"""

from __future__ import annotations

import json
import logging
import random
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from json import JSONDecodeError
from typing import Any, Protocol, runtime_checkable

from model_client import ModelClient
from models import Domain, Record
from prompts import build_prompt

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class SourceAdapter(Protocol):
    """Protocol for discovery sources."""

    name: str

    def discover(self, query: str) -> list[Record]:
        ...


def parse_or_empty(content: str | None) -> list[Record]:
    """Parse model output into a list of objects; anything unusable becomes ``[]``."""
    if not content:
        return []
    try:
        parsed: Any = json.loads(content)
    except JSONDecodeError:
        parsed = _extract_first_json_array(content)

    if not isinstance(parsed, list):
        if parsed is not None:
            LOGGER.warning("Model output was %s, not a JSON array; ignoring", type(parsed).__name__)
        return []
    return [item for item in parsed if isinstance(item, dict)]


def _extract_first_json_array(content: str) -> list[Any] | None:
    """Extract the first decodable JSON array from an arbitrary string."""
    decoder = json.JSONDecoder()
    for index, char in enumerate(content):
        if char != "[":
            continue
        try:
            candidate, _ = decoder.raw_decode(content[index:])
        except JSONDecodeError:
            continue
        if isinstance(candidate, list):
            return candidate
    LOGGER.warning("Could not extract a JSON array from model output")
    return None


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class ModelDiscoverySource:
    """Asks the generation API for a JSON array of records for one domain."""

    def __init__(self, domain: Domain, client: ModelClient) -> None:
        self.domain = domain
        self.client = client
        self.name = f"model:{domain.name}"

    def discover(self, query: str) -> list[Record]:
        prompt = build_prompt(self.domain, query)
        records = parse_or_empty(self.client.generate(prompt))
        LOGGER.info("%s: model returned %s candidate records", self.name, len(records))
        return records


class SimulatedSource:
    """Base for randomness-gated scans over a fixed list of entries."""

    name = "simulated"
    threshold = 0.5
    entries: tuple[Any, ...] = ()

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()

    def discover(self, query: str) -> list[Record]:
        results: list[Record] = []
        for entry in self.entries:
            try:
                results.extend(self.probe(entry, query))
            except Exception as exc:  # one broken entry must not sink the scan
                LOGGER.warning("%s: could not scan %s: %s", self.name, entry, exc)
        LOGGER.info("%s: found %s candidate records for %r", self.name, len(results), query)
        return results

    def hit(self) -> bool:
        return self.rng.random() > self.threshold

    def probe(self, entry: Any, query: str) -> list[Record]:
        raise NotImplementedError


# --- hardware scans ---


class RoboticsNewsSource(SimulatedSource):
    """Scans robotics news sites for hand announcements."""

    name = "robotics_news"
    threshold = 0.7
    entries = (
        ("The Robot Report", "https://www.therobotreport.com"),
        ("IEEE Spectrum Robotics", "https://robotics.ieee.org"),
        ("Robotics Business Review", "https://www.roboticsbusinessreview.com"),
    )

    def probe(self, entry: tuple[str, str], query: str) -> list[Record]:
        label, site = entry
        LOGGER.debug("%s: scanning %s for %r", self.name, site, query)
        if not self.hit():
            return []
        return [
            {
                "name": f"{label} Featured Dexterous Hand",
                "description": "Advanced robotic hand with enhanced capabilities",
                "url": f"{site}/dexterous-hand-news",
                "source": site,
                "foundAt": _now_iso(),
            }
        ]


class VendorCatalogSource(SimulatedSource):
    """Checks manufacturer sites for new products with randomized specs."""

    name = "vendor_catalog"
    threshold = 0.8
    entries = (
        ("Shadow Robot Company", "https://www.shadowrobot.com"),
        ("Wonik Robotics", "https://www.wonikrobotics.com"),
        ("Barrett Technology", "https://barrett.com"),
        ("Schunk", "https://schunk.com"),
        ("Robotiq", "https://robotiq.com"),
    )

    def probe(self, entry: tuple[str, str], query: str) -> list[Record]:
        manufacturer, site = entry
        if not self.hit():
            return []
        return [
            {
                "name": f"{manufacturer} Enhanced Hand",
                "manufacturer": manufacturer,
                "fingers": 4 + self.rng.randrange(2),
                "dofs": 12 + self.rng.randrange(12),
                "actuatedDofs": 8 + self.rng.randrange(8),
                "price": 20000 + self.rng.randrange(80000),
                "source": site,
                "foundAt": _now_iso(),
            }
        ]


class ScholarHardwareSource(SimulatedSource):
    """Looks for hardware described in research publications."""

    name = "scholar_hardware"
    threshold = 0.6
    entries = ("https://scholar.google.com",)

    def probe(self, entry: str, query: str) -> list[Record]:
        if not self.hit():
            return []
        return [
            {
                "name": "Novel Dexterous Manipulator Design",
                "type": "research_hardware",
                "authors": ["Researcher A", "Researcher B"],
                "abstract": "This paper presents a new dexterous hand design with improved capabilities.",
                "fingers": 5,
                "dofs": 20,
                "actuatedDofs": 15,
                "features": ["force feedback", "tactile sensing"],
                "source": entry,
                "foundAt": _now_iso(),
            }
        ]


# --- paper scans ---

PAPER_CATEGORIES: tuple[str, ...] = (
    "Reinforcement Learning",
    "Imitation Learning",
    "VLAs",
    "Control",
    "Optimization",
)

_TITLES: dict[str, tuple[str, ...]] = {
    "Reinforcement Learning": (
        "Deep Reinforcement Learning for Dexterous Hand Manipulation",
        "Policy Gradient Methods for Robotic Hand Control",
        "Multi-Agent RL for Coordinated Finger Movement",
        "Sample-Efficient Learning for Dexterous Grasping",
    ),
    "Imitation Learning": (
        "Learning from Demonstration for Dexterous Manipulation",
        "Behavioral Cloning for Multi-Finger Robot Hands",
        "Expert Demonstration Analysis in Hand Manipulation",
        "One-Shot Imitation for Dexterous Tasks",
    ),
    "VLAs": (
        "Vision-Language-Action Models for Hand Manipulation",
        "Multimodal Learning for Dexterous Robot Control",
        "Language-Guided Manipulation with Robotic Hands",
        "VLA-Based Dexterous Manipulation Planning",
    ),
    "Control": (
        "Optimal Control for Multi-Fingered Robotic Hands",
        "Adaptive Control Strategies for Dexterous Manipulation",
        "Force Control in Dexterous Grasping Systems",
        "Real-Time Control of Anthropomorphic Hands",
    ),
    "Optimization": (
        "Trajectory Optimization for Dexterous Grasping",
        "Motion Planning for Multi-Finger Manipulation",
        "Optimization-Based Grasp Synthesis",
        "Energy-Efficient Control of Robotic Hands",
    ),
}

_ABSTRACTS: dict[str, str] = {
    "Reinforcement Learning": (
        "We present a novel reinforcement learning approach for dexterous hand manipulation "
        "tasks with improved sample efficiency and task success rates."
    ),
    "Imitation Learning": (
        "This work explores imitation learning techniques for teaching robots complex dexterous "
        "manipulation skills from limited demonstration data."
    ),
    "VLAs": (
        "We introduce a vision-language-action model that integrates visual perception, natural "
        "language understanding and motor control for dexterous manipulation."
    ),
    "Control": (
        "This paper presents control strategies for coordinated movement of multi-fingered "
        "robotic hands, addressing high-dimensional control and contact dynamics."
    ),
    "Optimization": (
        "We propose optimization techniques for smooth and efficient dexterous grasping "
        "trajectories under kinematic and dynamic stability constraints."
    ),
}

_FIRST_NAMES = ("Alex", "Jordan", "Sam", "Riley", "Casey", "Taylor", "Morgan", "Jamie")
_LAST_NAMES = ("Chen", "Smith", "Johnson", "Williams", "Brown", "Davis", "Miller", "Wilson")


class ArxivSource(SimulatedSource):
    """Simulated arXiv search returning one to three papers per search term."""

    name = "arxiv"
    entries = (
        "dexterous hand manipulation",
        "robotic hand grasping",
        "dexterous manipulation learning",
        "multi-finger robot control",
        "hand-object manipulation",
    )

    def probe(self, entry: str, query: str) -> list[Record]:
        return [self._paper(entry) for _ in range(self.rng.randint(1, 3))]

    def _paper(self, search_term: str) -> Record:
        rng = self.rng
        category = rng.choice(PAPER_CATEGORIES)
        year = rng.choice((2023, 2024))
        month = rng.randint(1, 12)
        day = rng.randint(1, 28)
        authors = [
            f"{rng.choice(_FIRST_NAMES)} {rng.choice(_LAST_NAMES)}"
            for _ in range(rng.randint(1, 4))
        ]
        return {
            "title": rng.choice(_TITLES[category]),
            "authors": authors,
            "abstract": _ABSTRACTS[category],
            "category": category,
            "publishedDate": f"{year}-{month:02d}-{day:02d}",
            "url": f"https://arxiv.org/abs/{year % 100:02d}{month:02d}.{rng.randrange(100000):05d}",
            "source": "ArXiv",
            "searchTerm": search_term,
            "foundAt": _now_iso(),
        }


class IEEESource(SimulatedSource):
    """Simulated IEEE Xplore search for conference review papers."""

    name = "ieee_xplore"
    threshold = 0.5
    entries = ("IEEE International Conference on Robotics and Automation (ICRA)",)

    def probe(self, entry: str, query: str) -> list[Record]:
        if not self.hit():
            return []
        return [
            {
                "title": "Advanced Dexterous Manipulation Systems: A Comprehensive Review",
                "authors": ["Dr. Research Lead", "Prof. Academic"],
                "abstract": (
                    "This comprehensive review examines the current state of dexterous manipulation "
                    "systems, covering hardware advances, control algorithms, and future directions."
                ),
                "category": "Control",
                "publishedDate": "2024-01-15",
                "url": f"https://ieeexplore.ieee.org/document/{self.rng.randrange(10000000)}",
                "source": "IEEE Xplore",
                "conference": entry,
                "foundAt": _now_iso(),
            }
        ]


def gather(adapters: list[SourceAdapter], query: str) -> list[Record]:
    """Run adapters concurrently and concatenate the results of those that succeed.

    Results keep adapter order. A raising adapter is logged and contributes nothing.
    """
    if not adapters:
        return []

    with ThreadPoolExecutor(max_workers=len(adapters)) as executor:
        futures = [(adapter, executor.submit(adapter.discover, query)) for adapter in adapters]

        batch: list[Record] = []
        for adapter, future in futures:
            try:
                batch.extend(future.result())
            except Exception as exc:  # isolate per-adapter failures
                LOGGER.warning("Source %s failed: %s", getattr(adapter, "name", adapter), exc)
    return batch
