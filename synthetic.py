"""Deterministic stand-in responses used when the generation API is unavailable."""

from __future__ import annotations

import json
import random
from typing import Any

from models import HARDWARE

_PAPER_MARKERS: tuple[str, ...] = ("research papers", "dexterous hand")

_CANNED_HARDWARE: list[dict[str, Any]] = [
    {
        "name": "Shadow Dexterous Hand",
        "manufacturer": "Shadow Robot Company",
        "fingers": 5,
        "dofs": 24,
        "actuatedDofs": 20,
        "abduction": True,
        "flexion": True,
        "price": 150000,
    },
    {
        "name": "Allegro Hand",
        "manufacturer": "Wonik Robotics",
        "fingers": 4,
        "dofs": 16,
        "actuatedDofs": 16,
        "abduction": True,
        "flexion": True,
        "price": 35000,
    },
    {
        "name": "Barrett Hand",
        "manufacturer": "Barrett Technology",
        "fingers": 3,
        "dofs": 8,
        "actuatedDofs": 4,
        "abduction": True,
        "flexion": True,
        "price": 25000,
    },
    {
        "name": "Schunk SVH 5-Finger Hand",
        "manufacturer": "Schunk",
        "fingers": 5,
        "dofs": 9,
        "actuatedDofs": 9,
        "abduction": False,
        "flexion": True,
        "price": 45000,
    },
    {
        "name": "DLR-HIT Hand II",
        "manufacturer": "DLR/HIT",
        "fingers": 5,
        "dofs": 15,
        "actuatedDofs": 15,
        "abduction": True,
        "flexion": True,
        "price": 80000,
    },
]

_CANNED_PAPERS: list[dict[str, Any]] = [
    {
        "title": "Learning Dexterous Manipulation from Suboptimal Experts",
        "authors": ["Jiang, Y.", "Li, K.", "Gupta, A."],
        "abstract": (
            "We present a method for learning dexterous manipulation skills from "
            "suboptimal human demonstrations using reinforcement learning."
        ),
        "category": "Reinforcement Learning",
        "publishedDate": "2023-10-15",
        "url": "https://arxiv.org/abs/2310.xxxxx",
    },
    {
        "title": "VLA-Hand: Vision-Language-Action Models for Dexterous Manipulation",
        "authors": ["Chen, L.", "Wang, S.", "Zhang, M."],
        "abstract": (
            "This paper introduces a vision-language-action model specifically "
            "designed for dexterous hand manipulation tasks."
        ),
        "category": "VLAs",
        "publishedDate": "2024-03-20",
        "url": "https://arxiv.org/abs/2403.xxxxx",
    },
    {
        "title": "Imitation Learning for Complex Dexterous Manipulation",
        "authors": ["Rodriguez, A.", "Kim, J.", "Brown, T."],
        "abstract": (
            "We explore imitation learning techniques for teaching robots complex "
            "dexterous manipulation skills through expert demonstrations."
        ),
        "category": "Imitation Learning",
        "publishedDate": "2023-12-08",
        "url": "https://arxiv.org/abs/2312.xxxxx",
    },
    {
        "title": "Optimal Control Strategies for Multi-Fingered Robotic Hands",
        "authors": ["Singh, R.", "Patel, N.", "Liu, X."],
        "abstract": (
            "This work presents novel control strategies for coordinated movement "
            "of multi-fingered robotic hands in manipulation tasks."
        ),
        "category": "Control",
        "publishedDate": "2024-01-25",
        "url": "https://arxiv.org/abs/2401.xxxxx",
    },
    {
        "title": "Trajectory Optimization for Dexterous Grasping",
        "authors": ["Thompson, M.", "Davis, K.", "Wilson, J."],
        "abstract": (
            "We propose optimization techniques for generating smooth and efficient "
            "trajectories for dexterous grasping operations."
        ),
        "category": "Optimization",
        "publishedDate": "2023-11-30",
        "url": "https://arxiv.org/abs/2311.xxxxx",
    },
]


def synthesize(prompt: str, rng: random.Random | None = None) -> str:
    """Return a JSON array string for whichever domain the prompt mentions.

    Hardware is checked first because its marker also contains "dexterous hand".
    With an ``rng`` the hardware prices are jittered by up to +/-10%; the set of
    keys and records never changes. Unknown prompts yield ``"[]"``.
    """
    if HARDWARE.marker in prompt:
        items = [dict(item) for item in _CANNED_HARDWARE]
        if rng is not None:
            for item in items:
                item["price"] = int(item["price"] * rng.uniform(0.9, 1.1))
        return json.dumps(items)

    if any(marker in prompt for marker in _PAPER_MARKERS):
        return json.dumps([dict(item) for item in _CANNED_PAPERS])

    return "[]"
