# SPDX-License-Identifier: MIT
"""Pytest configuration and fixtures for Strategic Radar tests."""

import json
import os
from datetime import datetime
from typing import Generator

import pytest

# Set test environment variables before importing the app
os.environ.setdefault("RADAR_DISABLE_LOGGING", "1")
os.environ.setdefault("RADAR_STORE_BACKEND", "memory")
os.environ.setdefault("RADAR_TIMEZONE", "Europe/Paris")
os.environ.setdefault("GENERATOR_ANTHROPIC_API_KEY", "")


# Sunday 18 October 2026, 10:00 local time
FIXED_NOW = datetime(2026, 10, 18, 10, 0)


class FakeGenerator:
    """Stand-in generator returning a canned reply (or raising)."""

    def __init__(self, reply: str = "", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed reference instant for date-dependent logic."""
    return FIXED_NOW


@pytest.fixture
def sample_items() -> list[dict]:
    """Raw items as the generator writes them."""
    return [
        {
            "category": "FRANCE_ADMIN",
            "criticality": "HIGH",
            "headline": "Pitch Night!!",
            "date": "24 oct, 22h-02h",
            "impact_analysis": "Rencontre directe avec des investisseurs.",
            "suggested_action": "S'inscrire avant mercredi.",
            "description": "Soirée de pitchs étudiants.",
            "source": "Station F",
            "location": "Station F, Paris",
            "url": "https://example.org/pitch-night",
            "price": "Gratuit",
            "tags": ["startup", "pitch"],
        },
        {
            "category": "TECH_INNOVATION",
            "criticality": "MEDIUM",
            "headline": "Sortie de l'app Nova",
            "date": "15 nov",
            "impact_analysis": "Nouvel outil de prise de notes.",
            "suggested_action": "Tester la bêta.",
            "source": "TechCrunch",
            "url": "https://example.org/nova",
            "tags": "apps, productivité",
        },
        {
            "category": "WORLD_MACRO",
            "criticality": "LOW",
            "headline": "Sommet du G20",
            "date": "réunion à 14h",
            "impact_analysis": "Signal sur les taux.",
            "suggested_action": "Suivre le communiqué.",
            "source": "Reuters",
            "url": "https://example.org/g20",
        },
    ]


@pytest.fixture
def sample_records(sample_items):
    """Validated records built from sample_items."""
    from radar.models import Record

    return [Record.model_validate(item) for item in sample_items]


@pytest.fixture
def make_session():
    """Factory building a Session with a given id and records."""
    from radar.models import Session

    def _make(session_id: int, records, label: str = "dimanche 18 octobre 2026 à 10:00"):
        return Session(id=session_id, date_str=label, items=list(records))

    return _make


@pytest.fixture
def memory_store():
    """Session store over a fresh in-memory backend."""
    from radar.store import MemoryKeyValueStore, SessionStore

    return SessionStore(MemoryKeyValueStore())


@pytest.fixture
def generator_reply(sample_items) -> str:
    """Generator reply wrapping the sample items in a fenced JSON block."""
    return "Voici la veille du jour :\n```json\n" + json.dumps(sample_items, ensure_ascii=False) + "\n```\n"


@pytest.fixture
def fake_generator(generator_reply) -> FakeGenerator:
    """Generator that answers with the sample items."""
    return FakeGenerator(reply=generator_reply)


@pytest.fixture
def test_client(memory_store, fake_generator) -> Generator:
    """Create a test client for the FastAPI application."""
    from fastapi.testclient import TestClient

    from api.main import app
    from api.routes.radar import get_generator, get_store

    app.dependency_overrides[get_store] = lambda: memory_store
    app.dependency_overrides[get_generator] = lambda: fake_generator

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def make_generator():
    """Factory for fake generators with a custom reply or error."""
    return FakeGenerator
