"""
Shared pytest fixtures and configuration for spa-spine tests.

This module provides:
- A sample two-site content tree (``site_definition``) and its in-memory store
- Services, settings and pipeline fixtures wired like production
- ``make_request`` for building request contexts
- ``Spy`` stages that record calls

Usage:
    Fixtures are auto-discovered by pytest.

    def test_something(pipeline, make_request):
        response = pipeline.run(make_request("/about/"))
"""

import copy
import json
import sys
from pathlib import Path
from typing import Any

import pytest

# Ensure spa_spine package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from spa_spine.collaborators.memory import InMemorySite
from spa_spine.core.cache import InMemoryCache
from spa_spine.core.settings import SpaSettings
from spa_spine.pipeline.builder import create_pipeline
from spa_spine.pipeline.cache import PageCache
from spa_spine.pipeline.context import SpaRequest
from spa_spine.pipeline.services import ContentToken, SpaServices


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        # Transport and CLI tests run the whole stack
        if test_path.parts[0] in ("api", "cli"):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Site Fixtures
# =============================================================================

SITE_DEFINITION: dict[str, Any] = {
    "domains": [
        {"host": "example.com", "siteId": 1000, "culture": "en-US"},
        {"host": "example.com/da", "siteId": 2000, "culture": "da-DK"},
    ],
    "nodes": [
        {
            "id": 1000,
            "name": "Home",
            "url": "/",
            "type": "home",
            "properties": {"notFoundPageId": 1099, "twitterSite": "example"},
        },
        {
            "id": 1001,
            "parentId": 1000,
            "name": "About",
            "url": "/about/",
            "properties": {
                "metaTitle": "About us",
                "metaDescription": "Who we are",
                "ogImage": "/media/about.jpg",
                "body": "<p>About</p>",
            },
        },
        {"id": 1002, "parentId": 1001, "name": "Team", "url": "/about/team/"},
        {
            "id": 1003,
            "parentId": 1000,
            "name": "Campaign",
            "url": "/campaign/",
            "properties": {"redirectUrl": "https://campaign.example.com/"},
        },
        {"id": 1004, "parentId": 1000, "name": "Hidden", "url": "/hidden/", "properties": {"hideFromNavigation": True}},
        {"id": 1099, "parentId": 1000, "name": "Not found", "url": "/404/", "properties": {"hideFromNavigation": True}},
        {"id": 2000, "name": "Forside", "url": "/da/", "type": "home", "culture": "da-DK"},
        {"id": 2001, "parentId": 2000, "name": "Om os", "url": "/da/om/", "culture": "da-DK"},
    ],
    "redirects": [
        {"url": "/old-about", "destination": "/about/", "permanent": True},
        {"url": "/temp", "destination": "/about/team/", "permanent": False, "siteId": 1000},
    ],
}


@pytest.fixture
def site_definition() -> dict[str, Any]:
    return copy.deepcopy(SITE_DEFINITION)


@pytest.fixture
def site(site_definition) -> InMemorySite:
    return InMemorySite.from_dict(site_definition)


@pytest.fixture
def site_file(tmp_path, site_definition) -> Path:
    path = tmp_path / "site.json"
    path.write_text(json.dumps(site_definition), encoding="utf-8")
    return path


# =============================================================================
# Pipeline Fixtures
# =============================================================================


@pytest.fixture
def settings() -> SpaSettings:
    return SpaSettings(_env_file=None)


@pytest.fixture
def page_cache() -> PageCache:
    return PageCache(InMemoryCache(max_size=100), ttl_seconds=60)


@pytest.fixture
def services(site, page_cache) -> SpaServices:
    return SpaServices(
        domains=site,
        content=site,
        redirects=site,
        cache=page_cache,
        token=ContentToken("00000000-0000-0000-0000-000000000001"),
    )


@pytest.fixture
def pipeline(settings, services):
    return create_pipeline(settings, services)


@pytest.fixture
def make_request():
    """Factory for request contexts on ``https://example.com``."""

    def _make(url: str = "/", **kwargs: Any) -> SpaRequest:
        kwargs.setdefault("host", "example.com")
        return SpaRequest(url=url, **kwargs)

    return _make


class Spy:
    """Stage that records every request it sees and optionally acts on it."""

    def __init__(self, name: str = "spy", action=None):
        self.__name__ = name
        self.calls: list[SpaRequest] = []
        self.action = action

    def __call__(self, request: SpaRequest) -> None:
        self.calls.append(request)
        if self.action is not None:
            self.action(request)

    @property
    def count(self) -> int:
        return len(self.calls)


@pytest.fixture
def spy():
    return Spy
