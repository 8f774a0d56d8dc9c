"""
Collaborator contracts consumed by the pipeline stages.

The pipeline resolves a URL through three external services: a domain
resolver (host → site + culture), a content resolver (path → node) and a
redirect table. Concrete backends (a CMS, a database, the in-memory store
in :mod:`spa_spine.collaborators.memory`) implement these protocols.

Architecture:
    ::

        DomainResolver.resolve(host, url)            → DomainMatch | None
        ContentResolver.lookup(path, culture, site)  → ContentNode | None
        ContentResolver.get_by_id(node_id)           → ContentNode | None
        RedirectsService.match_outbound(url, site)   → RedirectTarget | None

Tags:
    protocols, collaborators, content, domains, redirects, spa-spine
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

# Node properties with a meaning to the pipeline.
NOT_FOUND_PAGE_PROPERTY = "notFoundPageId"
REDIRECT_URL_PROPERTY = "redirectUrl"
HIDE_FROM_NAVIGATION_PROPERTY = "hideFromNavigation"


@dataclass(frozen=True)
class DomainMatch:
    """Result of resolving a host name."""

    domain_id: str
    site_id: int
    culture: str | None = None


@dataclass(frozen=True)
class RedirectTarget:
    """Destination of an outbound redirect."""

    url: str
    permanent: bool = True


@dataclass(eq=False)
class ContentNode:
    """
    A published content node.

    ``children`` is filled in by the resolver that owns the tree; model
    builders read it to produce navigation.
    """

    id: int
    key: str
    name: str
    url: str
    content_type: str = "page"
    site_id: int | None = None
    parent_id: int | None = None
    culture: str | None = None
    level: int = 1
    properties: dict[str, Any] = field(default_factory=dict)
    children: list[ContentNode] = field(default_factory=list, repr=False)

    def value(self, alias: str, default: Any = None) -> Any:
        return self.properties.get(alias, default)

    @property
    def hide_from_navigation(self) -> bool:
        return bool(self.properties.get(HIDE_FROM_NAVIGATION_PROPERTY, False))


@runtime_checkable
class DomainResolver(Protocol):
    """Maps a requested host (and URL) to a site and culture."""

    def resolve(self, host: str, url: str) -> DomainMatch | None:
        """Return the matching domain, or ``None`` if the host is unknown."""
        ...


@runtime_checkable
class ContentResolver(Protocol):
    """Looks up content nodes in a site's tree."""

    def lookup(self, path: str, culture: str | None, site_id: int) -> ContentNode | None:
        """Return the node published at ``path`` within the site."""
        ...

    def get_by_id(self, node_id: int) -> ContentNode | None:
        """Return a node by id (used for site roots, previews and 404 pages)."""
        ...


@runtime_checkable
class RedirectsService(Protocol):
    """Redirect table lookups."""

    def match_outbound(self, url: str, site_id: int | None) -> RedirectTarget | None:
        """Return the redirect configured for ``url``, if any."""
        ...


__all__ = [
    "HIDE_FROM_NAVIGATION_PROPERTY",
    "NOT_FOUND_PAGE_PROPERTY",
    "REDIRECT_URL_PROPERTY",
    "ContentNode",
    "ContentResolver",
    "DomainMatch",
    "DomainResolver",
    "RedirectTarget",
    "RedirectsService",
]
