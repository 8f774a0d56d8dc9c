"""
In-memory collaborators loaded from a JSON site definition.

Useful for development, demos and tests: one :class:`InMemorySite` object
implements the domain resolver, the content resolver and the redirect
table at once.

Site file format::

    {
      "domains":   [{"host": "example.com", "siteId": 1000, "culture": "en-US"}],
      "nodes":     [{"id": 1000, "name": "Home", "url": "/", "type": "home"},
                    {"id": 1001, "parentId": 1000, "name": "About", "url": "/about/"}],
      "redirects": [{"url": "/old-about", "destination": "/about/", "permanent": true}]
    }

A domain host may carry a path prefix (``example.com/da``); the longest
matching prefix wins.
"""

from __future__ import annotations

import json
import uuid
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from spa_spine.collaborators.protocols import ContentNode, DomainMatch, RedirectTarget
from spa_spine.core.errors import ConfigError
from spa_spine.core.logging import get_logger
from spa_spine.core.urls import normalize_path, split_url, to_relative

log = get_logger(__name__)


# ── Site file schema ─────────────────────────────────────────────────────


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class DomainRecord(_Record):
    host: str
    site_id: int = Field(alias="siteId")
    culture: str | None = None


class NodeRecord(_Record):
    id: int
    name: str
    url: str
    key: str | None = None
    type: str = "page"
    parent_id: int | None = Field(default=None, alias="parentId")
    culture: str | None = None
    properties: dict[str, Any] = Field(default_factory=dict)


class RedirectRecord(_Record):
    url: str
    destination: str
    permanent: bool = True
    site_id: int | None = Field(default=None, alias="siteId")


class SiteDefinition(_Record):
    domains: list[DomainRecord] = Field(default_factory=list)
    nodes: list[NodeRecord] = Field(default_factory=list)
    redirects: list[RedirectRecord] = Field(default_factory=list)


# ── Store ────────────────────────────────────────────────────────────────


class InMemorySite:
    """Domain resolver, content resolver and redirect table backed by dicts.

    The store is read-only after construction, so it can be shared by
    concurrent pipeline runs.
    """

    def __init__(self, definition: SiteDefinition):
        self._domains = sorted(
            (self._split_host(d.host) + (d,) for d in definition.domains),
            key=lambda item: len(item[1]),
            reverse=True,
        )
        self._nodes: dict[int, ContentNode] = {}
        self._by_path: dict[tuple[int, str], list[ContentNode]] = {}
        self._redirects: dict[tuple[int | None, str], RedirectTarget] = {}

        self._build_tree(definition.nodes)
        for record in definition.redirects:
            target = RedirectTarget(url=record.destination, permanent=record.permanent)
            self._redirects[(record.site_id, normalize_path(record.url))] = target

    # -- construction -----------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InMemorySite:
        try:
            definition = SiteDefinition.model_validate(data)
        except PydanticValidationError as exc:
            raise ConfigError(f"Invalid site definition: {exc.error_count()} error(s)", cause=exc) from exc
        return cls(definition)

    @classmethod
    def from_file(cls, path: str | Path) -> InMemorySite:
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Cannot read site file {path}", cause=exc).with_context(path=str(path)) from exc
        site = cls.from_dict(data)
        log.info("site_file.loaded", path=str(path), nodes=len(site._nodes))
        return site

    @staticmethod
    def _split_host(host: str) -> tuple[str, str]:
        host = host.lower().split("://")[-1]
        name, _, prefix = host.partition("/")
        prefix = "/" + prefix.strip("/") if prefix.strip("/") else ""
        return name, prefix

    def _build_tree(self, records: list[NodeRecord]) -> None:
        for record in records:
            if record.id in self._nodes:
                raise ConfigError(f"Duplicate node id {record.id}")
            self._nodes[record.id] = ContentNode(
                id=record.id,
                key=record.key or str(uuid.uuid5(uuid.NAMESPACE_URL, f"spa-node:{record.id}")),
                name=record.name,
                url=to_relative(record.url),
                content_type=record.type,
                parent_id=record.parent_id,
                culture=record.culture,
                properties=dict(record.properties),
            )

        for node in self._nodes.values():
            if node.parent_id is None:
                continue
            parent = self._nodes.get(node.parent_id)
            if parent is None:
                raise ConfigError(f"Node {node.id} references unknown parent {node.parent_id}")
            parent.children.append(node)

        for node in self._nodes.values():
            if node.parent_id is None:
                self._assign_site(node, node.id, 1)

        for node in self._nodes.values():
            self._by_path.setdefault((node.site_id, normalize_path(node.url)), []).append(node)

    def _assign_site(self, node: ContentNode, site_id: int, level: int) -> None:
        node.site_id = site_id
        node.level = level
        for child in node.children:
            self._assign_site(child, site_id, level + 1)

    # -- DomainResolver ---------------------------------------------------

    def resolve(self, host: str, url: str) -> DomainMatch | None:
        name = host.lower().split(":")[0]
        path = normalize_path(url)
        for domain_host, prefix, record in self._domains:
            if domain_host != name:
                continue
            if prefix and not (path == prefix or path.startswith(prefix + "/")):
                continue
            return DomainMatch(
                domain_id=f"{domain_host}{prefix}",
                site_id=record.site_id,
                culture=record.culture,
            )
        return None

    # -- ContentResolver --------------------------------------------------

    def lookup(self, path: str, culture: str | None, site_id: int) -> ContentNode | None:
        candidates = self._by_path.get((site_id, normalize_path(path)), [])
        for node in candidates:
            if culture is None or node.culture in (None, culture):
                return node
        return None

    def get_by_id(self, node_id: int) -> ContentNode | None:
        return self._nodes.get(node_id)

    # -- RedirectsService -------------------------------------------------

    def match_outbound(self, url: str, site_id: int | None) -> RedirectTarget | None:
        path = normalize_path(split_url(url)[0])
        return self._redirects.get((site_id, path)) or self._redirects.get((None, path))
