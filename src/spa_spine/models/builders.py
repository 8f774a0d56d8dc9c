"""
Default site, navigation and content model builders.

Each builder is a pure function ``(ContentNode, SpaRequest) -> fragment``;
the pipeline calls them only for parts the caller requested. Swap any of
them through :class:`ModelBuilders`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from spa_spine.collaborators.protocols import ContentNode
from spa_spine.models.meta import (
    SpaMetaData,
    SpaOpenGraphProperties,
    TwitterSummaryCard,
    TwitterSummaryLargeImageCard,
)

if TYPE_CHECKING:
    from spa_spine.pipeline.context import SpaRequest

SiteBuilder = Callable[[ContentNode, "SpaRequest"], dict[str, Any]]
NavigationBuilder = Callable[[ContentNode, "SpaRequest"], list[dict[str, Any]]]
ContentBuilder = Callable[[ContentNode, "SpaRequest"], dict[str, Any]]

# Properties excluded from the serialized content model.
_META_PROPERTIES = frozenset(
    {
        "metaTitle",
        "metaDescription",
        "hideFromSearch",
        "ogImage",
        "twitterSite",
        "notFoundPageId",
        "redirectUrl",
        "hideFromNavigation",
    }
)


def build_site_model(site: ContentNode, request: SpaRequest) -> dict[str, Any]:
    return {
        "id": site.id,
        "key": site.key,
        "name": site.name,
        "url": site.url,
        "culture": request.culture,
    }


def build_navigation_model(site: ContentNode, request: SpaRequest) -> list[dict[str, Any]]:
    """Visible children of the site root, ``request.navigation_levels`` deep."""

    def items(node: ContentNode, depth: int) -> list[dict[str, Any]]:
        result = []
        for child in node.children:
            if child.hide_from_navigation:
                continue
            item: dict[str, Any] = {"id": child.id, "name": child.name, "url": child.url, "level": child.level}
            if depth < request.navigation_levels and child.children:
                item["children"] = items(child, depth + 1)
            result.append(item)
        return result

    return items(site, 1)


def build_meta(content: ContentNode, request: SpaRequest) -> SpaMetaData:
    site_name = request.site.name if request.site is not None else None
    title = content.value("metaTitle") or content.name
    image = content.value("ogImage")
    twitter_site = request.site.value("twitterSite") if request.site is not None else None

    def open_graph(meta: SpaMetaData) -> SpaOpenGraphProperties:
        og = SpaOpenGraphProperties(meta.base_url)
        og.title = meta.title
        og.description = meta.description
        og.site_name = site_name
        og.url = meta.canonical
        og.append_image(image)
        return og

    def twitter(meta: SpaMetaData) -> TwitterSummaryCard | None:
        if not twitter_site:
            return None
        card_type = TwitterSummaryLargeImageCard if image else TwitterSummaryCard
        og_images = meta.open_graph.images
        return card_type(
            site=twitter_site,
            title=meta.title,
            description=meta.description,
            image=og_images[0].url if og_images else None,
        )

    meta = SpaMetaData(
        base_url=request.base_url,
        title=title,
        description=content.value("metaDescription"),
        hide_from_search=bool(content.value("hideFromSearch", False)),
        open_graph_factory=open_graph,
        twitter_factory=twitter,
    )
    meta.canonical = request.base_url + content.url
    return meta


def build_content_model(content: ContentNode, request: SpaRequest) -> dict[str, Any]:
    properties = {k: v for k, v in content.properties.items() if k not in _META_PROPERTIES}
    return {
        "id": content.id,
        "key": content.key,
        "name": content.name,
        "level": content.level,
        "url": content.url,
        "type": content.content_type,
        "culture": request.culture,
        "meta": build_meta(content, request).to_json(),
        "properties": properties,
    }


@dataclass(frozen=True)
class ModelBuilders:
    site: SiteBuilder = build_site_model
    navigation: NavigationBuilder = build_navigation_model
    content: ContentBuilder = build_content_model
