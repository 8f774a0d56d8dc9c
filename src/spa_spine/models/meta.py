"""
Page meta data: title, description, robots, links, scripts, Open Graph
and Twitter cards.

``SpaMetaData.to_json()`` renders a vue-meta style object::

    {
      "title": "About us",
      "meta": [{"name": "description", "content": "..."},
               {"property": "og:title", "content": "About us"},
               {"name": "twitter:card", "content": "summary"}],
      "link": [{"rel": "canonical", "href": "https://example.com/about/"}],
      "script": [],
      "__dangerouslyDisableSanitizers": []
    }

The Open Graph and Twitter objects are derived lazily and computed at most
once per instance (see :class:`spa_spine.core.memo.Memo`).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from spa_spine.core.memo import Memo


@dataclass
class SpaMetaContent:
    """A ``<meta name=... content=...>`` pair."""

    name: str
    content: str

    def to_json(self) -> dict[str, str]:
        return {"name": self.name, "content": self.content}


@dataclass
class SpaMetaLink:
    href: str | None = None
    rel: str | None = None
    type: str | None = None
    media: str | None = None
    sizes: str | None = None

    def to_json(self) -> dict[str, str]:
        return {k: v for k, v in vars(self).items() if v}


@dataclass
class SpaMetaScript:
    source: str
    type: str | None = None

    def to_json(self) -> dict[str, str]:
        result = {"src": self.source}
        if self.type:
            result["type"] = self.type
        return result


# ── Open Graph ───────────────────────────────────────────────────────────


@dataclass
class SpaOpenGraphImage:
    url: str
    width: int = 0
    height: int = 0


class SpaOpenGraphProperties:
    """Open Graph properties for a page.

    Image URLs starting with ``/`` are made absolute against ``base_url``.
    """

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")
        self.title: str | None = None
        self.description: str | None = None
        self.site_name: str | None = None
        self.url: str | None = None
        self.images: list[SpaOpenGraphImage] = []

    def _absolute(self, image: str) -> str:
        return self.base_url + image if image.startswith("/") else image

    def append_image(self, image: str | None, width: int = 0, height: int = 0) -> None:
        if not image or not image.strip():
            return
        self.images.append(SpaOpenGraphImage(self._absolute(image), width, height))

    def append_images(self, *images: str) -> None:
        self.images.extend(SpaOpenGraphImage(self._absolute(image)) for image in images)

    def prepend_images(self, *images: str) -> None:
        self.images[:0] = [SpaOpenGraphImage(self._absolute(image)) for image in images]

    def to_meta(self) -> list[dict[str, str]]:
        meta: list[dict[str, str]] = []

        def add(prop: str, value: Any) -> None:
            if value:
                meta.append({"property": prop, "content": str(value)})

        add("og:title", self.title)
        add("og:description", self.description)
        add("og:site_name", self.site_name)
        add("og:url", self.url)

        for image in self.images:
            add("og:image", image.url)
            if image.width > 0:
                add("og:image:width", image.width)
            if image.height > 0:
                add("og:image:height", image.height)

        return meta


# ── Twitter ──────────────────────────────────────────────────────────────


def _handle(value: str) -> str:
    return value if value.startswith("@") else "@" + value


@dataclass
class TwitterSummaryCard:
    """Twitter ``summary`` card."""

    site: str | None = None
    creator: str | None = None
    title: str | None = None
    description: str | None = None
    image: str | None = None
    image_text: str | None = None

    card = "summary"

    def to_meta(self) -> list[SpaMetaContent]:
        meta = [SpaMetaContent("twitter:card", self.card)]

        if self.site:
            meta.append(SpaMetaContent("twitter:site", _handle(self.site)))
        if self.creator:
            meta.append(SpaMetaContent("twitter:creator", _handle(self.creator)))
        if self.title:
            meta.append(SpaMetaContent("twitter:title", self.title))
        if self.description:
            meta.append(SpaMetaContent("twitter:description", self.description))
        if self.image:
            meta.append(SpaMetaContent("twitter:image", self.image))
        if self.image_text:
            meta.append(SpaMetaContent("twitter:image:alt", self.image_text))

        return meta


@dataclass
class TwitterSummaryLargeImageCard(TwitterSummaryCard):
    card = "summary_large_image"


# ── Meta data ────────────────────────────────────────────────────────────


@dataclass
class SpaMetaData:
    """
    Meta data for one page.

    ``open_graph_factory`` and ``twitter_factory`` receive this instance
    and are called at most once, on first access. Without a Twitter factory
    the page has no Twitter card.
    """

    base_url: str
    title: str | None = None
    description: str | None = None
    robots: str | None = None
    hide_from_search: bool = False
    links: list[SpaMetaLink] = field(default_factory=list)
    scripts: list[SpaMetaScript] = field(default_factory=list)
    open_graph_factory: Callable[[SpaMetaData], SpaOpenGraphProperties] | None = field(default=None, repr=False)
    twitter_factory: Callable[[SpaMetaData], TwitterSummaryCard | None] | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self._canonical = self.append_link(rel="canonical")
        self._og: Memo[SpaOpenGraphProperties] = Memo(self._create_open_graph)
        self._twitter: Memo[TwitterSummaryCard | None] = Memo(self._create_twitter_card)

    @property
    def canonical(self) -> str | None:
        return self._canonical.href

    @canonical.setter
    def canonical(self, value: str | None) -> None:
        self._canonical.href = value

    @property
    def open_graph(self) -> SpaOpenGraphProperties:
        return self._og.get()

    @property
    def twitter_card(self) -> TwitterSummaryCard | None:
        return self._twitter.get()

    @property
    def has_twitter_card(self) -> bool:
        return self.twitter_card is not None

    @property
    def dangerously_disable_sanitizers(self) -> list[str]:
        return ["script"] if self.scripts else []

    def _create_open_graph(self) -> SpaOpenGraphProperties:
        if self.open_graph_factory is not None:
            return self.open_graph_factory(self)
        return SpaOpenGraphProperties(self.base_url)

    def _create_twitter_card(self) -> TwitterSummaryCard | None:
        if self.twitter_factory is None:
            return None
        return self.twitter_factory(self)

    def append_link(
        self,
        href: str | None = None,
        rel: str | None = None,
        type: str | None = None,
        media: str | None = None,
        sizes: str | None = None,
    ) -> SpaMetaLink:
        link = SpaMetaLink(href=href, rel=rel, type=type, media=media, sizes=sizes)
        self.links.append(link)
        return link

    def append_script(self, source: str, type: str | None = None) -> SpaMetaScript:
        script = SpaMetaScript(source=source, type=type)
        self.scripts.append(script)
        return script

    def to_json(self) -> dict[str, Any]:
        meta: list[dict[str, str]] = []
        if self.description:
            meta.append({"name": "description", "content": self.description})

        robots = "noindex, nofollow" if self.hide_from_search else self.robots
        if robots:
            meta.append({"name": "robots", "content": robots})

        meta.extend(self.open_graph.to_meta())
        if self.twitter_card is not None:
            meta.extend(item.to_json() for item in self.twitter_card.to_meta())

        return {
            "title": self.title,
            "meta": meta,
            "link": [link.to_json() for link in self.links if link.href],
            "script": [script.to_json() for script in self.scripts],
            "__dangerouslyDisableSanitizers": self.dangerously_disable_sanitizers,
        }
