"""
Concrete pipeline stages.

Every stage takes the request context and returns nothing. A stage ends the
run on purpose by setting ``request.response`` (redirects, not found);
anything it raises is a failure.

Stages that need collaborators are methods of :class:`SpaStages`, which
receives its services explicitly. The URL normalization stages need
nothing and are plain functions.
"""

from __future__ import annotations

import copy

from spa_spine.collaborators.protocols import NOT_FOUND_PAGE_PROPERTY, REDIRECT_URL_PROPERTY
from spa_spine.core.logging import get_logger
from spa_spine.core.urls import join_url, split_url, to_relative, try_get_preview_id
from spa_spine.models.data import SpaDataModel
from spa_spine.pipeline.context import SpaApiPart, SpaRequest
from spa_spine.pipeline.responses import not_found, redirect
from spa_spine.pipeline.services import SpaServices

log = get_logger(__name__)


# ── URL normalization ────────────────────────────────────────────────────


def add_trailing_slash(request: SpaRequest) -> None:
    """Redirect ``/foo?x=1`` to ``/foo/?x=1``. No-op in preview mode."""
    if request.is_preview:
        return

    path, query = split_url(request.url)
    if path.endswith("/"):
        return

    request.response = redirect(join_url(path + "/", query))


def remove_trailing_slash(request: SpaRequest) -> None:
    """Redirect ``/foo/?x=1`` to ``/foo?x=1``. No-op in preview mode and for ``/``."""
    if request.is_preview:
        return

    path, query = split_url(request.url)
    if not path.endswith("/") or path == "/":
        return

    request.response = redirect(join_url(path[:-1], query))


# ── Resolution and model stages ──────────────────────────────────────────


class SpaStages:
    """Stages backed by the domain, content, redirect and cache services."""

    def __init__(self, services: SpaServices, *, default_culture: str | None = None):
        self.services = services
        self.default_culture = default_culture

    # -- setup ------------------------------------------------------------

    def init_arguments(self, request: SpaRequest) -> None:
        request.url = to_relative(request.url)
        if request.is_preview and request.page_id is None:
            request.page_id = try_get_preview_id(request.url)

    def find_domain_and_culture(self, request: SpaRequest) -> None:
        match = self.services.domains.resolve(request.host, request.url)
        if match is None:
            request.response = not_found(f"No site is configured for {request.host!r}")
            return

        request.domain_id = match.domain_id
        request.site_id = match.site_id
        request.culture = match.culture

    def update_arguments(self, request: SpaRequest) -> None:
        if request.culture is None:
            request.culture = self.default_culture

    def read_from_cache(self, request: SpaRequest) -> None:
        cache = self.services.cache
        if cache is None:
            return

        key = request.cache_key.get()
        model = cache.try_get(key)
        if model is None:
            log.debug("pipeline.cache_miss", key=key)
            return

        log.debug("pipeline.cache_hit", key=key)
        # Entries outlive token bumps; always report the current token.
        request.data_model = model.with_content_guid(self.services.token.value)

    # -- build ------------------------------------------------------------

    def init_site(self, request: SpaRequest) -> None:
        site = self.services.content.get_by_id(request.site_id)
        if site is None:
            request.response = not_found(f"Site {request.site_id} does not exist")
            return
        request.site = site

    def content_lookup(self, request: SpaRequest) -> None:
        content = self.services.content
        if request.page_id is not None:
            node = content.get_by_id(request.page_id)
        else:
            node = content.lookup(request.url, request.culture, request.site_id)

        if node is not None:
            request.content = node
            request.content_id = node.id

    def setup_culture(self, request: SpaRequest) -> None:
        if request.content is not None and request.content.culture:
            request.culture = request.content.culture

    def init_site_model(self, request: SpaRequest) -> None:
        if request.is_part_requested(SpaApiPart.SITE):
            request.site_model = self.services.builders.site(request.site, request)

    def handle_outbound_redirects(self, request: SpaRequest) -> None:
        target = self.services.redirects.match_outbound(request.url, request.site_id)
        if target is not None:
            request.response = redirect(target.url, permanent=target.permanent)
            return

        if request.content is not None:
            destination = request.content.value(REDIRECT_URL_PROPERTY)
            if destination:
                request.response = redirect(destination)

    def handle_not_found(self, request: SpaRequest) -> None:
        if request.content is not None:
            return

        page_id = request.site.value(NOT_FOUND_PAGE_PROPERTY)
        page = self.services.content.get_by_id(int(page_id)) if page_id else None
        if page is None:
            request.response = not_found()
            return

        request.content = page
        request.content_id = page.id
        request.response_status_code = 404

    def init_content_model(self, request: SpaRequest) -> None:
        if request.is_part_requested(SpaApiPart.CONTENT):
            request.content_model = self.services.builders.content(request.content, request)

    def init_navigation_model(self, request: SpaRequest) -> None:
        if request.is_part_requested(SpaApiPart.NAVIGATION):
            request.navigation_model = self.services.builders.navigation(request.site, request)

    def init_data_model(self, request: SpaRequest) -> None:
        def fragment(part: SpaApiPart, value):
            # The built payload shares no mutable state with the fragments.
            return copy.deepcopy(value) if request.is_part_requested(part) else None

        request.data_model = SpaDataModel(
            page_id=request.content.id,
            site_id=request.site.id,
            content_guid=self.services.token.value,
            site=fragment(SpaApiPart.SITE, request.site_model),
            navigation=fragment(SpaApiPart.NAVIGATION, request.navigation_model),
            content=fragment(SpaApiPart.CONTENT, request.content_model),
        )

    # -- finalize ---------------------------------------------------------

    def push_to_cache(self, request: SpaRequest) -> None:
        cache = self.services.cache
        model = request.data_model
        if cache is None or model is None or model.cached:
            return
        # 404 pages are rebuilt each time so their status code is kept.
        if request.response_status_code != 200:
            return

        key = request.cache_key.get()
        cache.set(key, model)
        log.debug("pipeline.cache_write", key=key)

    def log_outcome(self, request: SpaRequest) -> None:
        response = request.response
        if response is not None:
            outcome, status = response.kind.value, response.status_code
        else:
            outcome, status = "built", request.response_status_code

        model = request.data_model
        log.info(
            "pipeline.completed",
            url=request.url,
            outcome=outcome,
            status=status,
            cached=bool(model is not None and model.cached),
            elapsed_ms=request.elapsed_ms(),
        )
