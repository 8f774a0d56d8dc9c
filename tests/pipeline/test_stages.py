"""
Tests for the concrete stages, run through the default pipeline.

Tests verify:
- Page resolution by URL, by preview id and by page id
- Domain prefixes and cultures
- Redirects (table and node property) and not-found handling
- Requested parts only in the body
- Trailing-slash normalization
"""

from unittest.mock import MagicMock

import pytest

from spa_spine.collaborators.protocols import DomainMatch
from spa_spine.core.settings import SpaSettings, TrailingSlashPolicy
from spa_spine.pipeline.builder import build_action_groups, create_pipeline
from spa_spine.pipeline.context import SpaApiPart, SpaRequest
from spa_spine.pipeline.responses import ResponseKind
from spa_spine.pipeline.stages import SpaStages, add_trailing_slash, remove_trailing_slash


class TestResolution:
    def test_page_by_url(self, pipeline, make_request):
        response = pipeline.run(make_request("/about/"))

        assert response.kind is ResponseKind.OK
        body = response.body
        assert body["pageId"] == 1001
        assert body["siteId"] == 1000
        assert body["contentGuid"] == "00000000-0000-0000-0000-000000000001"
        assert body["content"]["name"] == "About"
        assert body["content"]["culture"] == "en-US"
        assert body["site"]["id"] == 1000

    def test_absolute_url(self, pipeline, make_request):
        response = pipeline.run(make_request("https://example.com/about/team/"))
        assert response.body["pageId"] == 1002

    def test_root(self, pipeline, make_request):
        assert pipeline.run(make_request("/")).body["pageId"] == 1000

    def test_domain_prefix_selects_site_and_culture(self, pipeline, make_request):
        response = pipeline.run(make_request("/da/om/"))
        assert response.body["pageId"] == 2001
        assert response.body["siteId"] == 2000
        assert response.body["content"]["culture"] == "da-DK"

    def test_unknown_host(self, pipeline, make_request):
        response = pipeline.run(make_request("/about/", host="unknown.org"))
        assert response.kind is ResponseKind.NOT_FOUND

    def test_preview_by_aspx_url(self, pipeline, make_request):
        response = pipeline.run(make_request("/1002.aspx", is_preview=True))
        assert response.body["pageId"] == 1002

    def test_aspx_url_outside_preview_is_a_path(self, pipeline, make_request):
        response = pipeline.run(make_request("/1002.aspx"))
        assert response.body["pageId"] == 1099  # the site's 404 page

    def test_explicit_page_id(self, pipeline, make_request):
        response = pipeline.run(make_request("/anything", page_id=1001))
        assert response.body["pageId"] == 1001

    def test_default_culture_when_domain_has_none(self, services, make_request):
        services.domains = MagicMock()
        services.domains.resolve.return_value = DomainMatch("example.com", 1000, None)
        pipeline = create_pipeline(SpaSettings(_env_file=None, default_culture="en-GB"), services)

        response = pipeline.run(make_request("/about/"))
        assert response.body["content"]["culture"] == "en-GB"


class TestRedirects:
    def test_redirect_table(self, pipeline, make_request):
        response = pipeline.run(make_request("/old-about?x=1"))

        assert response.kind is ResponseKind.REDIRECT
        assert response.status_code == 301
        assert response.location == "/about/"

    def test_temporary_site_redirect(self, pipeline, make_request):
        response = pipeline.run(make_request("/temp"))
        assert response.status_code == 307
        assert response.body["data"] == {"url": "/about/team/", "permanent": False}

    def test_node_redirect_property(self, pipeline, make_request):
        response = pipeline.run(make_request("/campaign/"))
        assert response.kind is ResponseKind.REDIRECT
        assert response.location == "https://campaign.example.com/"

    def test_redirects_are_not_cached(self, pipeline, make_request, page_cache):
        pipeline.run(make_request("/old-about"))
        assert page_cache.backend.size() == 0


class TestNotFound:
    def test_not_found_page_served_with_404(self, pipeline, make_request):
        response = pipeline.run(make_request("/missing/"))

        assert response.kind is ResponseKind.OK
        assert response.status_code == 404
        assert response.body["pageId"] == 1099

    def test_not_found_page_is_not_cached(self, pipeline, make_request, page_cache):
        pipeline.run(make_request("/missing/"))
        response = pipeline.run(make_request("/missing/"))
        assert response.status_code == 404
        assert "cached" not in response.body

    def test_bare_not_found_without_404_page(self, pipeline, make_request):
        response = pipeline.run(make_request("/da/mangler/"))
        assert response.kind is ResponseKind.NOT_FOUND
        assert response.status_code == 404

    def test_missing_site_root(self, services, settings, make_request):
        services.domains = MagicMock()
        services.domains.resolve.return_value = DomainMatch("example.com", 4242, "en-US")
        response = create_pipeline(settings, services).run(make_request("/"))
        assert response.kind is ResponseKind.NOT_FOUND


class TestParts:
    def test_content_only(self, pipeline, make_request):
        response = pipeline.run(make_request("/about/", parts=frozenset({SpaApiPart.CONTENT})))

        assert "content" in response.body
        assert "site" not in response.body
        assert "navigation" not in response.body

    def test_site_and_navigation(self, pipeline, make_request):
        parts = SpaApiPart.parse("site,navigation")
        body = pipeline.run(make_request("/about/", parts=parts)).body

        assert "content" not in body
        assert body["site"]["name"] == "Home"
        assert [item["id"] for item in body["navigation"]] == [1001, 1003]

    def test_navigation_depth(self, pipeline, make_request):
        body = pipeline.run(make_request("/", navigation_levels=2)).body
        about = body["navigation"][0]
        assert [child["id"] for child in about["children"]] == [1002]

    def test_content_meta(self, pipeline, make_request):
        meta = pipeline.run(make_request("/about/")).body["content"]["meta"]

        assert meta["title"] == "About us"
        assert {"rel": "canonical", "href": "https://example.com/about/"} in meta["link"]
        assert {"property": "og:image", "content": "https://example.com/media/about.jpg"} in meta["meta"]
        assert {"name": "twitter:card", "content": "summary_large_image"} in meta["meta"]
        assert {"name": "twitter:site", "content": "@example"} in meta["meta"]

    def test_meta_properties_not_repeated(self, pipeline, make_request):
        properties = pipeline.run(make_request("/about/")).body["content"]["properties"]
        assert properties == {"body": "<p>About</p>"}

    def test_built_payload_detached_from_fragments(self, pipeline, make_request, site):
        request = make_request("/about/")
        pipeline.run(request)

        request.content_model["properties"]["body"] = "<p>changed</p>"
        request.site_model["name"] = "changed"

        assert request.data_model.content["properties"]["body"] == "<p>About</p>"
        assert request.data_model.site["name"] != "changed"
        assert site.get_by_id(1001).properties["body"] == "<p>About</p>"


class TestCustomModels:
    def test_custom_stage_runs_before_data_model(self, settings, services, make_request):
        def add_breadcrumbs(request):
            request.content_model = {**request.content_model, "breadcrumbs": ["Home", request.content.name]}

        pipeline = create_pipeline(settings, services, custom_models=[add_breadcrumbs])
        body = pipeline.run(make_request("/about/")).body
        assert body["content"]["breadcrumbs"] == ["Home", "About"]


class TestTrailingSlash:
    @pytest.mark.parametrize(
        ("url", "location"),
        [("/foo", "/foo/"), ("/foo?x=1", "/foo/?x=1"), ("/a/b?x=1?y", "/a/b/?x=1?y")],
    )
    def test_add(self, url, location):
        request = SpaRequest(url=url)
        add_trailing_slash(request)
        assert request.response.location == location

    @pytest.mark.parametrize(
        ("url", "location"),
        [("/foo/", "/foo"), ("/foo/?x=1", "/foo?x=1")],
    )
    def test_remove(self, url, location):
        request = SpaRequest(url=url)
        remove_trailing_slash(request)
        assert request.response.location == location

    @pytest.mark.parametrize("url", ["/foo/", "/foo/?x=1"])
    def test_add_noop_when_present(self, url):
        request = SpaRequest(url=url)
        add_trailing_slash(request)
        assert request.response is None

    @pytest.mark.parametrize("url", ["/foo", "/foo?x=1", "/"])
    def test_remove_noop(self, url):
        request = SpaRequest(url=url)
        remove_trailing_slash(request)
        assert request.response is None

    @pytest.mark.parametrize("stage", [add_trailing_slash, remove_trailing_slash])
    def test_preview_untouched(self, stage):
        for url in ("/foo", "/foo/"):
            request = SpaRequest(url=url, is_preview=True)
            stage(request)
            assert request.response is None

    def test_policy_wires_one_stage(self, services):
        stages = SpaStages(services)

        def setup_names(policy):
            groups = build_action_groups(stages, trailing_slash=policy)
            return [s.name for s in groups[0].stages()]

        assert "add_trailing_slash" in setup_names(TrailingSlashPolicy.ADD)
        assert "remove_trailing_slash" not in setup_names(TrailingSlashPolicy.ADD)
        assert "remove_trailing_slash" in setup_names(TrailingSlashPolicy.REMOVE)
        none = setup_names(TrailingSlashPolicy.NONE)
        assert "add_trailing_slash" not in none and "remove_trailing_slash" not in none

    def test_pipeline_redirects_before_lookup(self, services, make_request):
        settings = SpaSettings(_env_file=None, trailing_slash="add")
        response = create_pipeline(settings, services).run(make_request("https://example.com/about?x=1"))
        assert response.kind is ResponseKind.REDIRECT
        assert response.location == "/about/?x=1"
