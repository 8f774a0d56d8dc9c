"""
Tests for response factories and the status-code policy.
"""

import pytest

from spa_spine.core.errors import PipelineError
from spa_spine.models.data import SpaDataModel
from spa_spine.pipeline.context import SpaRequest
from spa_spine.pipeline.responses import (
    ResponseKind,
    SpaResponse,
    apply_status_policy,
    error,
    html_error,
    not_found,
    ok,
    redirect,
)


class TestFactories:
    def test_ok(self):
        response = ok(SpaDataModel(page_id=5, content_guid="g"), 404)
        assert response.kind is ResponseKind.OK
        assert response.status_code == 404
        assert response.body["pageId"] == 5
        assert response.is_success

    def test_redirect(self):
        permanent = redirect("/new/")
        temporary = redirect("/new/", permanent=False)

        assert (permanent.status_code, temporary.status_code) == (301, 307)
        assert permanent.location == "/new/"
        assert permanent.body["meta"]["code"] == 301

    def test_not_found_and_error(self):
        assert not_found().body == {"meta": {"code": 404, "error": "Page not found"}}
        assert error("nope", 503).status_code == 503
        assert not error().is_success


class TestHtmlError:
    def test_escapes_and_names_stage(self):
        request = SpaRequest(url="/<script>", host="example.com")
        try:
            raise ValueError("<b>bad</b>")
        except ValueError as cause:
            exc = PipelineError("build", "content_lookup", cause)

        response = html_error(request, exc)
        assert response.kind is ResponseKind.DIAGNOSTIC
        assert response.media_type == "text/html"
        assert response.status_code == 500
        assert "&lt;b&gt;bad&lt;/b&gt;" in response.body
        assert "&lt;script&gt;" in response.body
        assert "content_lookup" in response.body
        assert "<b>bad</b>" not in response.body


class TestStatusPolicy:
    @pytest.mark.parametrize(
        "response",
        [redirect("/x"), redirect("/x", permanent=False), not_found()],
    )
    def test_overwrite(self, response):
        rewritten = apply_status_policy(response, overwrite=True)
        assert rewritten.status_code == 200
        assert rewritten.body == response.body
        assert rewritten.kind is response.kind

    def test_served_404_page_overwritten(self):
        response = ok(SpaDataModel(content_guid="g"), 404)
        assert apply_status_policy(response, overwrite=True).status_code == 200

    def test_disabled(self):
        response = redirect("/x")
        assert apply_status_policy(response, overwrite=False) is response

    @pytest.mark.parametrize("status", [200, 500])
    def test_other_codes_untouched(self, status):
        response = SpaResponse(ResponseKind.ERROR, status, {})
        assert apply_status_policy(response, overwrite=True).status_code == status
