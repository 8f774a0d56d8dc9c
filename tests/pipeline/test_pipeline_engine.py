"""
Tests for the pipeline engine.

Tests verify:
- Groups and stages run in order; a false guard skips a group
- A terminal response stops its group and skips later groups
  (guards are not evaluated), except run-on-exit groups
- Stage exceptions are wrapped once with group/stage provenance
- Success and fallback responses after the loop
- Error reporter integration
"""

from unittest.mock import MagicMock

import pytest

from spa_spine.core.errors import PipelineError
from spa_spine.models.data import SpaDataModel
from spa_spine.pipeline.context import SpaRequest
from spa_spine.pipeline.groups import ActionGroup, always
from spa_spine.pipeline.pipeline import Pipeline
from spa_spine.pipeline.reporter import ErrorReporter
from spa_spine.pipeline.responses import FALLBACK_ERROR_MESSAGE, ResponseKind, not_found, redirect


def set_model(request):
    request.data_model = SpaDataModel(page_id=1, site_id=1, content_guid="g")


def set_redirect(request):
    request.response = redirect("/elsewhere/")


class TestOrdering:
    def test_stages_run_in_order_across_groups(self, spy):
        order = []
        stages = [spy(name, lambda r, n=name: order.append(n)) for name in ("a", "b", "c", "d")]
        pipeline = Pipeline(
            [
                ActionGroup("one", always, stages[:2]),
                ActionGroup("two", always, stages[2:] + [set_model]),
            ]
        )

        pipeline.run(SpaRequest(url="/"))
        assert order == ["a", "b", "c", "d"]

    def test_false_guard_skips_group(self, spy):
        skipped = spy("skipped")
        pipeline = Pipeline(
            [
                ActionGroup("never", lambda r: False, [skipped]),
                ActionGroup("build", always, [set_model]),
            ]
        )

        response = pipeline.run(SpaRequest(url="/"))
        assert skipped.count == 0
        assert response.kind is ResponseKind.OK

    def test_guard_sees_earlier_writes(self, spy):
        build = spy("build")
        pipeline = Pipeline(
            [
                ActionGroup("cache", always, [set_model]),
                ActionGroup("build", lambda r: r.data_model is None, [build]),
            ]
        )

        pipeline.run(SpaRequest(url="/"))
        assert build.count == 0


class TestShortCircuit:
    def test_terminal_response_stops_group(self, spy):
        after = spy("after")
        pipeline = Pipeline([ActionGroup("setup", always, [set_redirect, after])])

        response = pipeline.run(SpaRequest(url="/"))
        assert response.kind is ResponseKind.REDIRECT
        assert after.count == 0

    def test_later_groups_skipped_without_evaluating_guard(self, spy):
        guard = MagicMock(return_value=True)
        later = spy("later")
        pipeline = Pipeline(
            [
                ActionGroup("setup", always, [set_redirect]),
                ActionGroup("build", guard, [later]),
            ]
        )

        pipeline.run(SpaRequest(url="/"))
        guard.assert_not_called()
        assert later.count == 0

    def test_run_on_exit_group_still_runs(self, spy):
        exit_stage = spy("exit")
        guard = MagicMock(return_value=False)
        pipeline = Pipeline(
            [
                ActionGroup("setup", always, [set_redirect]),
                ActionGroup("exit", guard, [exit_stage], run_on_exit=True),
            ]
        )

        response = pipeline.run(SpaRequest(url="/"))
        assert exit_stage.count == 1
        guard.assert_not_called()
        assert response.kind is ResponseKind.REDIRECT

    def test_run_on_exit_group_runs_all_stages_after_termination(self, spy):
        first, second = spy("first"), spy("second")
        pipeline = Pipeline(
            [
                ActionGroup("setup", always, [set_redirect]),
                ActionGroup("exit", always, [first, second], run_on_exit=True),
            ]
        )

        pipeline.run(SpaRequest(url="/"))
        assert (first.count, second.count) == (1, 1)

    def test_run_on_exit_group_obeys_guard_normally(self, spy):
        exit_stage = spy("exit")
        pipeline = Pipeline(
            [
                ActionGroup("build", always, [set_model]),
                ActionGroup("exit", lambda r: False, [exit_stage], run_on_exit=True),
            ]
        )

        pipeline.run(SpaRequest(url="/"))
        assert exit_stage.count == 0

    def test_response_not_replaced(self):
        pipeline = Pipeline([ActionGroup("setup", always, [set_redirect])])
        request = SpaRequest(url="/")
        response = pipeline.run(request)
        assert request.response is response


class TestOutcome:
    def test_data_model_wrapped_as_ok(self):
        pipeline = Pipeline([ActionGroup("build", always, [set_model])])

        response = pipeline.run(SpaRequest(url="/"))
        assert response.kind is ResponseKind.OK
        assert response.status_code == 200
        assert response.body["pageId"] == 1
        assert response.body["executeTimeMs"] >= 0

    def test_ok_uses_response_status_code(self):
        def not_found_page(request):
            request.response_status_code = 404

        pipeline = Pipeline([ActionGroup("build", always, [not_found_page, set_model])])
        response = pipeline.run(SpaRequest(url="/"))
        assert response.kind is ResponseKind.OK
        assert response.status_code == 404

    def test_fallback_error_when_nothing_produced(self):
        pipeline = Pipeline([ActionGroup("noop", always, [lambda r: None])])

        response = pipeline.run(SpaRequest(url="/"))
        assert response.kind is ResponseKind.ERROR
        assert response.status_code == 500
        assert response.body["meta"]["error"] == FALLBACK_ERROR_MESSAGE

    def test_empty_pipeline_falls_back(self):
        assert Pipeline([]).run(SpaRequest(url="/")).kind is ResponseKind.ERROR

    def test_terminal_response_wins_over_model(self):
        def model_then_not_found(request):
            set_model(request)
            request.response = not_found()

        pipeline = Pipeline([ActionGroup("build", always, [model_then_not_found])])
        assert pipeline.run(SpaRequest(url="/")).kind is ResponseKind.NOT_FOUND


class TestErrors:
    def test_stage_exception_wrapped_with_provenance(self):
        cause = RuntimeError("resolver down")

        def explode(request):
            raise cause

        pipeline = Pipeline(
            [
                ActionGroup("setup", always, [lambda r: None]),
                ActionGroup("build", always, [explode]),
            ]
        )

        with pytest.raises(PipelineError) as exc_info:
            pipeline.run(SpaRequest(url="/"))

        err = exc_info.value
        assert err.group_name == "build"
        assert err.stage_name == "explode"
        assert err.cause is cause

    def test_no_later_stage_runs_after_failure(self, spy):
        after = spy("after")

        def explode(request):
            raise ValueError("x")

        pipeline = Pipeline([ActionGroup("build", always, [explode, after])])
        with pytest.raises(PipelineError):
            pipeline.run(SpaRequest(url="/"))
        assert after.count == 0

    def test_reporter_response_is_returned(self):
        def explode(request):
            raise ValueError("x")

        reporter = MagicMock(spec=ErrorReporter)
        reporter.handle.return_value = not_found("handled")
        pipeline = Pipeline([ActionGroup("build", always, [explode])], reporter)

        request = SpaRequest(url="/")
        response = pipeline.run(request)
        assert response.body["meta"]["error"] == "handled"

        (_, error), _ = reporter.handle.call_args
        assert isinstance(error, PipelineError)
        assert isinstance(error.cause, ValueError)

    def test_context_state_error_is_wrapped(self):
        pipeline = Pipeline([ActionGroup("build", always, [set_model, set_model])])
        with pytest.raises(PipelineError) as exc_info:
            pipeline.run(SpaRequest(url="/"))
        assert exc_info.value.stage_name == "set_model"
