"""
Action-group pipeline engine.

Manifesto:
    The pipeline runs a fixed, ordered list of action groups against one
    request context. Groups decide *whether* to run (guard), stages decide
    *what* happens. Any stage can end the run on purpose by setting a
    terminal response; any stage that raises ends it by failure.

Architecture:
    ::

        run(request)
          │
          ├── for group in groups:
          │     ├── terminated?   → skip (unless group.run_on_exit)
          │     ├── guard false?  → skip
          │     └── for stage in group:
          │           ├── stage(request)   raises → PipelineError(group, stage, cause)
          │           └── response set?    → stop this group, terminate run
          │
          ├── no response + data model → ok(data model, response_status_code)
          ├── no response + no model   → fallback error response
          └── exception                → ErrorReporter.handle() → response or re-raise

Guardrails:
    - Stages run strictly in order and see each other's writes
    - A terminal response skips every later group without evaluating its
      guard; only ``run_on_exit`` groups still run
    - No retries; a failed stage aborts the whole run

Tags:
    spa-spine, pipeline, action-group, short-circuit, orchestration
"""

from __future__ import annotations

from collections.abc import Sequence

from spa_spine.core.errors import PipelineError
from spa_spine.core.logging import get_logger
from spa_spine.pipeline.context import SpaRequest
from spa_spine.pipeline.groups import ActionGroup
from spa_spine.pipeline.reporter import ErrorReporter
from spa_spine.pipeline.responses import SpaResponse, error, ok

log = get_logger(__name__)


class Pipeline:
    """Runs action groups against a :class:`SpaRequest` and returns a response."""

    def __init__(self, groups: Sequence[ActionGroup], reporter: ErrorReporter | None = None):
        self._groups = tuple(groups)
        self.reporter = reporter or ErrorReporter()

    @property
    def groups(self) -> tuple[ActionGroup, ...]:
        return self._groups

    def run(self, request: SpaRequest) -> SpaResponse:
        """
        Execute the pipeline for one request.

        Returns:
            The terminal response, a success response wrapping the data
            model, or a fallback error response.

        Raises:
            PipelineError: A stage failed and the error reporter did not
                supply a response.
        """
        try:
            self._execute(request)

            if request.response is None and request.data_model is not None:
                model = request.data_model.with_execute_time(request.elapsed_ms())
                request.response = ok(model, request.response_status_code)

            if request.response is None:
                log.warning("pipeline.exhausted", url=request.url)
                request.response = error()

            return request.response

        except Exception as exc:
            response = self.reporter.handle(request, exc)
            if response is None:
                raise
            request.response = response
            return response

    def _execute(self, request: SpaRequest) -> None:
        terminated = False

        for group in self._groups:
            if terminated:
                if not group.run_on_exit:
                    continue
            elif not group.should_run(request):
                log.debug("pipeline.group_skipped", group=group.name)
                continue

            self._run_group(group, request, short_circuit=not terminated)

            if request.has_response():
                terminated = True

    def _run_group(self, group: ActionGroup, request: SpaRequest, *, short_circuit: bool) -> None:
        for stage in group.stages():
            log.debug("pipeline.stage", group=group.name, stage=stage.name)

            try:
                stage(request)
            except Exception as exc:
                raise PipelineError(group.name, stage.name, exc) from exc

            if short_circuit and request.has_response():
                log.debug(
                    "pipeline.short_circuit",
                    group=group.name,
                    stage=stage.name,
                    kind=request.response.kind.value,
                )
                break
