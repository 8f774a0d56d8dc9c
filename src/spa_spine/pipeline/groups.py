"""
Stages and action groups — the building blocks of a pipeline definition.

A :class:`Stage` is a named callable ``(SpaRequest) -> None``. An
:class:`ActionGroup` is a guard predicate plus an ordered, fixed tuple of
stages. Both are built once when the pipeline is defined and shared,
read-only, by every request.

Example::

    build = ActionGroup(
        "build",
        lambda request: request.data_model is None,
        [Stage.of(stages.content_lookup), Stage.of(stages.init_data_model)],
    )
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from spa_spine.pipeline.context import SpaRequest

StageFunc = Callable[["SpaRequest"], None]
Guard = Callable[["SpaRequest"], bool]


@dataclass(frozen=True)
class Stage:
    """A named unit of pipeline work."""

    name: str
    func: StageFunc

    @classmethod
    def of(cls, func: StageFunc, name: str | None = None) -> Stage:
        """Wrap a function (or bound method), naming it after the function."""
        return cls(name or getattr(func, "__name__", repr(func)), func)

    def __call__(self, request: SpaRequest) -> None:
        self.func(request)


def always(request: SpaRequest) -> bool:
    return True


class ActionGroup:
    """
    Ordered stages guarded by a predicate.

    Args:
        name: Group name, reported in pipeline errors and logs
        guard: Side-effect free predicate evaluated once per run
        stages: Stages (or plain callables) in execution order
        run_on_exit: Run this group even after an earlier group produced a
            terminal response. The guard is not consulted in that case.
    """

    def __init__(
        self,
        name: str,
        guard: Guard,
        stages: Iterable[Stage | StageFunc],
        *,
        run_on_exit: bool = False,
    ):
        self._name = name
        self._guard = guard
        self._stages = tuple(s if isinstance(s, Stage) else Stage.of(s) for s in stages)
        self._run_on_exit = run_on_exit

    @property
    def name(self) -> str:
        return self._name

    @property
    def run_on_exit(self) -> bool:
        return self._run_on_exit

    def should_run(self, request: SpaRequest) -> bool:
        return bool(self._guard(request))

    def stages(self) -> tuple[Stage, ...]:
        return self._stages

    def __repr__(self) -> str:
        names = ", ".join(stage.name for stage in self._stages)
        return f"ActionGroup({self._name!r}, stages=[{names}])"
