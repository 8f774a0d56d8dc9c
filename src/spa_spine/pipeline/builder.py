"""
Default pipeline definition.

Four groups, built once and shared by every request:

- ``setup`` (always): URL normalization, domain and culture, cache read
- ``build`` (no data model yet): site, content, redirects, not found, models
- ``finalize`` (always): cache write
- ``exit`` (always, also after a terminal response): outcome logging
"""

from __future__ import annotations

from collections.abc import Iterable

from spa_spine.core.settings import SpaSettings, TrailingSlashPolicy
from spa_spine.pipeline.context import SpaRequest
from spa_spine.pipeline.groups import ActionGroup, Stage, StageFunc, always
from spa_spine.pipeline.pipeline import Pipeline
from spa_spine.pipeline.reporter import ErrorReporter
from spa_spine.pipeline.services import SpaServices
from spa_spine.pipeline.stages import SpaStages, add_trailing_slash, remove_trailing_slash

_SLASH_STAGES = {
    TrailingSlashPolicy.ADD: add_trailing_slash,
    TrailingSlashPolicy.REMOVE: remove_trailing_slash,
}


def needs_build(request: SpaRequest) -> bool:
    return request.data_model is None


def build_action_groups(
    stages: SpaStages,
    *,
    trailing_slash: TrailingSlashPolicy = TrailingSlashPolicy.NONE,
    custom_models: Iterable[Stage | StageFunc] = (),
) -> list[ActionGroup]:
    """
    Assemble the default groups.

    ``custom_models`` run after the content and navigation models are built
    and before the data model is assembled, so they can adjust
    ``request.content_model`` and friends.
    """
    setup: list[Stage | StageFunc] = [stages.init_arguments]
    slash_stage = _SLASH_STAGES.get(trailing_slash)
    if slash_stage is not None:
        setup.append(slash_stage)
    setup += [
        stages.find_domain_and_culture,
        stages.update_arguments,
        stages.read_from_cache,
    ]

    build: list[Stage | StageFunc] = [
        stages.init_site,
        stages.content_lookup,
        stages.setup_culture,
        stages.init_site_model,
        stages.handle_outbound_redirects,
        stages.handle_not_found,
        stages.init_content_model,
        stages.init_navigation_model,
        *custom_models,
        stages.init_data_model,
    ]

    return [
        ActionGroup("setup", always, setup),
        ActionGroup("build", needs_build, build),
        ActionGroup("finalize", always, [stages.push_to_cache]),
        ActionGroup("exit", always, [stages.log_outcome], run_on_exit=True),
    ]


def create_pipeline(
    settings: SpaSettings,
    services: SpaServices,
    *,
    custom_models: Iterable[Stage | StageFunc] = (),
) -> Pipeline:
    stages = SpaStages(services, default_culture=settings.default_culture)
    groups = build_action_groups(
        stages,
        trailing_slash=settings.trailing_slash,
        custom_models=custom_models,
    )
    return Pipeline(groups, ErrorReporter(debug=settings.debug))
