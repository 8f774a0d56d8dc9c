"""
The action-group pipeline that turns a page URL into page data.

Architecture::

    context.py     SpaRequest (per-request state) and SpaApiPart
    groups.py      Stage and ActionGroup
    pipeline.py    Pipeline engine (guards, short-circuit, error wrapping)
    responses.py   SpaResponse factories and the status-code policy
    reporter.py    ErrorReporter (logging, debug HTML page)
    cache.py       PageCache port over a CacheBackend
    services.py    SpaServices and ContentToken
    stages.py      Concrete stages
    builder.py     Default group definition and create_pipeline()
"""

from spa_spine.pipeline.builder import build_action_groups, create_pipeline
from spa_spine.pipeline.cache import PageCache, create_page_cache
from spa_spine.pipeline.context import ALL_PARTS, SpaApiPart, SpaRequest
from spa_spine.pipeline.groups import ActionGroup, Stage, always
from spa_spine.pipeline.pipeline import Pipeline
from spa_spine.pipeline.reporter import ErrorReporter
from spa_spine.pipeline.responses import ResponseKind, SpaResponse, apply_status_policy
from spa_spine.pipeline.services import ContentToken, SpaServices
from spa_spine.pipeline.stages import SpaStages, add_trailing_slash, remove_trailing_slash

__all__ = [
    "ALL_PARTS",
    "ActionGroup",
    "ContentToken",
    "ErrorReporter",
    "PageCache",
    "Pipeline",
    "ResponseKind",
    "SpaApiPart",
    "SpaRequest",
    "SpaResponse",
    "SpaServices",
    "SpaStages",
    "Stage",
    "add_trailing_slash",
    "always",
    "apply_status_policy",
    "build_action_groups",
    "create_page_cache",
    "create_pipeline",
    "remove_trailing_slash",
]
