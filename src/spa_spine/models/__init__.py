"""Page-data models: the JSON body, model builders and meta data."""

from spa_spine.models.builders import ModelBuilders
from spa_spine.models.data import SpaDataModel
from spa_spine.models.meta import (
    SpaMetaData,
    SpaMetaLink,
    SpaMetaScript,
    SpaOpenGraphProperties,
    TwitterSummaryCard,
    TwitterSummaryLargeImageCard,
)

__all__ = [
    "ModelBuilders",
    "SpaDataModel",
    "SpaMetaData",
    "SpaMetaLink",
    "SpaMetaScript",
    "SpaOpenGraphProperties",
    "TwitterSummaryCard",
    "TwitterSummaryLargeImageCard",
]
