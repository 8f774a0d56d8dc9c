"""FastAPI transport for the page-data pipeline."""

from spa_spine.api.app import create_app

__all__ = ["create_app"]
