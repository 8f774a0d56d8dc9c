"""Allow ``python -m spa_spine``."""

from spa_spine.cli.app import app

app()
