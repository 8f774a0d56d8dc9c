"""Command line interface (``spa-spine``)."""
