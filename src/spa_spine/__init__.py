"""spa-spine: page-data API for single page applications backed by a content tree."""

__version__ = "0.1.0"
