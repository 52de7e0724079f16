"""Storefront curation service: curated product lists and engagement tracking."""

__version__ = "1.0.0"
