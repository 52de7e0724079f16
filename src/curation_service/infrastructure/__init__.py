"""Adapters for external collaborators: key-value store and product catalog."""
