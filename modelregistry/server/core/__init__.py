"""Catalog cache, pricing and query engine."""
