"""
Feature modules live under this package.

Each module owns its routes, templates, models and store, and reuses the
platform primitives (config, DB engine, error pages).
"""
