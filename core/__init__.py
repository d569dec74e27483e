"""Shared infrastructure: CLI framework, pipeline scaffolding, config and date helpers."""
