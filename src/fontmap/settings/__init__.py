"""Clustering options and their JSON schema."""

from __future__ import annotations

from .options import ClusterOptions, load_options
from .schema import DEFAULT_OPTIONS, OPTIONS_SCHEMA, merge_with_defaults, validate_options

__all__ = [
    "ClusterOptions",
    "DEFAULT_OPTIONS",
    "OPTIONS_SCHEMA",
    "load_options",
    "merge_with_defaults",
    "validate_options",
]
