"""Data models module."""

from polygen.models.build import BuildConfig, ClusteringConfig, Language, ProjectMapping

__all__ = [
    "BuildConfig",
    "ClusteringConfig",
    "Language",
    "ProjectMapping",
]
