"""Derived artifacts: the places index and the stats summary."""

from maginhawa.indexing.artifacts import write_json_artifact
from maginhawa.indexing.collection import load_collection
from maginhawa.indexing.index_builder import build_index, publish_index, run_index_build
from maginhawa.indexing.stats_builder import build_stats, publish_stats, run_stats_build

__all__ = [
    "build_index",
    "build_stats",
    "load_collection",
    "publish_index",
    "publish_stats",
    "run_index_build",
    "run_stats_build",
    "write_json_artifact",
]
