"""Configuration checking, recall metrics, index-file and tuning helpers for ANN benchmarks."""

__version__ = "0.1.0"
__all__ = ["config", "vectors", "recall", "index_file", "tuning"]