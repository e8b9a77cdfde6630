"""Transaction digest indexer for Sui checkpoints."""

__version__ = "0.1.0"
