"""Steam library viewer: fetch, reshape and summarize owned games."""

__version__ = "0.1.0"
