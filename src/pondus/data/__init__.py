"""Bundled data files (the default model alias dataset)."""
