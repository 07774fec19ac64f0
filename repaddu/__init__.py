"""Repository scanning, filtering and grouping, with JSONL and HTML export."""

__version__ = "0.1.0"

__all__ = [
    "alt_formats",
    "binary",
    "component_map",
    "console",
    "core",
    "grouping",
    "jsonlite",
    "logger",
    "pii",
    "traversal",
]