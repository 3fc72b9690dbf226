"""Data model, merging, comparison and extraction for F06 result blocks."""

__version__ = "0.1.0"

__all__ = [
    "blocks",
    "blocktypes",
    "compare",
    "diff",
    "elements",
    "extraction",
    "f06file",
    "flavour",
    "indexing",
]