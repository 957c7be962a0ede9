"""Chat backend with lexical retrieval over uploaded documents."""

__version__ = "0.1.0"
