"""Build model struct source and query-building code from table metadata, object descriptions and SQL-annotated interface methods."""

__version__ = "0.1.0"

__all__ = [
    "build",
    "clause",
    "column",
    "helper",
    "imports",
    "interface",
    "model",
    "naming",
    "params",
    "query",
    "render",
    "section",
]