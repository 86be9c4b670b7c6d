"""httpfile — run HTTP requests described in ``.http`` files."""

__version__ = "0.1.0"
