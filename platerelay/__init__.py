"""platerelay — nameplate photo to structured equipment record relay."""

__version__ = "0.3.0"
