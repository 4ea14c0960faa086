from .rows import normalize_rows

__all__ = ["normalize_rows"]
