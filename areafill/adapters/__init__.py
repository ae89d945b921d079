from .normalize import normalize_band, normalize_xy

__all__ = ["normalize_band", "normalize_xy"]
