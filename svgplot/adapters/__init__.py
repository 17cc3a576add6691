from svgplot.adapters.normalize import normalize_samples, normalize_xy

__all__ = ["normalize_samples", "normalize_xy"]
