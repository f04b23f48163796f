"""BriefSnap: news API, per-instance cache layer and edge functions."""

__version__ = "1.0.0"
