__version__ = "1.0.0"
RELEASE_DATE = "2026-10-19"
