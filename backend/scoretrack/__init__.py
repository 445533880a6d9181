"""ScoreTrack - exam score tracking with flat or negative marking."""

__version__ = "1.0.0"
