"""Mission Control — task lifecycle, activity feed and notifications for an agent team."""

__version__ = "1.0.0"
