"""Root of the WeeklyKeeper exception hierarchy."""


class WeeklyKeeperError(Exception):
    """Base exception for every error raised by WeeklyKeeper."""
    pass
