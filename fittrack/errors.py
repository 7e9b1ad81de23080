# backend/fittrack/errors.py


class StreakError(Exception):
    """Base class for failures raised while reading or writing streak data."""


class FetchFailure(StreakError):
    """Reading workouts or the existing streak record failed."""


class PersistFailure(StreakError):
    """Writing the streak record failed; nothing was committed."""
