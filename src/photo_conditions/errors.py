"""Exception hierarchy for the photography conditions engine.

Only real failures are exceptions. Astronomical events that do not happen on
a given day (polar day/night) and comparisons without enough usable scores
are represented as data (``None`` fields, ``ComparisonResult.insufficient_data``).
"""


class PhotoConditionsError(Exception):
    """Base exception for photo_conditions errors."""


class InvalidCoordinateError(PhotoConditionsError, ValueError):
    """Raised when a latitude or longitude is outside its valid range."""

    def __init__(self, latitude: float, longitude: float):
        super().__init__(
            f"Invalid coordinates ({latitude}, {longitude}): latitude must be "
            "within [-90, 90] and longitude within [-180, 180]"
        )
        self.latitude = latitude
        self.longitude = longitude


class WeatherFetchError(PhotoConditionsError):
    """Raised when weather data for a single location could not be fetched."""

    def __init__(self, message: str, location_id: str | None = None):
        super().__init__(message)
        self.location_id = location_id
