"""Failure categories raised by the weather client, geolocation and storage."""


class WeatherError(Exception):
    """Base class for weather client failures."""


class ApiStatusError(WeatherError):
    """The API answered with a non-2xx status (or an unusable 2xx body)."""

    def __init__(self, status: int, body: str = ""):
        super().__init__(f"HTTP {status}: {body[:200]}")
        self.status = status
        self.body = body


class NetworkUnavailableError(WeatherError):
    """The request went out but no response came back."""


class RequestSetupError(WeatherError):
    """The request could not be built or sent."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class GeolocationError(Exception):
    """Base class for position lookup failures."""


class GeolocationDenied(GeolocationError):
    pass


class GeolocationUnavailable(GeolocationError):
    pass


class GeolocationTimeout(GeolocationError):
    pass


class StorageUnavailable(Exception):
    """Persisted favorites could not be read."""
