import logging

import requests

logger = logging.getLogger(__name__)

REVERSE_GEOCODE_URL = 'https://api.bigdatacloud.net/data/reverse-geocode-client'

PERMISSION_DENIED = 1
POSITION_UNAVAILABLE = 2
TIMEOUT = 3

GEOLOCATION_ERRORS = {
    PERMISSION_DENIED: 'Location access denied. Please allow location access to use this feature.',
    POSITION_UNAVAILABLE: 'Location information unavailable.',
    TIMEOUT: 'Location request timed out.',
}
UNKNOWN_GEOLOCATION_ERROR = 'An unknown error occurred while getting location.'


def geolocation_error_message(code):
    """Map a device geolocation error code to the message shown to the user."""
    return GEOLOCATION_ERRORS.get(code, UNKNOWN_GEOLOCATION_ERROR)


def coordinates_label(latitude, longitude):
    return f"Near {latitude:.4f}, {longitude:.4f}"


class GeocodingService:
    def __init__(self, session=None, url=REVERSE_GEOCODE_URL, timeout=10):
        self.session = session or requests.Session()
        self.url = url
        self.timeout = timeout

    def reverse_geocode(self, latitude, longitude):
        """Human readable place name for a coordinate; falls back to the rounded coordinates."""
        try:
            response = self.session.get(
                self.url,
                params={'latitude': latitude, 'longitude': longitude, 'localityLanguage': 'en'},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning(f"Reverse geocoding failed for {latitude}, {longitude}: {str(e)}")
            return coordinates_label(latitude, longitude)
        return data.get('locality') or data.get('city') or data.get('principalSubdivision') or 'Current Location'
