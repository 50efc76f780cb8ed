from .bookings import BookingService
from .geocoding import GeocodingService
from .payments import PaymentService
from .search import SearchService
from .verification import VerificationService

__all__ = ['BookingService', 'GeocodingService', 'PaymentService', 'SearchService', 'VerificationService']
