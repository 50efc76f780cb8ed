from .bookings import BookingStore
from .payments import PaymentStore
from .search import SearchStore
from .verification import VerificationStore

__all__ = ['BookingStore', 'PaymentStore', 'SearchStore', 'VerificationStore']
