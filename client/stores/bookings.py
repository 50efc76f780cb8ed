from core import lifecycle
from client.services.bookings import BookingService
from client.slots import slots_for_date
from .base import Store


def default_pagination():
    return {'page': 1, 'limit': 10, 'total': 0, 'pages': 0}


class BookingStore(Store):
    def __init__(self, api):
        super().__init__()
        self.service = BookingService(api)
        self.bookings = []
        self.current_booking = None
        self.pagination = default_pagination()
        self.availability = None
        self.weekly_slots = []
        self.slot_interval = None

    def clear_current_booking(self):
        self.current_booking = None

    def _replace(self, booking):
        """Swap the server's copy of a booking into the list and the current booking."""
        self.bookings = [booking if item['id'] == booking['id'] else item for item in self.bookings]
        if self.current_booking and self.current_booking['id'] == booking['id']:
            self.current_booking = booking
        return booking

    def _patch(self, booking_id, **changes):
        self.bookings = [dict(item, **changes) if item['id'] == booking_id else item for item in self.bookings]
        if self.current_booking and self.current_booking['id'] == booking_id:
            self.current_booking = dict(self.current_booking, **changes)

    def create_booking(self, booking_data):
        response = self._run(lambda: self.service.create_booking(booking_data), 'Failed to create booking')
        booking = response['data']
        self.current_booking = booking
        self.bookings = [booking] + self.bookings
        return booking

    def fetch_customer_bookings(self, **params):
        response = self._run(lambda: self.service.get_customer_bookings(params), 'Failed to fetch bookings')
        self.bookings = response.get('data', [])
        self.pagination = response.get('pagination', default_pagination())
        return self.bookings

    def fetch_worker_bookings(self, **params):
        response = self._run(lambda: self.service.get_worker_bookings(params), 'Failed to fetch bookings')
        self.bookings = response.get('data', [])
        self.pagination = response.get('pagination', default_pagination())
        return self.bookings

    def fetch_booking(self, booking_id):
        response = self._run(lambda: self.service.get_booking(booking_id), 'Failed to fetch booking')
        self.current_booking = response['data']
        return self.current_booking

    def update_booking_status(self, booking_id, status, reason=None):
        response = self._run(
            lambda: self.service.update_booking_status(booking_id, status, reason), 'Failed to update booking status'
        )
        return self._replace(response['data'])

    def add_review(self, booking_id, rating, comment=''):
        response = self._run(lambda: self.service.add_review(booking_id, rating, comment), 'Failed to add review')
        return self._replace(response['data'])

    def check_availability(self, worker_id, date, time):
        response = self._run(
            lambda: self.service.check_worker_availability(worker_id, date, time), 'Failed to check availability'
        )
        self.availability = response['data']
        return self.availability['available']

    def initiate_service(self, booking_id):
        response = self._run(lambda: self.service.initiate_service(booking_id), 'Failed to initiate service')
        self._patch(booking_id, service_initiated=True)
        return response['data']

    def verify_service_otp(self, booking_id, otp):
        response = self._run(lambda: self.service.verify_service_otp(booking_id, otp), 'Failed to verify OTP')
        return self._replace(response['data'])

    def complete_service(self, booking_id):
        response = self._run(lambda: self.service.complete_service(booking_id), 'Failed to complete service')
        return self._replace(response['data'])

    def update_booking_price(self, booking_id, new_price, reason=''):
        response = self._run(
            lambda: self.service.update_booking_price(booking_id, new_price, reason), 'Failed to update price'
        )
        return self._replace(response['data'])

    def fetch_available_slots(self, worker_id, duration):
        response = self._run(
            lambda: self.service.get_available_slots(worker_id, duration), 'Failed to fetch available slots'
        )
        data = response['data']
        self.weekly_slots = data.get('available_slots', [])
        self.slot_interval = data.get('slot_interval')
        return self.weekly_slots

    def slots_for(self, selected_date):
        return slots_for_date(self.weekly_slots, selected_date)

    @staticmethod
    def actions_for(booking):
        return lifecycle.booking_actions(
            booking.get('status'),
            booking.get('service_initiated', False),
            booking.get('service_started_at'),
            booking.get('service_completed_at'),
        )

    @staticmethod
    def stage_for(booking):
        return lifecycle.service_stage(
            booking.get('status'),
            booking.get('service_initiated', False),
            booking.get('service_started_at'),
            booking.get('service_completed_at'),
        )
