class BookingService:
    """One method per /api/bookings endpoint; each returns the response envelope."""

    def __init__(self, api):
        self.api = api

    def create_booking(self, booking_data):
        return self.api.post('/api/bookings/', json=booking_data)

    def get_customer_bookings(self, params=None):
        return self.api.get('/api/bookings/customer/', params=params)

    def get_worker_bookings(self, params=None):
        return self.api.get('/api/bookings/worker/', params=params)

    def get_booking(self, booking_id):
        return self.api.get(f'/api/bookings/{booking_id}/')

    def update_booking_status(self, booking_id, status, reason=None):
        body = {'status': status}
        if reason:
            body['reason'] = reason
        return self.api.patch(f'/api/bookings/{booking_id}/status/', json=body)

    def add_review(self, booking_id, rating, comment=''):
        return self.api.post(f'/api/bookings/{booking_id}/review/', json={'rating': rating, 'comment': comment})

    def check_worker_availability(self, worker_id, date, time):
        return self.api.get(f'/api/bookings/worker/{worker_id}/availability/', params={'date': date, 'time': time})

    def initiate_service(self, booking_id):
        return self.api.post(f'/api/bookings/{booking_id}/initiate-service/')

    def verify_service_otp(self, booking_id, otp):
        return self.api.post(f'/api/bookings/{booking_id}/verify-service-otp/', json={'otp': otp})

    def complete_service(self, booking_id):
        return self.api.post(f'/api/bookings/{booking_id}/complete-service/')

    def update_booking_price(self, booking_id, new_price, reason=''):
        return self.api.patch(f'/api/bookings/{booking_id}/price/', json={'new_price': new_price, 'reason': reason})

    def get_available_slots(self, worker_id, duration):
        return self.api.get(f'/api/bookings/available-slot/{worker_id}/', params={'duration': duration})
