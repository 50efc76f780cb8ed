from client.http import ApiError
from client.services.payments import PaymentService
from .base import Store

PAYMENT_SUCCESS = 'SUCCESS'
PAYMENT_FAILED = 'FAILED'


class PaymentStore(Store):
    def __init__(self, api):
        super().__init__()
        self.service = PaymentService(api)
        self.current_order = None
        self.cash_payment = None
        self.payment_details = None
        self.payment_status = None

    def reset(self):
        self.__init__(self.service.api)

    def create_razorpay_order(self, booking_id, amount=None, currency='INR'):
        response = self._run(
            lambda: self.service.create_razorpay_order(booking_id, amount, currency),
            'Failed to create payment order',
        )
        self.current_order = response.get('data')
        return self.current_order

    def verify_razorpay_payment(self, booking_id, razorpay_order_id, razorpay_payment_id, razorpay_signature):
        try:
            response = self._run(
                lambda: self.service.verify_razorpay_payment(
                    booking_id, razorpay_order_id, razorpay_payment_id, razorpay_signature
                ),
                'Payment verification failed',
            )
        except ApiError:
            self.payment_status = PAYMENT_FAILED
            raise
        self.payment_status = PAYMENT_SUCCESS
        self.current_order = None
        return response.get('data')

    def initiate_cash_payment(self, booking_id):
        response = self._run(
            lambda: self.service.initiate_cash_payment(booking_id), 'Failed to initiate cash payment'
        )
        self.cash_payment = response.get('data')
        return self.cash_payment

    def verify_cash_payment(self, booking_id, otp):
        try:
            response = self._run(
                lambda: self.service.verify_cash_payment(booking_id, otp), 'Failed to verify cash payment'
            )
        except ApiError:
            self.payment_status = PAYMENT_FAILED
            raise
        self.payment_status = PAYMENT_SUCCESS
        self.cash_payment = None
        return response.get('data')

    def fetch_payment_status(self, booking_id):
        response = self._run(lambda: self.service.get_payment_status(booking_id), 'Failed to get payment status')
        self.payment_details = response.get('data')
        return self.payment_details
