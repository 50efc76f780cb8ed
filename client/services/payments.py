class PaymentService:
    def __init__(self, api):
        self.api = api

    def create_razorpay_order(self, booking_id, amount=None, currency='INR'):
        body = {'booking_id': booking_id, 'currency': currency}
        if amount is not None:
            body['amount'] = amount
        return self.api.post('/api/payments/razorpay/create-order/', json=body)

    def verify_razorpay_payment(self, booking_id, razorpay_order_id, razorpay_payment_id, razorpay_signature):
        return self.api.post('/api/payments/razorpay/verify/', json={
            'booking_id': booking_id,
            'razorpay_order_id': razorpay_order_id,
            'razorpay_payment_id': razorpay_payment_id,
            'razorpay_signature': razorpay_signature,
        })

    def initiate_cash_payment(self, booking_id):
        return self.api.post('/api/payments/cash/initiate/', json={'booking_id': booking_id})

    def verify_cash_payment(self, booking_id, otp):
        return self.api.post('/api/payments/cash/verify/', json={'booking_id': booking_id, 'otp': otp})

    def get_payment_status(self, booking_id):
        return self.api.get(f'/api/payments/status/{booking_id}/')
