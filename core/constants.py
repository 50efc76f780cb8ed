# core/constants.py
BOOKING_PENDING = 'PENDING'
BOOKING_ACCEPTED = 'ACCEPTED'
BOOKING_PAYMENT_PENDING = 'PAYMENT_PENDING'
BOOKING_COMPLETED = 'COMPLETED'
BOOKING_CANCELLED = 'CANCELLED'
BOOKING_DECLINED = 'DECLINED'

BOOKING_STATUS_CHOICES = (
    (BOOKING_PENDING, 'Pending'),                  # Customer requested, awaiting worker response
    (BOOKING_ACCEPTED, 'Accepted'),                # Worker accepted, service not finished
    (BOOKING_PAYMENT_PENDING, 'Payment Pending'),  # Service done, waiting for payment
    (BOOKING_COMPLETED, 'Completed'),              # Paid and closed
    (BOOKING_CANCELLED, 'Cancelled'),              # Cancelled by customer
    (BOOKING_DECLINED, 'Declined'),                # Declined by worker
)

# Bookings that hold a worker's date/time when a new booking is requested
ACTIVE_BOOKING_STATUSES = (BOOKING_PENDING, BOOKING_ACCEPTED)

# Bookings that block a slot in the weekly slot listing
SLOT_BLOCKING_STATUSES = (BOOKING_PENDING, BOOKING_ACCEPTED, BOOKING_PAYMENT_PENDING)

PAYMENT_PENDING = 'PENDING'
PAYMENT_COMPLETED = 'COMPLETED'
PAYMENT_FAILED = 'FAILED'

PAYMENT_STATUS_CHOICES = (
    (PAYMENT_PENDING, 'Pending'),
    (PAYMENT_COMPLETED, 'Completed'),
    (PAYMENT_FAILED, 'Failed'),
)

PAYMENT_TYPE_CASH = 'CASH'
PAYMENT_TYPE_RAZORPAY = 'RAZORPAY'

PAYMENT_TYPE_CHOICES = (
    (PAYMENT_TYPE_CASH, 'Cash'),
    (PAYMENT_TYPE_RAZORPAY, 'Razorpay'),
    ('UPI', 'UPI'),
    ('CREDIT_CARD', 'Credit Card'),
    ('DEBIT_CARD', 'Debit Card'),
    ('NET_BANKING', 'Net Banking'),
)

VERIFICATION_UNVERIFIED = 'UNVERIFIED'
VERIFICATION_PENDING = 'PENDING'
VERIFICATION_APPROVED = 'APPROVED'
VERIFICATION_REJECTED = 'REJECTED'

VERIFICATION_STATUS_CHOICES = (
    (VERIFICATION_UNVERIFIED, 'Unverified'),  # Documents missing
    (VERIFICATION_PENDING, 'Pending'),        # Submitted, awaiting review
    (VERIFICATION_APPROVED, 'Approved'),
    (VERIFICATION_REJECTED, 'Rejected'),
)

VERIFICATION_DOCUMENTS = ('selfie', 'aadhar', 'police_verification')

AVAILABILITY_STATUS_CHOICES = (
    ('available', 'Available'),
    ('busy', 'Busy'),
    ('off-duty', 'Off Duty'),
)

PRICING_TYPE_CHOICES = (
    ('HOURLY', 'Hourly'),
    ('FIXED', 'Fixed'),
)

SEARCH_SORT_CHOICES = ('relevance', 'rating', 'price', 'distance')

WEEKDAYS = ('Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday')

PRICE_FILTER_RANGE = (0, 100000)
RATING_FILTER_RANGE = (0, 5)
DEFAULT_PRICE_RANGE = (0, 10000)
