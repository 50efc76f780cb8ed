"""
Booking lifecycle rules shared by the API and the client library.

Nothing here touches the database: the booking serializer and the client
stores both feed plain values in and get the same answers back.
"""
from .constants import (
    BOOKING_PENDING, BOOKING_ACCEPTED, BOOKING_PAYMENT_PENDING,
    BOOKING_COMPLETED, BOOKING_CANCELLED, BOOKING_DECLINED,
)

ACCEPT = 'accept'
DECLINE = 'decline'
START_SERVICE = 'start_service'
VERIFY_OTP = 'verify_otp'
COMPLETE_SERVICE = 'complete_service'
AWAIT_PAYMENT = 'await_payment'
COMPLETED = 'completed'

ACTION_LABELS = {
    ACCEPT: 'Accept',
    DECLINE: 'Decline',
    START_SERVICE: 'Start Service',
    VERIFY_OTP: 'Verify OTP',
    COMPLETE_SERVICE: 'Complete Service',
    AWAIT_PAYMENT: 'Complete Payment First',
    COMPLETED: 'Completed',
}

# Actions shown to the worker but not clickable
DISABLED_ACTIONS = frozenset([AWAIT_PAYMENT, COMPLETED])

STAGE_READY = 'ready'
STAGE_AWAITING_OTP = 'awaiting_otp'
STAGE_IN_PROGRESS = 'in_progress'
STAGE_COMPLETED = 'completed'

STAGE_LABELS = {
    STAGE_READY: 'Ready to Start',
    STAGE_AWAITING_OTP: 'Waiting for OTP',
    STAGE_IN_PROGRESS: 'Service in Progress',
    STAGE_COMPLETED: 'Service Completed',
}

TERMINAL_STATUSES = frozenset([BOOKING_CANCELLED, BOOKING_DECLINED])

# target status -> statuses it may be reached from
STATUS_TRANSITIONS = {
    BOOKING_ACCEPTED: (BOOKING_PENDING,),
    BOOKING_DECLINED: (BOOKING_PENDING,),
    BOOKING_COMPLETED: (BOOKING_ACCEPTED,),
    BOOKING_CANCELLED: (BOOKING_PENDING, BOOKING_ACCEPTED),
}

# target status -> role allowed to request it
TRANSITION_ACTORS = {
    BOOKING_ACCEPTED: 'worker',
    BOOKING_DECLINED: 'worker',
    BOOKING_COMPLETED: 'worker',
    BOOKING_CANCELLED: 'customer',
}


def can_transition(current, target):
    return current in STATUS_TRANSITIONS.get(target, ())


def booking_actions(status, service_initiated=False, service_started_at=None, service_completed_at=None):
    """
    Return the worker-side actions for a booking, in display order.

    The result depends only on the four arguments. Timestamps are only
    tested for presence so ISO strings and datetimes behave the same.
    """
    if status == BOOKING_PENDING:
        return (ACCEPT, DECLINE)
    if status in (BOOKING_ACCEPTED, BOOKING_PAYMENT_PENDING):
        if status == BOOKING_PAYMENT_PENDING or service_completed_at:
            return (AWAIT_PAYMENT,)
        if not service_initiated:
            return (START_SERVICE,)
        if not service_started_at:
            return (VERIFY_OTP,)
        return (COMPLETE_SERVICE,)
    if status == BOOKING_COMPLETED:
        return (COMPLETED,)
    return ()


def service_stage(status, service_initiated=False, service_started_at=None, service_completed_at=None):
    if status not in (BOOKING_ACCEPTED, BOOKING_PAYMENT_PENDING):
        return None
    if service_completed_at:
        return STAGE_COMPLETED
    if service_started_at:
        return STAGE_IN_PROGRESS
    if service_initiated:
        return STAGE_AWAITING_OTP
    return STAGE_READY
