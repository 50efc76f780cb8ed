import hashlib
import hmac
import logging
from decimal import Decimal, ROUND_HALF_UP

import requests
from django.conf import settings

from core.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)


def to_paise(amount):
    return int((Decimal(str(amount)) * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def create_razorpay_order(booking, amount, currency):
    """
    Create a Razorpay order for a booking.
    Returns the order as sent back by Razorpay or raises PaymentGatewayError.
    """
    if not settings.RAZORPAY_KEY_ID or not settings.RAZORPAY_KEY_SECRET:
        raise PaymentGatewayError("Online payments are not configured")

    payload = {
        'amount': to_paise(amount),
        'currency': currency,
        'receipt': f"booking_{booking.id}",
        'notes': {
            'booking_id': str(booking.id),
            'customer_id': str(booking.customer_id),
            'worker_id': str(booking.worker_id),
        },
    }
    response = None
    try:
        logger.info(f"Creating Razorpay order for booking {booking.id}: {payload['amount']} {currency}")
        response = requests.post(
            f"{settings.RAZORPAY_BASE_URL}/orders",
            json=payload,
            auth=(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET),
            timeout=10,
        )
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.HTTPError as e:
        logger.error(f"Razorpay HTTP error: {str(e)}, Response: {response.text}")
        raise PaymentGatewayError("Payment gateway rejected the order")
    except requests.exceptions.RequestException as e:
        logger.error(f"Razorpay request failed: {str(e)}")
        raise PaymentGatewayError("Payment gateway is unreachable")
    except ValueError as e:
        logger.error(f"Razorpay returned invalid JSON: {str(e)}")
        raise PaymentGatewayError("Payment gateway returned an invalid response")

    if not data.get('id'):
        logger.error(f"Razorpay order response without id: {data}")
        raise PaymentGatewayError("Payment gateway returned an invalid response")
    logger.info(f"Razorpay order {data['id']} created for booking {booking.id}")
    return data


def _signature(message, secret):
    if isinstance(message, str):
        message = message.encode('utf-8')
    return hmac.new(secret.encode('utf-8'), message, hashlib.sha256).hexdigest()


def verify_payment_signature(order_id, payment_id, signature):
    """Checkout signature: HMAC-SHA256 of "<order_id>|<payment_id>" keyed with the API secret."""
    if not settings.RAZORPAY_KEY_SECRET or not signature:
        return False
    expected = _signature(f"{order_id}|{payment_id}", settings.RAZORPAY_KEY_SECRET)
    return hmac.compare_digest(expected, signature)


def verify_webhook_signature(body, signature):
    if not settings.RAZORPAY_WEBHOOK_SECRET or not signature:
        return False
    expected = _signature(body, settings.RAZORPAY_WEBHOOK_SECRET)
    return hmac.compare_digest(expected, signature)
