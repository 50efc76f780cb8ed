import hmac
import logging
import secrets
from django.conf import settings
from django.core.mail import send_mail
from twilio.rest import Client as TwilioClient

logger = logging.getLogger(__name__)


def generate_otp():
    """Six digit one-time code."""
    return str(secrets.randbelow(900000) + 100000)


def otp_matches(expected, supplied):
    if not expected or not supplied:
        return False
    return hmac.compare_digest(str(expected), str(supplied).strip())


def send_notification(user, subject, email_message, sms_message=None):
    """
    Send notifications to users via email and SMS.

    Delivery failures are logged and never raised: a booking or payment
    must not fail because a message could not be sent.

    Args:
        user: User object to send notification to
        subject: Email subject
        email_message: Email message content
        sms_message: SMS message content, skipped when empty
    """
    if user.email:
        try:
            send_mail(
                subject=subject,
                message=email_message,
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[user.email],
                fail_silently=False
            )
            logger.info(f"Email notification sent to user {user.id}")
        except Exception as e:
            logger.error(f"Failed to send email to user {user.id}: {str(e)}")

    if sms_message and user.phone_number and settings.TWILIO_ACCOUNT_SID:
        try:
            client = TwilioClient(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
            client.messages.create(
                body=sms_message,
                from_=settings.TWILIO_PHONE_NUMBER,
                to=user.phone_number
            )
            logger.info(f"SMS notification sent to user {user.id}")
        except Exception as e:
            logger.error(f"Failed to send SMS to user {user.id}: {str(e)}")
