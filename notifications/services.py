# ==================== NOTIFICATIONS/SERVICES.PY ====================
"""Outbound email and SMS.

Every sender returns True on success and False on failure. Failures are
logged and never raised, a booking must not fail because a message could
not be delivered.
"""
import logging
import smtplib

from django.conf import settings
from django.core.mail import send_mail
from django.utils import timezone
from django.utils.html import format_html
from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from .models import SupportMessage

logger = logging.getLogger(__name__)


def send_email(to, subject, text, html=None):
    if not to:
        logger.warning(f"No recipient for email '{subject}'")
        return False
    try:
        send_mail(
            subject,
            text,
            settings.DEFAULT_FROM_EMAIL,
            [to],
            html_message=html,
            fail_silently=False,
        )
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Error sending email to {to}: {str(e)}")
        return False
    logger.info(f"Email '{subject}' sent to {to}")
    return True


def get_twilio_client():
    return Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)


def send_sms(to, body):
    if not to:
        logger.warning("No phone number for SMS")
        return False
    if not (settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN and settings.TWILIO_FROM_NUMBER):
        logger.warning("Twilio is not configured, SMS not sent")
        return False
    try:
        message = get_twilio_client().messages.create(
            body=body,
            from_=settings.TWILIO_FROM_NUMBER,
            to=to
        )
    except (TwilioException, OSError) as e:
        logger.error(f"Error sending SMS to {to}: {str(e)}")
        return False
    logger.info(f"SMS {message.sid} sent to {to}")
    return True


def _vehicle_label(vehicle_type):
    return '2-wheeler' if vehicle_type == 'two_wheeler' else '4-wheeler'


def booking_confirmation_context(booking):
    start = timezone.localtime(booking.start_time)
    end = timezone.localtime(booking.end_time)
    return {
        'booking_id': booking.id,
        'name': booking.contact_name or booking.user.get_full_name() or booking.user.username,
        'spot': booking.spot.name,
        'address': booking.spot.address,
        'vehicle': _vehicle_label(booking.vehicle_type),
        'duration': booking.duration_minutes,
        'start': start.strftime('%d %b %Y %H:%M'),
        'end': end.strftime('%d %b %Y %H:%M'),
        'amount': booking.amount_due,
        'currency': settings.PRICING_CURRENCY,
    }


def send_booking_confirmation(booking):
    """Email and SMS the booking details, and post them to the user's support chat

    Returns True when at least one channel delivered the message.
    """
    ctx = booking_confirmation_context(booking)

    subject = f"Booking Confirmed - {ctx['spot']}"
    text = (
        f"Hi {ctx['name']},\n\n"
        f"Your parking booking #{ctx['booking_id']} is confirmed.\n"
        f"Location: {ctx['spot']}, {ctx['address']}\n"
        f"Vehicle: {ctx['vehicle']}\n"
        f"Duration: {ctx['duration']} minutes\n"
        f"Start: {ctx['start']}\n"
        f"End: {ctx['end']}\n"
        f"Amount: {ctx['currency']} {ctx['amount']}\n"
    )
    html = format_html(
        "<h2>Booking Confirmed</h2>"
        "<p>Hi {name}, your parking booking #{booking_id} is confirmed.</p>"
        "<table>"
        "<tr><td>Location</td><td>{spot}, {address}</td></tr>"
        "<tr><td>Vehicle</td><td>{vehicle}</td></tr>"
        "<tr><td>Duration</td><td>{duration} minutes</td></tr>"
        "<tr><td>Start</td><td>{start}</td></tr>"
        "<tr><td>End</td><td>{end}</td></tr>"
        "<tr><td>Amount</td><td>{currency} {amount}</td></tr>"
        "</table>",
        **ctx
    )
    sms = (
        f"Booking #{ctx['booking_id']} confirmed at {ctx['spot']}, {ctx['address']}. "
        f"{ctx['start']} to {ctx['end']}. Amount: {ctx['currency']} {ctx['amount']}"
    )

    email_sent = send_email(booking.contact_email or booking.user.email, subject, text, html)
    sms_sent = send_sms(booking.contact_phone or booking.user.phone_number, sms)

    SupportMessage.objects.create(
        owner=booking.user,
        message=f"Booking confirmed for {ctx['vehicle']} at {ctx['address']}. Your spot is ready!",
        is_from_user=False
    )
    return email_sent or sms_sent


def send_otp(phone_number, code):
    minutes = settings.OTP_TTL_SECONDS // 60
    return send_sms(phone_number, f"Your ParkMaster verification code is {code}. "
                                  f"It is valid for {minutes} minutes.")
