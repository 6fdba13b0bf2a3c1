"""Canned replies for the support chat"""

# Checked in order, first keyword found in the message wins
REPLIES = (
    ('cancel', "You can cancel a booking that has not started from My Bookings. "
               "Any space you were holding is released straight away."),
    ('payment', "We accept UPI and cards through Razorpay. If a payment failed, "
                "your booking stays pending and you can retry from the booking page."),
    ('booking', "To book, pick a spot on the map, choose your vehicle type and duration, "
                "then pay to confirm. Prices depend on how busy the spot is and the time of day."),
    ('vehicle', "Add your vehicles under Account. Bikes use two-wheeler spaces, "
                "cars and other vehicles use four-wheeler spaces."),
)

FALLBACK_REPLY = ("Thanks for reaching out! A member of our team will get back to you shortly. "
                  "You can also ask about bookings, payments, cancellations or vehicles.")


def reply_to(message):
    text = message.lower()
    for keyword, reply in REPLIES:
        if keyword in text:
            return reply
    return FALLBACK_REPLY
