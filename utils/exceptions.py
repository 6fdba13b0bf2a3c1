# ==================== UTILS/EXCEPTIONS.PY ====================
from rest_framework.exceptions import APIException
from rest_framework import status

class ParkingUnavailable(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'No spaces are available at this parking spot for your vehicle type.'
    default_code = 'parking_unavailable'


class BookingConflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'This spot is already booked for the selected time period.'
    default_code = 'booking_conflict'


class VehicleNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Vehicle not found or not registered.'
    default_code = 'vehicle_not_found'


class PaymentFailed(APIException):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_detail = 'Payment processing failed.'
    default_code = 'payment_failed'


class InvalidPricingInput(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid pricing input.'
    default_code = 'invalid_pricing_input'


class InvalidBookingTransition(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Booking cannot move to the requested status.'
    default_code = 'invalid_booking_transition'
