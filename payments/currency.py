# ==================== PAYMENTS/CURRENCY.PY ====================
import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

import requests
from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

RATE_CACHE_KEY = 'exchange_rate:USD:INR'


def get_usd_inr_rate():
    """Live USD to INR rate, cached; the configured fallback rate if the API is unreachable"""
    rate = cache.get(RATE_CACHE_KEY)
    if rate is not None:
        return rate

    try:
        response = requests.get(settings.EXCHANGE_RATE_API_URL, timeout=settings.EXCHANGE_RATE_TIMEOUT)
        response.raise_for_status()
        rate = Decimal(str(response.json()['rates']['INR']))
    except (requests.RequestException, KeyError, TypeError, ValueError, InvalidOperation) as e:
        logger.error(f"Error fetching USD/INR exchange rate: {str(e)}")
        return Decimal(str(settings.FALLBACK_USD_INR_RATE))

    cache.set(RATE_CACHE_KEY, rate, settings.EXCHANGE_RATE_CACHE_SECONDS)
    return rate


def convert_usd_to_inr(amount):
    """Convert to whole rupees, rounding half up"""
    inr = Decimal(str(amount)) * get_usd_inr_rate()
    return inr.quantize(Decimal('1'), rounding=ROUND_HALF_UP)


def to_inr(amount):
    """Amount in PRICING_CURRENCY as the INR amount charged through Razorpay"""
    if settings.PRICING_CURRENCY == 'USD':
        return convert_usd_to_inr(amount)
    return Decimal(str(amount))
