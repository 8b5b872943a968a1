"""
Paystack Payment Integration Utilities

Paystack amounts travel as integers in kobo (minor units) and are stored
locally in naira (major units).
"""
import hashlib
import hmac
import logging
from decimal import Decimal
from urllib.parse import quote

import requests
from django.conf import settings

from .exceptions import InvalidAmount

logger = logging.getLogger(__name__)

# Paystack API base URL
PAYSTACK_BASE_URL = getattr(settings, 'PAYSTACK_BASE_URL', 'https://api.paystack.co')

MINOR_UNITS_PER_MAJOR = Decimal('100')
TWO_PLACES = Decimal('0.01')


def get_paystack_headers():
    """
    Get authentication headers for Paystack API requests.
    """
    return {
        'Authorization': f'Bearer {settings.PAYSTACK_SECRET_KEY}',
        'Content-Type': 'application/json',
    }


def initialize_transaction(email, amount, callback_url, book_id):
    """
    Create a Paystack transaction and its hosted checkout page.

    Args:
        email: Customer email address
        amount: Amount in kobo
        callback_url: URL Paystack redirects to after payment
        book_id: Book being purchased, echoed back in the transaction metadata

    Returns:
        dict: {
            'success': bool,
            'authorization_url': hosted checkout URL (if successful),
            'reference': transaction reference (if successful),
            'error': error message (if failed)
        }
    """
    endpoint = f"{PAYSTACK_BASE_URL}/transaction/initialize"

    payload = {
        'email': email,
        'amount': int(amount),
        'callback_url': callback_url,
        'metadata': {
            'book_id': book_id,
        },
    }

    try:
        logger.info(f"Paystack initialize: amount={amount}, email={email}, book_id={book_id}")

        response = requests.post(
            endpoint,
            json=payload,
            headers=get_paystack_headers(),
            timeout=30
        )

        data = response.json() if response.content else {}
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")

        if response.status_code == 200 and data.get('status'):
            reference = data['data']['reference']
            logger.info(f"Paystack transaction created: reference={reference}")
            return {
                'success': True,
                'authorization_url': data['data']['authorization_url'],
                'reference': reference,
            }

        error_msg = data.get('message', f'HTTP {response.status_code}')
        logger.error(f"Paystack initialize error: {error_msg}")
        return {
            'success': False,
            'error': error_msg,
        }

    except requests.exceptions.Timeout:
        logger.error("Paystack API timeout")
        return {
            'success': False,
            'error': 'Payment service timeout. Please try again.',
        }
    except requests.exceptions.RequestException as e:
        logger.error(f"Paystack API error: {str(e)}")
        return {
            'success': False,
            'error': 'Payment service unavailable. Please try again later.',
        }
    except (ValueError, KeyError, TypeError) as e:
        logger.error(f"Paystack initialize returned an unexpected body: {str(e)}")
        return {
            'success': False,
            'error': 'Unexpected response from payment service.',
        }


def verify_transaction(reference):
    """
    Ask Paystack for the current state of a transaction.

    Returns:
        dict: {
            'reached': bool (Paystack answered the request),
            'success': bool (Paystack accepted the request),
            'status': transaction status (success, failed, abandoned, ...),
            'data': the transaction object (if successful),
            'error': error message (if failed)
        }
    """
    endpoint = f"{PAYSTACK_BASE_URL}/transaction/verify/{quote(str(reference), safe='')}"

    try:
        logger.info(f"Paystack verify: reference={reference}")

        response = requests.get(
            endpoint,
            headers=get_paystack_headers(),
            timeout=15
        )

        data = response.json() if response.content else {}
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")

        if response.status_code == 200 and data.get('status'):
            transaction_data = data.get('data') or {}
            if not isinstance(transaction_data, dict):
                raise ValueError(f"expected a transaction object, got {type(transaction_data).__name__}")
            status = transaction_data.get('status', 'unknown')
            logger.info(f"Paystack transaction {reference} status: {status}")
            return {
                'reached': True,
                'success': True,
                'status': status,
                'data': transaction_data,
            }

        error_msg = data.get('message', f'HTTP {response.status_code}')
        logger.error(f"Paystack verify error for {reference}: {error_msg}")
        return {
            'reached': True,
            'success': False,
            'error': error_msg,
        }

    except requests.exceptions.Timeout:
        logger.error(f"Paystack verify timeout for {reference}")
        return {
            'reached': False,
            'success': False,
            'error': 'Verification timeout.',
        }
    except requests.exceptions.RequestException as e:
        logger.error(f"Paystack verify error for {reference}: {str(e)}")
        return {
            'reached': False,
            'success': False,
            'error': 'Unable to verify payment.',
        }
    except ValueError as e:
        logger.error(f"Paystack verify returned an unexpected body for {reference}: {str(e)}")
        return {
            'reached': False,
            'success': False,
            'error': 'Unexpected response from payment service.',
        }


def compute_signature(raw_body, secret):
    """HMAC-SHA512 hex digest Paystack sends in ``x-paystack-signature``."""
    return hmac.new(secret.encode('utf-8'), raw_body, hashlib.sha512).hexdigest()


def verify_webhook_signature(raw_body, signature):
    """
    Check a webhook body against its ``x-paystack-signature`` header.
    A missing secret or header never verifies.
    """
    secret = getattr(settings, 'PAYSTACK_WEBHOOK_SECRET', '')
    if not secret:
        logger.error("PAYSTACK_WEBHOOK_SECRET is not configured; rejecting webhook")
        return False
    if not signature:
        return False
    expected = compute_signature(raw_body, secret)
    return hmac.compare_digest(expected.encode('ascii'), signature.encode('utf-8'))


def to_major_units(amount_minor):
    """
    Convert a gateway amount in kobo to naira.
    500000 -> Decimal('5000.00')
    """
    if isinstance(amount_minor, bool) or not isinstance(amount_minor, int):
        raise InvalidAmount(f"Amount must be an integer number of kobo, got {amount_minor!r}")
    if amount_minor < 0:
        raise InvalidAmount(f"Amount must not be negative, got {amount_minor}")
    return (Decimal(amount_minor) / MINOR_UNITS_PER_MAJOR).quantize(TWO_PLACES)


def to_minor_units(amount):
    """Convert a naira price to kobo for the gateway."""
    return int((Decimal(str(amount)) * MINOR_UNITS_PER_MAJOR).to_integral_value())


def is_payment_successful(status):
    """
    Check if a Paystack transaction status indicates success.
    """
    return status == 'success'
