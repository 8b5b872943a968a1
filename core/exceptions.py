"""
Exceptions raised by the payment code.
"""


class PaymentError(Exception):
    """Base class for payment processing errors."""


class InvalidAmount(PaymentError, ValueError):
    """A gateway amount that is not a non-negative whole number of minor units."""
