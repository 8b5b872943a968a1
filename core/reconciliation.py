"""
Turning confirmed Paystack payments into purchase records.

A payment can be confirmed twice: once when the buyer is redirected back to
the verify endpoint, and once when Paystack delivers the ``charge.success``
webhook. The two requests are unordered, may repeat, and may run at the same
time. Both call ``reconcile_payment`` and must end with exactly one
successful ``Purchase`` and one purchase notification per reference.

The read of existing purchases is only a fast path. The conditional unique
constraint on ``Purchase.reference`` decides: when two requests both miss
the read and both insert, the loser gets an ``IntegrityError``, its
notification is rolled back with it, and it reports a duplicate.
"""
import logging
from collections import namedtuple

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.urls import reverse

from .exceptions import InvalidAmount
from .models import Book, Notification, Purchase
from .paystack_utils import to_major_units

logger = logging.getLogger(__name__)


class Outcome:
    CREATED = 'created'
    DUPLICATE = 'duplicate'
    USER_NOT_FOUND = 'user_not_found'
    BOOK_NOT_FOUND = 'book_not_found'
    INVALID_PAYLOAD = 'invalid_payload'


class ReconciliationResult(namedtuple('ReconciliationResult', ['outcome', 'purchase'])):
    __slots__ = ()

    @property
    def created(self):
        return self.outcome == Outcome.CREATED

    @property
    def recorded(self):
        """A successful purchase exists for the reference after this call."""
        return self.outcome in (Outcome.CREATED, Outcome.DUPLICATE)


def find_successful_purchase(reference):
    return Purchase.objects.filter(
        reference=reference,
        status=Purchase.Status.SUCCESS
    ).first()


def reconcile_payment(reference, email, book_id, amount_minor, source):
    """
    Record a payment Paystack has already confirmed.

    Args:
        reference: Paystack transaction reference
        email: Customer email reported by Paystack
        book_id: Book id from the transaction metadata
        amount_minor: Amount paid, in kobo
        source: 'redirect' or 'webhook', for logging

    Returns:
        ReconciliationResult. Resolution failures are reported through the
        outcome, never raised. Database errors other than the uniqueness
        violation propagate.
    """
    if not reference or not email or book_id in (None, ''):
        logger.warning(
            f"[{source}] Incomplete payment data for reference={reference!r}: "
            f"email={email!r}, book_id={book_id!r}"
        )
        return ReconciliationResult(Outcome.INVALID_PAYLOAD, None)

    try:
        amount = to_major_units(amount_minor)
    except InvalidAmount as e:
        logger.warning(f"[{source}] Rejecting reference {reference}: {e}")
        return ReconciliationResult(Outcome.INVALID_PAYLOAD, None)

    User = get_user_model()
    user = User.objects.get_by_email(email)
    if user is None:
        # Paid, but not attributable to a local account
        logger.warning(f"[{source}] No user with email {email} for reference {reference}")
        return ReconciliationResult(Outcome.USER_NOT_FOUND, None)

    try:
        book = Book.objects.get(pk=book_id)
    except (Book.DoesNotExist, ValueError, TypeError):
        logger.warning(f"[{source}] Unknown book {book_id!r} for reference {reference}")
        return ReconciliationResult(Outcome.BOOK_NOT_FOUND, None)

    existing = find_successful_purchase(reference)
    if existing is not None:
        logger.info(f"[{source}] Reference {reference} already recorded as purchase {existing.id}")
        return ReconciliationResult(Outcome.DUPLICATE, existing)

    try:
        with transaction.atomic():
            purchase = Purchase.objects.create(
                user=user,
                book=book,
                amount=amount,
                reference=reference,
                status=Purchase.Status.SUCCESS,
            )
            Notification.create_notification(
                user=user,
                notification_type=Notification.NotificationType.PURCHASE,
                title='Purchase Successful',
                body=f"Your purchase of '{book.title}' has been confirmed.",
                link=reverse('core:purchase_history'),
            )
    except IntegrityError:
        existing = find_successful_purchase(reference)
        if existing is None:
            raise
        logger.info(
            f"[{source}] Lost insert race for reference {reference}; "
            f"purchase {existing.id} already recorded"
        )
        return ReconciliationResult(Outcome.DUPLICATE, existing)

    logger.info(f"[{source}] Recorded purchase {purchase.id} for reference {reference} ({amount} NGN)")
    return ReconciliationResult(Outcome.CREATED, purchase)


def reconcile_verified_transaction(reference, transaction_data, source):
    """
    Reconcile from a Paystack transaction object, as found in the verify
    response ``data`` or the webhook ``data``.
    """
    transaction_data = transaction_data if isinstance(transaction_data, dict) else {}
    metadata = transaction_data.get('metadata')
    customer = transaction_data.get('customer')
    # Paystack sends an empty string when a transaction has no metadata
    metadata = metadata if isinstance(metadata, dict) else {}
    customer = customer if isinstance(customer, dict) else {}

    return reconcile_payment(
        reference=reference or transaction_data.get('reference'),
        email=customer.get('email'),
        book_id=metadata.get('book_id'),
        amount_minor=transaction_data.get('amount'),
        source=source,
    )
