from decimal import Decimal

import pytest

from core import reconciliation
from core.models import Notification, Purchase
from core.reconciliation import (
    Outcome,
    reconcile_payment,
    reconcile_verified_transaction,
)

pytestmark = pytest.mark.django_db


def reconcile(user, book, reference="ref_abc123", amount=500000, source="webhook", **overrides):
    kwargs = {
        "reference": reference,
        "email": user.email,
        "book_id": book.id,
        "amount_minor": amount,
        "source": source,
    }
    kwargs.update(overrides)
    return reconcile_payment(**kwargs)


def test_creates_purchase_and_notification(user, book):
    result = reconcile(user, book)

    assert result.outcome == Outcome.CREATED
    assert result.created and result.recorded

    purchase = Purchase.objects.get(reference="ref_abc123")
    assert purchase == result.purchase
    assert purchase.user == user
    assert purchase.book == book
    assert purchase.amount == Decimal("5000.00")
    assert purchase.status == Purchase.Status.SUCCESS

    notification = Notification.objects.get(user=user)
    assert notification.notification_type == Notification.NotificationType.PURCHASE
    assert notification.title == "Purchase Successful"
    assert notification.body == "Your purchase of 'Money Matters' has been confirmed."
    assert notification.link == "/dashboard/purchases/"


def test_second_confirmation_is_a_duplicate(user, book):
    first = reconcile(user, book, source="redirect")
    second = reconcile(user, book, source="webhook")

    assert second.outcome == Outcome.DUPLICATE
    assert second.recorded and not second.created
    assert second.purchase.pk == first.purchase.pk
    assert Purchase.objects.filter(reference="ref_abc123").count() == 1
    assert Notification.objects.filter(user=user).count() == 1


def test_email_lookup_ignores_case_and_whitespace(user, book):
    result = reconcile(user, book, email="  READER@Example.COM ")
    assert result.outcome == Outcome.CREATED
    assert result.purchase.user == user


def test_unknown_customer_records_nothing(user, book):
    result = reconcile(user, book, email="stranger@example.com")
    assert result.outcome == Outcome.USER_NOT_FOUND
    assert not result.recorded
    assert not Purchase.objects.exists()
    assert not Notification.objects.exists()


@pytest.mark.parametrize("book_id", [999999, "abc"])
def test_unknown_book_records_nothing(user, book, book_id):
    result = reconcile(user, book, book_id=book_id)
    assert result.outcome == Outcome.BOOK_NOT_FOUND
    assert not Purchase.objects.exists()


@pytest.mark.parametrize("overrides", [
    {"reference": ""},
    {"reference": None},
    {"email": None},
    {"book_id": None},
    {"amount_minor": -100},
    {"amount_minor": "500000"},
    {"amount_minor": None},
])
def test_incomplete_payload_records_nothing(user, book, overrides):
    result = reconcile(user, book, **overrides)
    assert result.outcome == Outcome.INVALID_PAYLOAD
    assert result.purchase is None
    assert not Purchase.objects.exists()


def test_lost_insert_race_reports_duplicate(monkeypatch, user, book):
    winner = Purchase.objects.create(
        user=user,
        book=book,
        amount=Decimal("5000.00"),
        reference="ref_abc123",
        status=Purchase.Status.SUCCESS,
    )

    real_find = reconciliation.find_successful_purchase
    calls = []

    def stale_first_read(reference):
        # The concurrent request has not committed when this one first looks
        calls.append(reference)
        if len(calls) == 1:
            return None
        return real_find(reference)

    monkeypatch.setattr(reconciliation, "find_successful_purchase", stale_first_read)

    result = reconcile(user, book)

    assert result.outcome == Outcome.DUPLICATE
    assert result.purchase.pk == winner.pk
    assert len(calls) == 2
    assert Purchase.objects.filter(reference="ref_abc123").count() == 1
    # The loser's notification was rolled back with its insert
    assert not Notification.objects.exists()


def test_failed_purchase_does_not_block_success(user, book):
    Purchase.objects.create(
        user=user,
        book=book,
        amount=Decimal("5000.00"),
        reference="ref_abc123",
        status=Purchase.Status.FAILED,
    )
    result = reconcile(user, book)
    assert result.outcome == Outcome.CREATED
    assert Purchase.objects.filter(reference="ref_abc123").count() == 2


def test_reconcile_verified_transaction(transaction_data, user, book):
    result = reconcile_verified_transaction("ref_abc123", transaction_data, source="redirect")
    assert result.outcome == Outcome.CREATED
    assert result.purchase.amount == Decimal("5000.00")


def test_reconcile_verified_transaction_uses_data_reference(transaction_data):
    result = reconcile_verified_transaction(None, transaction_data, source="webhook")
    assert result.outcome == Outcome.CREATED
    assert result.purchase.reference == "ref_abc123"


def test_reconcile_verified_transaction_without_metadata(transaction_data):
    transaction_data["metadata"] = ""
    result = reconcile_verified_transaction("ref_abc123", transaction_data, source="webhook")
    assert result.outcome == Outcome.INVALID_PAYLOAD


def test_reconcile_verified_transaction_with_garbage():
    result = reconcile_verified_transaction("ref_abc123", ["not", "a", "dict"], source="webhook")
    assert result.outcome == Outcome.INVALID_PAYLOAD
