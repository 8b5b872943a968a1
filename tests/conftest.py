import json
from decimal import Decimal

import pytest
from django.urls import reverse

from core import paystack_utils
from core.models import Article, Book, Category

WEBHOOK_SECRET = "sk_test_dividend"


@pytest.fixture(autouse=True)
def paystack_settings(settings):
    settings.PAYSTACK_SECRET_KEY = WEBHOOK_SECRET
    settings.PAYSTACK_WEBHOOK_SECRET = WEBHOOK_SECRET
    settings.SITE_URL = "https://thedividend.test"
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
    return settings


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(
        email="reader@example.com",
        password="s3cret-pass",
        name="Ada Reader",
    )


@pytest.fixture
def author(django_user_model):
    return django_user_model.objects.create_user(
        email="writer@example.com",
        password="s3cret-pass",
        name="Wale Writer",
    )


@pytest.fixture
def category(db):
    return Category.objects.create(name="Markets")


@pytest.fixture
def book(category):
    return Book.objects.create(
        title="Money Matters",
        author_name="Chidi Okafor",
        price=Decimal("5000.00"),
        category=category,
    )


@pytest.fixture
def article(author, category):
    return Article.objects.create(
        title="Why Dividends Matter",
        author=author,
        category=category,
        status=Article.Status.PUBLISHED,
        content={
            "type": "doc",
            "content": [
                {
                    "type": "heading",
                    "attrs": {"level": 7},
                    "content": [{"type": "text", "text": "Yield"}],
                },
                {
                    "type": "paragraph",
                    "content": [
                        {"type": "text", "text": "Cash ", "marks": [{"type": "bold"}]},
                        {"type": "text", "text": "returns."},
                    ],
                },
            ],
        },
    )


@pytest.fixture
def transaction_data(user, book):
    """A Paystack transaction object as returned by verify or sent in a webhook."""
    return {
        "reference": "ref_abc123",
        "status": "success",
        "amount": 500000,
        "currency": "NGN",
        "customer": {"email": user.email},
        "metadata": {"book_id": book.id},
    }


@pytest.fixture
def post_webhook(client):
    """POST a webhook event signed with the configured secret, unless told otherwise."""
    def _post(event, signature=None, raw_body=None):
        if raw_body is None:
            raw_body = json.dumps(event).encode("utf-8")
        if signature is None:
            signature = paystack_utils.compute_signature(raw_body, WEBHOOK_SECRET)
        return client.post(
            reverse("core:paystack_webhook"),
            data=raw_body,
            content_type="application/json",
            headers={"x-paystack-signature": signature},
        )
    return _post
