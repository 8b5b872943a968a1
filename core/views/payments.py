"""
Paystack checkout, redirect verification and webhook views.

Both the redirect back from the hosted checkout and the webhook end in
``core.reconciliation``; either may arrive first, or both at once.
"""
import json
import logging

from django.conf import settings
from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.db import DatabaseError
from django.http import JsonResponse
from django.shortcuts import get_object_or_404, redirect
from django.urls import reverse
from django.views.decorators.cache import never_cache
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from .. import paystack_utils
from ..models import Book
from ..reconciliation import reconcile_verified_transaction

logger = logging.getLogger(__name__)


def _bookstore_error(code):
    return redirect(f"{reverse('core:book_list')}?error={code}")


def start_checkout(user, book):
    """
    Open a Paystack transaction for ``user`` buying ``book``.
    The amount always comes from the stored price, never from the client.
    """
    callback_url = f"{settings.SITE_URL.rstrip('/')}{reverse('core:paystack_verify')}"
    return paystack_utils.initialize_transaction(
        email=user.email,
        amount=paystack_utils.to_minor_units(book.price),
        callback_url=callback_url,
        book_id=book.id,
    )


@login_required
@require_POST
def purchase_book(request, book_id):
    """
    Start a checkout from the book page and send the user to Paystack.
    """
    book = get_object_or_404(Book, id=book_id)

    # Anti-duplicate check
    if book.is_owned_by(request.user):
        messages.info(request, 'You already own this book!')
        return redirect(book.get_absolute_url())

    result = start_checkout(request.user, book)

    if result['success']:
        logger.info(f"Checkout {result['reference']} opened for book {book.id} by user {request.user.id}")
        return redirect(result['authorization_url'])

    logger.error(f"Checkout failed for book {book.id}: {result.get('error')}")
    messages.error(request, 'Payment is temporarily unavailable. Please try again.')
    return redirect(book.get_absolute_url())


@login_required
@require_POST
def initialize_payment(request):
    """
    JSON checkout endpoint: ``{"book_id": ...}`` in,
    ``{"authorization_url", "reference"}`` or ``{"error"}`` out.
    """
    try:
        payload = json.loads(request.body or b'{}')
    except ValueError:
        return JsonResponse({'error': 'Invalid JSON body'}, status=400)

    book_id = payload.get('book_id') if isinstance(payload, dict) else None
    if book_id in (None, ''):
        return JsonResponse({'error': 'book_id is required'}, status=400)

    try:
        book = Book.objects.get(pk=book_id)
    except (Book.DoesNotExist, ValueError, TypeError):
        return JsonResponse({'error': 'Book not found'}, status=404)

    if book.is_owned_by(request.user):
        return JsonResponse({'error': 'You already own this book'}, status=400)

    result = start_checkout(request.user, book)

    if result['success']:
        return JsonResponse({
            'authorization_url': result['authorization_url'],
            'reference': result['reference'],
        })
    return JsonResponse({'error': result['error']}, status=400)


@never_cache
@require_GET
def paystack_verify(request):
    """
    Paystack redirects the buyer here after checkout. Always redirects:
    to the purchases page on success, or to the bookstore with an error code.
    """
    reference = request.GET.get('reference') or request.GET.get('trxref')

    if not reference:
        return _bookstore_error('no_reference')

    result = paystack_utils.verify_transaction(reference)

    if not result.get('reached'):
        return _bookstore_error('verification_failed')

    if not result['success'] or not paystack_utils.is_payment_successful(result.get('status')):
        logger.info(f"Payment {reference} not successful: {result.get('status') or result.get('error')}")
        return _bookstore_error('payment_failed')

    try:
        outcome = reconcile_verified_transaction(reference, result['data'], source='redirect')
    except DatabaseError as e:
        logger.error(f"Could not record payment {reference}: {e}")
        return _bookstore_error('verification_failed')

    logger.info(f"Redirect verification for {reference}: {outcome.outcome}")
    return redirect(f"{reverse('core:purchase_history')}?success=true")


@csrf_exempt
@require_POST
def paystack_webhook(request):
    """
    Paystack server-to-server notification. Returns JSON, never a redirect;
    any non-2xx answer makes Paystack retry the delivery later.
    """
    raw_body = request.body
    signature = request.headers.get('x-paystack-signature', '')

    if not paystack_utils.verify_webhook_signature(raw_body, signature):
        logger.warning("Rejected Paystack webhook with an invalid signature")
        return JsonResponse({'error': 'Invalid signature'}, status=401)

    try:
        event = json.loads(raw_body)
    except ValueError as e:
        logger.error(f"Paystack webhook body is not valid JSON: {e}")
        return JsonResponse({'error': 'Webhook error'}, status=500)

    if not isinstance(event, dict):
        logger.error("Paystack webhook body is not a JSON object")
        return JsonResponse({'error': 'Webhook error'}, status=500)

    event_type = event.get('event')
    if event_type != 'charge.success':
        logger.info(f"Ignoring Paystack webhook event {event_type!r}")
        return JsonResponse({'status': 'ok'})

    data = event.get('data') if isinstance(event.get('data'), dict) else {}

    try:
        outcome = reconcile_verified_transaction(data.get('reference'), data, source='webhook')
    except DatabaseError as e:
        logger.error(f"Could not record webhook payment {data.get('reference')}: {e}")
        return JsonResponse({'error': 'Webhook error'}, status=500)

    logger.info(f"Webhook reconciliation for {data.get('reference')}: {outcome.outcome}")
    return JsonResponse({'status': 'ok'})
