"""
Notification tasks.

Email side effects of purchases. Failures are logged and never raised so
that a mail outage cannot undo a recorded payment.
"""

from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.conf import settings
from django.utils.html import strip_tags
from datetime import datetime
import logging

logger = logging.getLogger(__name__)


def get_email_context():
    """Get common context for all email templates."""
    return {
        'site_name': getattr(settings, 'SITE_NAME', 'The Dividend'),
        'site_url': getattr(settings, 'SITE_URL', 'http://localhost:8000'),
        'current_year': datetime.now().year,
    }


def send_purchase_receipt(purchase_id):
    """
    Send purchase receipt email.
    """
    from core.models import Purchase

    try:
        purchase = Purchase.objects.select_related('book', 'user').get(id=purchase_id)
        user = purchase.user
        book = purchase.book

        if not user.email:
            logger.warning(f"No email for buyer of purchase {purchase_id}")
            return False

        context = get_email_context()
        context['purchase'] = purchase
        context['book'] = book
        context['user'] = user

        html_content = render_to_string('emails/purchase_receipt.html', context)
        text_content = strip_tags(html_content)

        msg = EmailMultiAlternatives(
            subject=f'Your {context["site_name"]} purchase: {book.title}',
            body=text_content,
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[user.email],
        )
        msg.attach_alternative(html_content, "text/html")
        msg.send()

        logger.info(f"Sent purchase receipt for purchase {purchase_id} to {user.email}")
        return True

    except Exception as e:
        logger.error(f"Failed to send purchase receipt for purchase {purchase_id}: {e}")
        return False
