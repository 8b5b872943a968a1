"""
Purchase model.
"""
from django.db import models
from django.conf import settings
from django.utils.translation import gettext_lazy as _

from .book import Book


class Purchase(models.Model):
    """
    A book purchase confirmed by the payment gateway.

    Rows are written once by ``core.reconciliation`` and never updated.
    The conditional unique constraint guarantees at most one successful
    purchase per gateway reference, whichever confirmation path gets there
    first.
    """

    class Status(models.TextChoices):
        PENDING = 'pending', _('Pending')
        SUCCESS = 'success', _('Success')
        FAILED = 'failed', _('Failed')

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='purchases',
        verbose_name=_('user')
    )
    book = models.ForeignKey(
        Book,
        on_delete=models.CASCADE,
        related_name='purchases',
        verbose_name=_('book')
    )
    amount = models.DecimalField(
        _('amount'),
        max_digits=12,
        decimal_places=2,
        help_text=_('Amount paid in naira (major units).')
    )
    reference = models.CharField(
        _('reference'),
        max_length=100,
        help_text=_('Payment gateway transaction reference.')
    )
    status = models.CharField(
        _('status'),
        max_length=10,
        choices=Status.choices,
        default=Status.PENDING
    )
    created_at = models.DateTimeField(
        _('created at'),
        auto_now_add=True
    )

    class Meta:
        verbose_name = _('purchase')
        verbose_name_plural = _('purchases')
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['reference'],
                condition=models.Q(status='success'),
                name='unique_successful_purchase_reference'
            ),
            models.CheckConstraint(
                condition=models.Q(amount__gte=0),
                name='purchase_amount_non_negative'
            ),
        ]
        indexes = [
            models.Index(fields=['user', 'status'], name='core_purcha_user_id_3c1d8a_idx'),
            models.Index(fields=['reference'], name='core_purcha_referen_9f2b61_idx'),
        ]

    def __str__(self):
        return f"{self.user.email} - {self.book.title} ({self.reference})"

    @property
    def formatted_amount(self):
        return f"₦{self.amount:,.2f}"
