"""
Book model for the digital bookstore.
"""
from django.db import models
from django.urls import reverse
from django.utils.translation import gettext_lazy as _
from django.core.validators import MinValueValidator
from decimal import Decimal

from .article import Category


class Book(models.Model):
    """
    A digital book sold through the bookstore.
    Prices are stored in major currency units (naira).
    """

    title = models.CharField(_('title'), max_length=255)
    author_name = models.CharField(_('author'), max_length=255)
    cover_url = models.URLField(_('cover URL'), max_length=500, blank=True)
    description = models.TextField(_('description'), blank=True)
    price = models.DecimalField(
        _('price'),
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text=_('Price in naira.')
    )
    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='books',
        verbose_name=_('category')
    )
    is_featured = models.BooleanField(_('featured'), default=False)
    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    class Meta:
        verbose_name = _('book')
        verbose_name_plural = _('books')
        ordering = ['-created_at']

    def __str__(self):
        return self.title

    def get_absolute_url(self):
        """Returns the book detail page URL."""
        return reverse('core:book_detail', kwargs={'book_id': self.pk})

    def is_owned_by(self, user):
        """Check if ``user`` holds a successful purchase of this book."""
        if not user.is_authenticated:
            return False
        from .purchase import Purchase
        return Purchase.objects.filter(
            user=user,
            book=self,
            status=Purchase.Status.SUCCESS
        ).exists()

    @property
    def is_free(self):
        return self.price == Decimal('0.00')

    @property
    def formatted_price(self):
        """Returns formatted price in naira."""
        if self.is_free:
            return _("Free")
        return f"₦{self.price:,.2f}"
