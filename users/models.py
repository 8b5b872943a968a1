from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.translation import gettext_lazy as _

from .managers import CustomUserManager


class User(AbstractUser):
    """
    Custom User model for The Dividend.

    Uses email as the primary identifier instead of username.
    Additional profile fields:
    - name: Public display name
    - role: guest, user or admin
    - avatar_url: Optional hosted profile image
    - bio: Short description of the user
    """

    class Role(models.TextChoices):
        GUEST = 'guest', _('Guest')
        USER = 'user', _('User')
        ADMIN = 'admin', _('Admin')

    # Remove username field, use email instead
    username = None
    email = models.EmailField(
        _('email address'),
        unique=True,
        help_text=_('Required. A valid email address.'),
        error_messages={
            'unique': _('A user with that email already exists.'),
        },
    )

    name = models.CharField(
        _('name'),
        max_length=150,
        blank=True,
        help_text=_('Public display name shown on the platform.'),
    )

    role = models.CharField(
        _('role'),
        max_length=10,
        choices=Role.choices,
        default=Role.USER,
    )

    avatar_url = models.URLField(
        _('avatar URL'),
        max_length=500,
        blank=True,
        help_text=_('Hosted profile picture.'),
    )

    bio = models.TextField(
        _('bio'),
        max_length=500,
        blank=True,
        help_text=_('Short description about the user.'),
    )

    # Use email as the username field
    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    objects = CustomUserManager()

    class Meta:
        verbose_name = _('user')
        verbose_name_plural = _('users')
        ordering = ['-date_joined']

    def __str__(self):
        return self.name or self.email

    def get_display_name(self):
        """Returns the display name or the local part of the email."""
        return self.name or self.email.split('@')[0]

    @property
    def initials(self):
        parts = self.get_display_name().split()
        return ''.join(part[0] for part in parts).upper()[:2]

    @property
    def is_site_admin(self):
        return self.role == self.Role.ADMIN or self.is_staff
