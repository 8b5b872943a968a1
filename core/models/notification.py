"""
Notification model for in-app notifications.
"""
from django.db import models
from django.conf import settings
from django.utils.translation import gettext_lazy as _


class Notification(models.Model):
    """
    In-app notification model for users.
    """

    class NotificationType(models.TextChoices):
        GENERAL = 'general', _('General')
        ARTICLE = 'article', _('New Article')
        COMMENT = 'comment', _('Comment')
        MESSAGE = 'message', _('Message')
        PURCHASE = 'purchase', _('Purchase')

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications',
        verbose_name=_('user')
    )
    notification_type = models.CharField(
        _('type'),
        max_length=20,
        choices=NotificationType.choices,
        default=NotificationType.GENERAL
    )
    title = models.CharField(
        _('title'),
        max_length=200,
        help_text=_('Short notification title.')
    )
    body = models.TextField(
        _('body'),
        help_text=_('Full notification message.')
    )
    is_read = models.BooleanField(
        _('is read'),
        default=False
    )
    link = models.CharField(
        _('link'),
        max_length=500,
        blank=True,
        help_text=_('URL to navigate to when clicked.')
    )
    created_at = models.DateTimeField(
        _('created at'),
        auto_now_add=True
    )

    class Meta:
        verbose_name = _('notification')
        verbose_name_plural = _('notifications')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'is_read'], name='core_notifi_user_id_7a4e2c_idx'),
            models.Index(fields=['user', '-created_at'], name='core_notifi_user_id_b81f05_idx'),
        ]

    def __str__(self):
        return f"{self.user.email}: {self.title}"

    @classmethod
    def create_notification(cls, user, notification_type, title, body, link=''):
        """
        Helper method to create a notification.
        """
        return cls.objects.create(
            user=user,
            notification_type=notification_type,
            title=title,
            body=body,
            link=link
        )

    @classmethod
    def get_unread_count(cls, user):
        """Get count of unread notifications for a user."""
        return cls.objects.filter(user=user, is_read=False).count()

    @classmethod
    def mark_all_read(cls, user):
        """Mark all notifications as read for a user."""
        return cls.objects.filter(user=user, is_read=False).update(is_read=True)
