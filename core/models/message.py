"""
Direct messages between users.
"""
from django.db import models
from django.conf import settings
from django.db.models import Q
from django.utils.translation import gettext_lazy as _


class Message(models.Model):
    """
    A direct message from one user to another.
    A conversation is every message exchanged between the same two users.
    """

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='sent_messages',
        verbose_name=_('sender')
    )
    receiver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='received_messages',
        verbose_name=_('receiver')
    )
    content = models.TextField(_('content'), max_length=2000)
    is_read = models.BooleanField(_('is read'), default=False)
    created_at = models.DateTimeField(_('created at'), auto_now_add=True)

    class Meta:
        verbose_name = _('message')
        verbose_name_plural = _('messages')
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['receiver', 'is_read'], name='core_messag_receive_4d2a91_idx'),
            models.Index(fields=['sender', 'receiver'], name='core_messag_sender__e07c3b_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=~Q(sender=models.F('receiver')),
                name='message_not_to_self'
            ),
        ]

    def __str__(self):
        return f"{self.sender.email} -> {self.receiver.email}"

    @classmethod
    def between(cls, user, other):
        """Messages exchanged by ``user`` and ``other``, oldest first."""
        return cls.objects.filter(
            Q(sender=user, receiver=other) | Q(sender=other, receiver=user)
        ).select_related('sender', 'receiver').order_by('created_at', 'id')

    @classmethod
    def conversations_for(cls, user):
        """
        One entry per correspondent of ``user``, most recent first:
        ``{'user': other, 'last_message': message, 'unread': count}``.
        """
        recent = cls.objects.filter(
            Q(sender=user) | Q(receiver=user)
        ).select_related('sender', 'receiver').order_by('-created_at', '-id')

        unread = dict(
            cls.objects.filter(receiver=user, is_read=False)
            .order_by()
            .values_list('sender')
            .annotate(count=models.Count('id'))
        )

        conversations = []
        seen = set()
        for message in recent:
            other = message.receiver if message.sender_id == user.id else message.sender
            if other.id in seen:
                continue
            seen.add(other.id)
            conversations.append({
                'user': other,
                'last_message': message,
                'unread': unread.get(other.id, 0),
            })
        return conversations

    @classmethod
    def overview(cls, limit=100):
        """
        Site-wide conversations for staff, grouped by user pair and built
        from the latest ``limit`` messages.
        """
        recent = cls.objects.select_related('sender', 'receiver').order_by('-created_at', '-id')[:limit]

        pairs = {}
        for message in recent:
            key = tuple(sorted((message.sender_id, message.receiver_id)))
            if key in pairs:
                pairs[key]['count'] += 1
            else:
                pairs[key] = {
                    'users': (message.sender, message.receiver),
                    'last_message': message,
                    'count': 1,
                }
        return list(pairs.values())

    @classmethod
    def mark_conversation_read(cls, receiver, sender):
        """Mark everything ``sender`` sent to ``receiver`` as read."""
        return cls.objects.filter(sender=sender, receiver=receiver, is_read=False).update(is_read=True)

    @classmethod
    def get_unread_count(cls, user):
        return cls.objects.filter(receiver=user, is_read=False).count()
