"""
Direct messaging between users, plus the staff overview of conversations.
"""
import logging

from django.contrib import messages
from django.contrib.admin.views.decorators import staff_member_required
from django.contrib.auth import get_user_model
from django.contrib.auth.decorators import login_required
from django.db import transaction
from django.http import JsonResponse
from django.shortcuts import render, get_object_or_404, redirect
from django.urls import reverse
from django.views.decorators.http import require_POST

from ..models import Message, Notification

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 2000


def conversation_url(user_id):
    return f"{reverse('core:messages')}?user={user_id}"


def _is_ajax(request):
    return request.headers.get('X-Requested-With') == 'XMLHttpRequest'


@login_required
def messages_page(request):
    """
    Conversation list. ``?user=<id>`` opens the conversation with that user
    and marks what they sent as read.
    """
    User = get_user_model()
    selected_user = None
    thread = []

    target_id = request.GET.get('user', '')
    if target_id.isdigit() and int(target_id) != request.user.id:
        selected_user = User.objects.filter(id=target_id).first()

    if selected_user is not None:
        Message.mark_conversation_read(receiver=request.user, sender=selected_user)
        thread = Message.between(request.user, selected_user)

    context = {
        'conversations': Message.conversations_for(request.user),
        'selected_user': selected_user,
        'thread': thread,
    }
    return render(request, 'core/messages.html', context)


@login_required
@require_POST
def send_message(request, user_id):
    """
    Send a message to ``user_id`` and notify them.
    Answers JSON to AJAX requests and redirects back to the conversation otherwise.
    """
    User = get_user_model()
    receiver = get_object_or_404(User, id=user_id)
    content = request.POST.get('content', '').strip()

    error = None
    if receiver.id == request.user.id:
        error = 'You cannot message yourself.'
    elif not content:
        error = 'Message cannot be empty.'

    if error:
        if _is_ajax(request):
            return JsonResponse({'error': error}, status=400)
        messages.error(request, error)
        return redirect(conversation_url(receiver.id))

    with transaction.atomic():
        message = Message.objects.create(
            sender=request.user,
            receiver=receiver,
            content=content[:MAX_MESSAGE_LENGTH],
        )
        # Replying means the sender has seen the conversation
        Message.mark_conversation_read(receiver=request.user, sender=receiver)
        Notification.create_notification(
            user=receiver,
            notification_type=Notification.NotificationType.MESSAGE,
            title=f'New message from {request.user.get_display_name()}',
            body=message.content[:140],
            link=conversation_url(request.user.id),
        )

    logger.info(f"Message {message.id} sent from user {request.user.id} to user {receiver.id}")

    if _is_ajax(request):
        return JsonResponse({
            'success': True,
            'message': {
                'id': message.id,
                'content': message.content,
                'created_at': message.created_at.isoformat(),
            },
        })
    return redirect(conversation_url(receiver.id))


@staff_member_required
def messages_overview(request):
    """
    Staff inbox: every conversation on the site, grouped by user pair.
    """
    return render(request, 'core/messages_overview.html', {
        'conversations': Message.overview(),
    })
