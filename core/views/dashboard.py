"""
Reader dashboard: purchases, bookmarks and reading history.
"""
from django.shortcuts import render
from django.contrib.auth.decorators import login_required
from django.core.paginator import Paginator

from ..models import Bookmark, Purchase, ReadingHistory


@login_required
def purchase_history(request):
    """
    Display the user's purchases.
    """
    status_filter = request.GET.get('status', 'all')

    purchases = Purchase.objects.filter(user=request.user).select_related('book')

    if status_filter in Purchase.Status.values:
        purchases = purchases.filter(status=status_filter)

    paginator = Paginator(purchases, 20)
    page_obj = paginator.get_page(request.GET.get('page', 1))

    context = {
        'page_obj': page_obj,
        'status_filter': status_filter,
        'just_purchased': request.GET.get('success') == 'true',
    }
    return render(request, 'core/purchase_history.html', context)


@login_required
def bookmarks_list(request):
    bookmarks = Bookmark.objects.filter(
        user=request.user
    ).select_related('article', 'article__author', 'article__category')

    return render(request, 'core/bookmarks.html', {'bookmarks': bookmarks})


@login_required
def reading_history_list(request):
    """
    Articles the user has opened, most recent first.
    """
    history = ReadingHistory.objects.filter(
        user=request.user
    ).select_related('article', 'article__author', 'article__category')[:50]

    return render(request, 'core/reading_history.html', {'history': history})
