"""
Bookstore views: browsing and book detail.
"""
from django.shortcuts import render, get_object_or_404
from django.core.paginator import Paginator
from django.db.models import Q

from ..models import Book, Category

PAGE_SIZE = 12


def book_list(request):
    """
    Bookstore page with category filter, search and pagination.
    """
    books = Book.objects.select_related('category')

    search = request.GET.get('search', '').strip()
    category_slug = request.GET.get('category', '')

    if search:
        books = books.filter(
            Q(title__icontains=search) | Q(author_name__icontains=search)
        )

    if category_slug:
        books = books.filter(category__slug=category_slug)

    paginator = Paginator(books, PAGE_SIZE)
    page_obj = paginator.get_page(request.GET.get('page'))

    context = {
        'page_obj': page_obj,
        'books': page_obj,
        'featured_books': Book.objects.filter(is_featured=True)[:5],
        'categories': Category.objects.all(),
        'search': search,
        'category_slug': category_slug,
        'error': request.GET.get('error', ''),
    }
    return render(request, 'core/book_list.html', context)


def book_detail(request, book_id):
    """
    Book detail page. Shows whether the current user already owns the book.
    """
    book = get_object_or_404(Book.objects.select_related('category'), id=book_id)

    context = {
        'book': book,
        'already_purchased': book.is_owned_by(request.user),
    }
    return render(request, 'core/book_detail.html', context)
