"""
Blog views for The Dividend.
"""

from django.shortcuts import render, get_object_or_404, redirect
from django.http import JsonResponse
from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.views.decorators.http import require_POST
from django.core.paginator import Paginator
from django.db.models import F, Q

from ..models import Article, ArticleLike, Bookmark, Category, Comment, ReadingHistory

PAGE_SIZE = 12

SORT_ORDERING = {
    'newest': '-created_at',
    'trending': '-likes',
    'most_read': '-views',
}


def published_articles():
    return Article.objects.filter(
        status=Article.Status.PUBLISHED
    ).select_related('author', 'category')


def homepage(request):
    """
    Homepage with featured stories, editor's picks and most read articles.
    """
    from ..models import Book

    articles = published_articles()

    context = {
        'featured_articles': articles.filter(is_featured=True)[:5],
        'editors_picks': articles.filter(is_editors_pick=True)[:4],
        'top_articles': articles.order_by('-views')[:6],
        'featured_books': Book.objects.filter(is_featured=True)[:4],
        'categories': Category.objects.all(),
    }
    return render(request, 'core/homepage.html', context)


def blog_list(request):
    """
    Blog listing page with category filter, search, sorting and pagination.
    """
    articles = published_articles()

    search = request.GET.get('search', '').strip()
    category_slug = request.GET.get('category', '')
    sort = request.GET.get('sort', 'newest')

    if search:
        articles = articles.filter(
            Q(title__icontains=search) | Q(excerpt__icontains=search)
        )

    if category_slug:
        articles = articles.filter(category__slug=category_slug)

    articles = articles.order_by(SORT_ORDERING.get(sort, '-created_at'))

    paginator = Paginator(articles, PAGE_SIZE)
    page_obj = paginator.get_page(request.GET.get('page'))

    context = {
        'page_obj': page_obj,
        'articles': page_obj,
        'categories': Category.objects.all(),
        'search': search,
        'category_slug': category_slug,
        'sort': sort,
    }
    return render(request, 'core/blog_list.html', context)


def article_detail(request, slug):
    """
    Single article page. The stored document is rendered in the template
    through the ``render_content`` filter.
    """
    article = get_object_or_404(published_articles(), slug=slug)

    # Atomic increment
    Article.objects.filter(id=article.id).update(views=F('views') + 1)
    article.refresh_from_db(fields=['views'])

    is_liked = False
    is_bookmarked = False
    if request.user.is_authenticated:
        ReadingHistory.record(request.user, article)
        is_liked = ArticleLike.objects.filter(user=request.user, article=article).exists()
        is_bookmarked = Bookmark.objects.filter(user=request.user, article=article).exists()

    comments = article.comments.filter(parent__isnull=True).select_related('user').prefetch_related('replies__user')

    more_articles = published_articles().filter(
        author=article.author
    ).exclude(id=article.id).order_by('-created_at')[:3]

    context = {
        'article': article,
        'comments': comments,
        'comment_count': article.comments.count(),
        'is_liked': is_liked,
        'is_bookmarked': is_bookmarked,
        'more_articles': more_articles,
    }
    return render(request, 'core/article_detail.html', context)


@require_POST
@login_required
def toggle_like(request, article_id):
    """
    Like or unlike an article. Returns JSON with the new state and count.
    """
    article = get_object_or_404(Article, id=article_id, status=Article.Status.PUBLISHED)

    deleted, _ = ArticleLike.objects.filter(user=request.user, article=article).delete()
    if deleted:
        Article.objects.filter(id=article.id, likes__gt=0).update(likes=F('likes') - 1)
        liked = False
    else:
        # get_or_create absorbs the IntegrityError of a concurrent first like
        _like, created = ArticleLike.objects.get_or_create(user=request.user, article=article)
        if created:
            Article.objects.filter(id=article.id).update(likes=F('likes') + 1)
        liked = True

    article.refresh_from_db(fields=['likes'])
    return JsonResponse({
        'success': True,
        'liked': liked,
        'likes': article.likes,
    })


@require_POST
@login_required
def toggle_bookmark(request, article_id):
    """
    Add or remove an article from the user's bookmarks.
    """
    article = get_object_or_404(Article, id=article_id, status=Article.Status.PUBLISHED)

    deleted, _ = Bookmark.objects.filter(user=request.user, article=article).delete()
    if not deleted:
        Bookmark.objects.get_or_create(user=request.user, article=article)

    return JsonResponse({
        'success': True,
        'bookmarked': not deleted,
    })


@require_POST
@login_required
def post_comment(request, article_id):
    """
    Post a comment or a reply on an article.
    """
    article = get_object_or_404(Article, id=article_id, status=Article.Status.PUBLISHED)
    content = request.POST.get('content', '').strip()

    if not content:
        messages.error(request, 'Comment cannot be empty.')
        return redirect(article.get_absolute_url())

    parent = None
    parent_id = request.POST.get('parent_id')
    if parent_id and parent_id.isdigit():
        parent = Comment.objects.filter(id=parent_id, article=article).first()

    Comment.objects.create(
        article=article,
        user=request.user,
        content=content[:2000],
        parent=parent,
    )
    messages.success(request, 'Comment posted.')
    return redirect(f"{article.get_absolute_url()}#comments")
