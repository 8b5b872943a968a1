"""
Blog models: categories, articles and reader interactions.
"""

from django.db import models
from django.conf import settings
from django.utils.text import slugify
from django.utils import timezone
from django.urls import reverse
from django.utils.translation import gettext_lazy as _

from ..content_renderer import extract_text, calculate_read_time


class Category(models.Model):
    """Shared category for articles and books."""

    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=120, unique=True, blank=True)
    description = models.TextField(blank=True, default='')
    color = models.CharField(max_length=7, blank=True, default='#000000')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']
        verbose_name = 'Category'
        verbose_name_plural = 'Categories'

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name) or 'category'
        super().save(*args, **kwargs)


class Article(models.Model):
    """
    Blog article.

    ``content`` holds the editor document tree verbatim (a ``doc`` root node
    with block children, or a legacy ``{"html": ...}`` wrapper) and is only
    ever turned into markup by ``core.content_renderer``.
    """

    class Status(models.TextChoices):
        DRAFT = 'draft', _('Draft')
        PUBLISHED = 'published', _('Published')

    title = models.CharField(max_length=200)
    slug = models.SlugField(max_length=250, unique=True, blank=True)
    banner_url = models.URLField(max_length=500, blank=True, default='')
    excerpt = models.TextField(blank=True, default='')
    content = models.JSONField(default=dict, blank=True)

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='articles'
    )
    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='articles'
    )

    # Stats
    read_time = models.PositiveIntegerField(default=1)
    views = models.PositiveIntegerField(default=0)
    likes = models.PositiveIntegerField(default=0)

    is_featured = models.BooleanField(default=False)
    is_editors_pick = models.BooleanField(default=False)
    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.DRAFT
    )
    seo_keywords = models.CharField(max_length=300, blank=True, default='')

    # Timestamps
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Article'
        verbose_name_plural = 'Articles'
        indexes = [
            models.Index(fields=['status', '-created_at'], name='core_articl_status_5b0e4e_idx'),
        ]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        if not self.slug:
            base_slug = slugify(self.title)
            if not base_slug:
                base_slug = 'article'
            slug = base_slug
            counter = 1
            while Article.objects.filter(slug=slug).exclude(pk=self.pk).exists():
                slug = f'{base_slug}-{counter}'
                counter += 1
            self.slug = slug
        self.read_time = calculate_read_time(extract_text(self.content))
        super().save(*args, **kwargs)

    def get_absolute_url(self):
        return reverse('core:article_detail', kwargs={'slug': self.slug})

    @property
    def is_published(self):
        return self.status == self.Status.PUBLISHED


class Comment(models.Model):
    """Reader comment; ``parent`` makes it a reply."""

    article = models.ForeignKey(Article, on_delete=models.CASCADE, related_name='comments')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='comments')
    content = models.TextField(max_length=2000)
    parent = models.ForeignKey(
        'self',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='replies'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['created_at']

    def __str__(self):
        return f"{self.user.email} on {self.article.title}"


class ArticleLike(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='article_likes')
    article = models.ForeignKey(Article, on_delete=models.CASCADE, related_name='article_likes')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'article'],
                name='unique_user_article_like'
            )
        ]


class Bookmark(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='bookmarks')
    article = models.ForeignKey(Article, on_delete=models.CASCADE, related_name='bookmarks')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'article'],
                name='unique_user_article_bookmark'
            )
        ]

    def __str__(self):
        return f"{self.user.email} - {self.article.title}"


class ReadingHistory(models.Model):
    """Last time a user opened an article; one row per user-article pair."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='reading_history')
    article = models.ForeignKey(Article, on_delete=models.CASCADE, related_name='reading_history')
    last_read_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-last_read_at']
        verbose_name_plural = 'Reading history'
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'article'],
                name='unique_user_article_history'
            )
        ]

    @classmethod
    def record(cls, user, article):
        """Upsert the last-read timestamp for ``user`` on ``article``."""
        entry, _ = cls.objects.update_or_create(
            user=user,
            article=article,
            defaults={'last_read_at': timezone.now()},
        )
        return entry
