from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from .models import (
    Article,
    Book,
    Bookmark,
    Category,
    Comment,
    Message,
    Notification,
    Purchase,
    ReadingHistory,
)


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'slug', 'color')
    search_fields = ('name',)
    prepopulated_fields = {'slug': ('name',)}


@admin.register(Article)
class ArticleAdmin(admin.ModelAdmin):
    """
    Admin configuration for Article model.
    ``content`` is the editor's JSON document and is edited as raw JSON here.
    """

    list_display = (
        'title',
        'author',
        'category',
        'status',
        'views',
        'likes',
        'is_featured',
        'is_editors_pick',
        'created_at',
    )

    list_filter = (
        'status',
        'category',
        'is_featured',
        'is_editors_pick',
        'created_at',
    )

    search_fields = (
        'title',
        'excerpt',
        'author__email',
        'author__name',
    )

    readonly_fields = (
        'read_time',
        'views',
        'likes',
        'updated_at',
    )

    fieldsets = (
        (None, {
            'fields': ('title', 'slug', 'author', 'category')
        }),
        (_('Content'), {
            'fields': ('excerpt', 'banner_url', 'content', 'seo_keywords')
        }),
        (_('Publishing'), {
            'fields': ('status', 'is_featured', 'is_editors_pick', 'created_at', 'updated_at')
        }),
        (_('Statistics'), {
            'fields': ('read_time', 'views', 'likes'),
            'classes': ('collapse',)
        }),
    )

    autocomplete_fields = ['author']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    actions = ['publish_articles', 'unpublish_articles']

    @admin.action(description=_('Publish selected articles'))
    def publish_articles(self, request, queryset):
        updated = queryset.update(status=Article.Status.PUBLISHED)
        self.message_user(request, _(f'{updated} article(s) published.'))

    @admin.action(description=_('Move selected articles back to draft'))
    def unpublish_articles(self, request, queryset):
        updated = queryset.update(status=Article.Status.DRAFT)
        self.message_user(request, _(f'{updated} article(s) moved to draft.'))


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ('article', 'user', 'parent', 'created_at')
    search_fields = ('content', 'user__email', 'article__title')
    list_select_related = ('article', 'user')


@admin.register(Book)
class BookAdmin(admin.ModelAdmin):
    list_display = ('title', 'author_name', 'category', 'price_display', 'is_featured', 'created_at')
    list_filter = ('category', 'is_featured')
    search_fields = ('title', 'author_name', 'description')

    def price_display(self, obj):
        """Display formatted price."""
        return obj.formatted_price
    price_display.short_description = _('Price')


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    """
    Purchases are written by payment reconciliation only, so the admin
    is read-only.
    """

    list_display = ('reference', 'user', 'book', 'amount', 'status', 'created_at')
    list_filter = ('status', 'created_at')
    search_fields = ('reference', 'user__email', 'book__title')
    list_select_related = ('user', 'book')
    date_hierarchy = 'created_at'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('title', 'user', 'notification_type', 'is_read', 'created_at')
    list_filter = ('notification_type', 'is_read')
    search_fields = ('title', 'body', 'user__email')


@admin.register(Bookmark)
class BookmarkAdmin(admin.ModelAdmin):
    list_display = ('user', 'article', 'created_at')
    list_select_related = ('user', 'article')


@admin.register(ReadingHistory)
class ReadingHistoryAdmin(admin.ModelAdmin):
    list_display = ('user', 'article', 'last_read_at')
    list_select_related = ('user', 'article')


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ('sender', 'receiver', 'short_content', 'is_read', 'created_at')
    list_filter = ('is_read', 'created_at')
    search_fields = ('content', 'sender__email', 'receiver__email')
    list_select_related = ('sender', 'receiver')
    date_hierarchy = 'created_at'

    def short_content(self, obj):
        return obj.content[:60]
    short_content.short_description = _('Content')
