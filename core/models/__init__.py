"""
Core models package.
All models are re-exported here so callers can import from ``core.models``.
"""

from .article import (
    Category,
    Article,
    Comment,
    ArticleLike,
    Bookmark,
    ReadingHistory,
)

from .book import (
    Book,
)

from .purchase import (
    Purchase,
)

from .notification import (
    Notification,
)

from .message import (
    Message,
)

__all__ = [
    # Blog
    'Category',
    'Article',
    'Comment',
    'ArticleLike',
    'Bookmark',
    'ReadingHistory',
    # Bookstore
    'Book',
    'Purchase',
    # Notifications and messaging
    'Notification',
    'Message',
]
