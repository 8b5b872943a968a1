"""
Core views package.
All views are re-exported here for ``core.urls``.
"""

from .blog import (
    homepage,
    blog_list,
    article_detail,
    toggle_like,
    toggle_bookmark,
    post_comment,
)

from .books import (
    book_list,
    book_detail,
)

from .payments import (
    purchase_book,
    initialize_payment,
    paystack_verify,
    paystack_webhook,
)

from .dashboard import (
    purchase_history,
    bookmarks_list,
    reading_history_list,
)

from .notifications import (
    notifications_page,
    mark_notifications_read,
    notifications_count_api,
)

from .inbox import (
    messages_page,
    send_message,
    messages_overview,
)

from .profile import (
    profile_settings,
)
