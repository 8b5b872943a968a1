from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    # Homepage
    path('', views.homepage, name='homepage'),

    # Blog
    path('blog/', views.blog_list, name='blog_list'),
    path('blog/<slug:slug>/', views.article_detail, name='article_detail'),
    path('blog/articles/<int:article_id>/like/', views.toggle_like, name='toggle_like'),
    path('blog/articles/<int:article_id>/bookmark/', views.toggle_bookmark, name='toggle_bookmark'),
    path('blog/articles/<int:article_id>/comments/', views.post_comment, name='post_comment'),

    # Bookstore
    path('bookstore/', views.book_list, name='book_list'),
    path('bookstore/<int:book_id>/', views.book_detail, name='book_detail'),
    path('bookstore/<int:book_id>/purchase/', views.purchase_book, name='purchase_book'),

    # Payment - Paystack
    path('api/paystack/initialize/', views.initialize_payment, name='paystack_initialize'),
    path('api/paystack/verify/', views.paystack_verify, name='paystack_verify'),
    path('api/paystack/webhook/', views.paystack_webhook, name='paystack_webhook'),

    # Dashboard
    path('dashboard/purchases/', views.purchase_history, name='purchase_history'),
    path('dashboard/bookmarks/', views.bookmarks_list, name='bookmarks'),
    path('dashboard/history/', views.reading_history_list, name='reading_history'),

    # Notifications
    path('dashboard/notifications/', views.notifications_page, name='notifications'),
    path('api/notifications/read/', views.mark_notifications_read, name='mark_notifications_read'),
    path('api/notifications/count/', views.notifications_count_api, name='notifications_count'),

    # Messages
    path('dashboard/messages/', views.messages_page, name='messages'),
    path('dashboard/messages/<int:user_id>/send/', views.send_message, name='send_message'),
    path('dashboard/messages/overview/', views.messages_overview, name='messages_overview'),

    # Profile
    path('dashboard/profile/', views.profile_settings, name='profile'),
]
