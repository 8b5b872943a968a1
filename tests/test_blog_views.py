import pytest
from django.db.models import F, QuerySet
from django.urls import reverse

from core.models import Article, ArticleLike, Bookmark, Comment, Notification, Purchase, ReadingHistory

pytestmark = pytest.mark.django_db


def test_article_save_sets_slug_and_read_time(author):
    body = {
        "type": "doc",
        "content": [{"type": "paragraph", "content": [{"type": "text", "text": "word " * 401}]}],
    }
    first = Article.objects.create(title="Same Title", author=author, content=body)
    second = Article.objects.create(title="Same Title", author=author)

    assert first.slug == "same-title"
    assert second.slug == "same-title-1"
    assert first.read_time == 3
    assert second.read_time == 1


def test_article_detail_renders_document(client, article):
    response = client.get(article.get_absolute_url())

    assert response.status_code == 200
    html = response.content.decode()
    assert '<div class="article-content">' in html
    assert "<h6>Yield</h6>" in html
    assert "<p><strong>Cash </strong>returns.</p>" in html

    article.refresh_from_db()
    assert article.views == 1


def test_article_detail_legacy_html(client, author):
    legacy = Article.objects.create(
        title="Legacy",
        author=author,
        status=Article.Status.PUBLISHED,
        content={"html": "<p>Imported <b>body</b></p>"},
    )
    response = client.get(legacy.get_absolute_url())
    assert "<p>Imported <b>body</b></p>" in response.content.decode()


def test_draft_article_is_hidden(client, author):
    draft = Article.objects.create(title="Draft", author=author)
    assert client.get(draft.get_absolute_url()).status_code == 404


def test_article_detail_records_reading_history(client, article, user):
    client.force_login(user)
    client.get(article.get_absolute_url())
    client.get(article.get_absolute_url())

    assert ReadingHistory.objects.filter(user=user, article=article).count() == 1
    article.refresh_from_db()
    assert article.views == 2


def test_blog_list_filters(client, article, author):
    Article.objects.create(title="Unpublished thoughts", author=author)

    response = client.get(reverse("core:blog_list"), {"search": "dividends"})
    assert response.status_code == 200
    assert list(response.context["articles"]) == [article]

    response = client.get(reverse("core:blog_list"), {"category": "nothing-here"})
    assert list(response.context["articles"]) == []


def test_homepage(client, article, book):
    book.is_featured = True
    book.save()
    response = client.get(reverse("core:homepage"))
    assert response.status_code == 200
    assert list(response.context["featured_books"]) == [book]


def test_toggle_like(client, article, user):
    client.force_login(user)
    url = reverse("core:toggle_like", args=[article.id])

    liked = client.post(url).json()
    assert liked == {"success": True, "liked": True, "likes": 1}

    unliked = client.post(url).json()
    assert unliked == {"success": True, "liked": False, "likes": 0}
    assert not ArticleLike.objects.exists()


def test_toggle_bookmark(client, article, user):
    client.force_login(user)
    url = reverse("core:toggle_bookmark", args=[article.id])

    assert client.post(url).json()["bookmarked"] is True
    assert Bookmark.objects.filter(user=user, article=article).exists()
    assert client.post(url).json()["bookmarked"] is False
    assert not Bookmark.objects.exists()


def test_post_comment_and_reply(client, article, user):
    client.force_login(user)
    url = reverse("core:post_comment", args=[article.id])

    client.post(url, {"content": "Great piece"})
    parent = Comment.objects.get()
    client.post(url, {"content": "Agreed", "parent_id": str(parent.id)})
    client.post(url, {"content": "Odd parent", "parent_id": "abc"})
    client.post(url, {"content": "   "})

    assert Comment.objects.count() == 3
    assert parent.replies.get().content == "Agreed"
    assert Comment.objects.get(content="Odd parent").parent is None


def test_book_pages(client, book, user):
    response = client.get(reverse("core:book_list"), {"error": "payment_failed"})
    assert response.status_code == 200
    assert response.context["error"] == "payment_failed"

    client.force_login(user)
    detail = client.get(book.get_absolute_url())
    assert detail.status_code == 200
    assert detail.context["already_purchased"] is False

    Purchase.objects.create(
        user=user, book=book, amount=book.price,
        reference="ref_abc123", status=Purchase.Status.SUCCESS,
    )
    assert client.get(book.get_absolute_url()).context["already_purchased"] is True


def test_purchase_history(client, book, user):
    Purchase.objects.create(
        user=user, book=book, amount=book.price,
        reference="ref_abc123", status=Purchase.Status.SUCCESS,
    )
    client.force_login(user)

    response = client.get(reverse("core:purchase_history"), {"success": "true"})

    assert response.status_code == 200
    assert response.context["just_purchased"] is True
    assert [p.reference for p in response.context["page_obj"]] == ["ref_abc123"]
    assert "₦5,000.00" in response.content.decode()


def test_dashboard_requires_login(client):
    response = client.get(reverse("core:purchase_history"))
    assert response.status_code == 302


def test_bookmarks_and_history_pages(client, article, user):
    client.force_login(user)
    Bookmark.objects.create(user=user, article=article)
    ReadingHistory.record(user, article)

    assert client.get(reverse("core:bookmarks")).status_code == 200
    response = client.get(reverse("core:reading_history"))
    assert [entry.article for entry in response.context["history"]] == [article]


def test_notifications(client, user):
    Notification.create_notification(
        user=user,
        notification_type=Notification.NotificationType.PURCHASE,
        title="Purchase Successful",
        body="Your purchase of 'Money Matters' has been confirmed.",
    )
    client.force_login(user)

    assert client.get(reverse("core:notifications_count")).json() == {"count": 1}

    page = client.get(reverse("core:notifications"))
    assert page.status_code == 200
    assert "Purchase Successful" in page.content.decode()

    partial = client.get(reverse("core:notifications"), headers={"X-Requested-With": "XMLHttpRequest"})
    assert "core/partials/notifications_list.html" in [t.name for t in partial.templates]

    assert client.post(reverse("core:mark_notifications_read")).json() == {"success": True, "updated": 1}
    assert client.get(reverse("core:notifications_count")).json() == {"count": 0}


@pytest.fixture
def concurrent_insert(monkeypatch):
    """
    Make another request insert ``model``'s row right after this request's
    delete found nothing, as two simultaneous first clicks would.
    """
    def _arm(model, **row):
        real_delete = QuerySet.delete

        def delete_then_insert(queryset):
            result = real_delete(queryset)
            if queryset.model is model:
                model.objects.create(**row)
                if model is ArticleLike:
                    Article.objects.filter(id=row["article"].id).update(likes=F("likes") + 1)
            return result

        monkeypatch.setattr(QuerySet, "delete", delete_then_insert)
    return _arm


def test_simultaneous_first_likes_count_once(client, article, user, concurrent_insert):
    client.force_login(user)
    concurrent_insert(ArticleLike, user=user, article=article)

    response = client.post(reverse("core:toggle_like", args=[article.id]))

    assert response.status_code == 200
    assert response.json() == {"success": True, "liked": True, "likes": 1}
    assert ArticleLike.objects.filter(user=user, article=article).count() == 1


def test_simultaneous_first_bookmarks_keep_one_row(client, article, user, concurrent_insert):
    client.force_login(user)
    concurrent_insert(Bookmark, user=user, article=article)

    response = client.post(reverse("core:toggle_bookmark", args=[article.id]))

    assert response.status_code == 200
    assert response.json()["bookmarked"] is True
    assert Bookmark.objects.filter(user=user, article=article).count() == 1
