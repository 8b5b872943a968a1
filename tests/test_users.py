import pytest
from django.urls import reverse

from users.models import User

pytestmark = pytest.mark.django_db


def test_create_user_uses_email(django_user_model):
    user = django_user_model.objects.create_user(email="New@Example.COM", password="pw-12345")
    assert user.email == "New@example.com"
    assert user.role == User.Role.USER
    assert user.check_password("pw-12345")
    assert user.get_display_name() == "New"


def test_create_user_requires_email(django_user_model):
    with pytest.raises(ValueError):
        django_user_model.objects.create_user(email="", password="pw")


def test_create_superuser_is_site_admin(django_user_model):
    admin = django_user_model.objects.create_superuser(email="boss@example.com", password="pw")
    assert admin.is_staff and admin.is_superuser
    assert admin.role == User.Role.ADMIN
    assert admin.is_site_admin


def test_get_by_email(user, django_user_model):
    assert django_user_model.objects.get_by_email(" READER@example.com ") == user
    assert django_user_model.objects.get_by_email("missing@example.com") is None
    assert django_user_model.objects.get_by_email(None) is None


def test_initials(user):
    assert user.initials == "AR"


def test_profile_page_requires_login(client):
    assert client.get(reverse("core:profile")).status_code == 302


def test_profile_update(client, user):
    client.force_login(user)
    assert client.get(reverse("core:profile")).status_code == 200

    response = client.post(reverse("core:profile"), {
        "name": "  Ada Lovelace ",
        "bio": "Reads annual reports for fun.",
        "avatar_url": "https://cdn.example.com/ada.png",
    })

    assert response.status_code == 302
    assert response.url == reverse("core:profile")
    user.refresh_from_db()
    assert user.name == "Ada Lovelace"
    assert user.bio == "Reads annual reports for fun."
    assert user.avatar_url == "https://cdn.example.com/ada.png"
    assert user.email == "reader@example.com"


def test_profile_update_rejects_invalid_avatar(client, user):
    client.force_login(user)

    response = client.post(reverse("core:profile"), {
        "name": "Ada",
        "bio": "",
        "avatar_url": "not a url",
    })

    assert response.status_code == 200
    assert "avatar_url" in response.context["form"].errors
    user.refresh_from_db()
    assert user.name == "Ada Reader"
