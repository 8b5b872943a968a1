"""
URL configuration for dividend_project project.
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # Admin
    path("admin/", admin.site.urls),

    # Authentication (django-allauth)
    path("accounts/", include("allauth.urls")),

    # Core app (blog, bookstore, payments, dashboard)
    path("", include("core.urls")),
]
