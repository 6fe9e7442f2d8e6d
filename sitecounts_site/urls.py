"""
URL configuration for the sitecounts_site project.
"""
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include("sitecounts.urls")),
]
