"""Admin registrations for reviews and ratings."""

from __future__ import annotations

from django.contrib import admin

from .models import Review, UserRating


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("property", "author", "rating", "is_public", "created_at")
    list_filter = ("rating", "is_public")
    search_fields = ("property__title", "author__email")


@admin.register(UserRating)
class UserRatingAdmin(admin.ModelAdmin):
    list_display = ("ratee", "rater", "context", "rating", "created_at")
    list_filter = ("context", "rating")
