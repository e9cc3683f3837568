"""Models for the review domain.

``Review`` is a tenant's public feedback on a property; ``UserRating``
is a rating one user gives another in the role they played (owner or
tenant). Both reference users and properties and are removed by the
account deletion cascade.
"""

from __future__ import annotations

from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Review(models.Model):
    """Represents a review left by a tenant for a property."""

    author = models.ForeignKey(
        'users.CustomUser', on_delete=models.CASCADE, related_name='reviews'
    )
    property = models.ForeignKey(
        'properties.Property', on_delete=models.CASCADE, related_name='reviews'
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        help_text=_('Rating from 1 to 5')
    )
    comment = models.TextField(blank=True)
    is_public = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['author', 'property'], name='one_review_per_author_property'),
        ]
        indexes = [
            models.Index(fields=['property', '-created_at']),
        ]

    def __str__(self) -> str:
        return f"Review by {self.author_id} for property {self.property_id} (Rating: {self.rating})"


class UserRating(models.Model):
    """A rating of one user by another."""

    class Context(models.TextChoices):
        OWNER = 'owner', _('As owner')
        TENANT = 'tenant', _('As tenant')

    rater = models.ForeignKey(
        'users.CustomUser', on_delete=models.CASCADE, related_name='ratings_given'
    )
    ratee = models.ForeignKey(
        'users.CustomUser', on_delete=models.CASCADE, related_name='ratings_received'
    )
    context = models.CharField(max_length=10, choices=Context.choices)
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )
    comment = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['ratee', 'rater', 'context'], name='one_rating_per_context'),
        ]

    def __str__(self) -> str:
        return f"{self.rater_id} rated {self.ratee_id} as {self.context}: {self.rating}"
