"""Serializers for notifications."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    """Read model of a notification; ``property_title`` is null for account-level messages."""

    property_title = serializers.ReadOnlyField(source='property.title')

    class Meta:
        model = Notification
        fields = [
            'id',
            'user',
            'property',
            'property_title',
            'title',
            'message',
            'link',
            'is_read',
            'metadata',
            'created_at',
        ]
        read_only_fields = fields
