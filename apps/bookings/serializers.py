"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Booking, LeaveRequest


class BookingCreateSerializer(serializers.Serializer):
    """Booking request from a tenant.

    Dates are taken as raw strings; the booking policy decides what an
    unparseable value means.
    """

    property = serializers.IntegerField(min_value=1)
    start_date = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    end_date = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    message = serializers.CharField(required=False, allow_blank=True, max_length=500, default="")


class BookingDecisionSerializer(serializers.Serializer):
    status = serializers.CharField()
    rejection_reason = serializers.CharField(required=False, allow_blank=True, max_length=500, default="")


class BookingSerializer(serializers.ModelSerializer):
    """Read model of a booking."""

    tenant_id = serializers.ReadOnlyField(source="tenant.id")
    property_id = serializers.ReadOnlyField(source="property.id")
    property_title = serializers.ReadOnlyField(source="property.title")
    owner_id = serializers.ReadOnlyField(source="property.owner_id")

    class Meta:
        model = Booking
        fields = [
            "id",
            "tenant_id",
            "property_id",
            "property_title",
            "owner_id",
            "start_date",
            "end_date",
            "total_amount",
            "status",
            "message",
            "rejection_reason",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class LeaveRequestCreateSerializer(serializers.Serializer):
    booking = serializers.IntegerField(min_value=1)
    message = serializers.CharField(required=False, allow_blank=True, max_length=1000, default="")


class LeaveRequestDecisionSerializer(serializers.Serializer):
    decision = serializers.ChoiceField(choices=["approve", "reject"])
    condition = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    note = serializers.CharField(required=False, allow_blank=True, max_length=1000, default="")


class LeaveRequestSerializer(serializers.ModelSerializer):
    booking_id = serializers.ReadOnlyField(source="booking.id")
    tenant_id = serializers.ReadOnlyField(source="tenant.id")
    owner_id = serializers.ReadOnlyField(source="owner.id")
    property_title = serializers.ReadOnlyField(source="booking.property.title")

    class Meta:
        model = LeaveRequest
        fields = [
            "id",
            "booking_id",
            "tenant_id",
            "owner_id",
            "property_title",
            "message",
            "status",
            "condition",
            "decision_note",
            "effective_end_date",
            "decided_at",
            "created_at",
        ]
        read_only_fields = fields
