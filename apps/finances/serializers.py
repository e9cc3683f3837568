"""Serializers for the rent ledger."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Transaction


class TransactionSerializer(serializers.ModelSerializer):
    """Read model of a ledger entry."""

    tenant_id = serializers.ReadOnlyField(source="tenant.id")
    property_id = serializers.ReadOnlyField(source="property.id")
    property_title = serializers.ReadOnlyField(source="property.title")
    owner_id = serializers.ReadOnlyField(source="property.owner_id")
    booking_id = serializers.ReadOnlyField(source="booking.id")
    due = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    is_due_cleared = serializers.BooleanField(read_only=True)

    class Meta:
        model = Transaction
        fields = [
            "id",
            "reference",
            "tenant_id",
            "property_id",
            "property_title",
            "owner_id",
            "booking_id",
            "month",
            "year",
            "month_name",
            "amount",
            "total_expected",
            "total_paid",
            "due",
            "is_due_cleared",
            "status",
            "payment_method",
            "payment_date",
            "description",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PaySerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    payment_method = serializers.CharField(required=False, allow_blank=True)
    desired_status = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class PayByPeriodSerializer(PaySerializer):
    booking = serializers.IntegerField(min_value=1)
    month = serializers.IntegerField(min_value=1, max_value=12)
    year = serializers.IntegerField(min_value=1970)


class MonthlyPaymentSerializer(serializers.Serializer):
    booking = serializers.IntegerField(min_value=1)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    month = serializers.IntegerField(min_value=1, max_value=12, required=False, allow_null=True)
    year = serializers.IntegerField(min_value=1970, required=False, allow_null=True)
    payment_method = serializers.CharField(required=False, allow_blank=True)
    total_expected = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
