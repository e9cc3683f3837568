"""FilterSet definitions for the rent ledger."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Transaction


class TransactionFilterSet(django_filters.FilterSet):
    """Status/period/property filters plus a free-text ``search``."""

    status = django_filters.ChoiceFilter(choices=Transaction.Status.choices)
    month = django_filters.NumberFilter(field_name="month")
    year = django_filters.NumberFilter(field_name="year")
    property = django_filters.NumberFilter(field_name="property_id")
    booking = django_filters.NumberFilter(field_name="booking_id")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Transaction
        fields = ["status", "month", "year", "property", "booking"]

    def filter_search(self, queryset, name, value):  # type: ignore
        if not value:
            return queryset
        return queryset.filter(
            Q(month_name__icontains=value)
            | Q(description__icontains=value)
            | Q(reference__icontains=value)
            | Q(property__title__icontains=value)
        )
