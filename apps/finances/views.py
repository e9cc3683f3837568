"""API views for the rent ledger.

Tenants see their own entries, owners the entries on their properties and
admins everything. Payments are dispatched as commands; the handlers
enforce who may pay what.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.application.message_bus import message_bus
from shared.infrastructure.identity import actor_from_request

from .application.command_handlers import (
    DeleteTransactionCommand,
    PayCommand,
    RecordMonthlyPaymentCommand,
)
from .filters import TransactionFilterSet
from .models import Transaction
from .serializers import (
    MonthlyPaymentSerializer,
    PayByPeriodSerializer,
    PaySerializer,
    TransactionSerializer,
)


def group_entries(rows, *, by_owner: bool) -> list:
    """Nest serialized entries two levels deep.

    Tenants get owner -> property -> entries; owners and admins get
    property -> tenant -> entries.
    """

    if by_owner:
        outer_key, inner_key, inner_label = "owner_id", "property_id", "properties"
    else:
        outer_key, inner_key, inner_label = "property_id", "tenant_id", "tenants"

    groups: dict = {}
    for row in rows:
        outer = groups.setdefault(row[outer_key], {outer_key: row[outer_key], inner_label: {}})
        inner = outer[inner_label].setdefault(row[inner_key], {inner_key: row[inner_key], "transactions": []})
        inner["transactions"].append(row)

    return [{**group, inner_label: list(group[inner_label].values())} for group in groups.values()]


class TransactionViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Ledger entries visible to the caller and the payment actions."""

    queryset = Transaction.objects.select_related("tenant", "property", "booking").all()
    serializer_class = TransactionSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_class = TransactionFilterSet
    lookup_value_regex = r"\d+"

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        actor = actor_from_request(self.request)
        if actor.is_admin:
            return qs
        if actor.is_owner:
            return qs.filter(property__owner_id=actor.user_id)
        return qs.filter(tenant_id=actor.user_id)

    def list(self, request, *args, **kwargs):  # type: ignore
        response = super().list(request, *args, **kwargs)
        if request.query_params.get("grouped") == "true":
            actor = actor_from_request(request)
            response.data["grouped"] = group_entries(response.data["results"], by_owner=actor.is_tenant)
        return response

    def destroy(self, request, pk=None):  # type: ignore
        message_bus.handle_command(
            DeleteTransactionCommand(actor=actor_from_request(request), transaction_id=int(pk))
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def pay(self, request, pk=None):  # type: ignore
        serializer = PaySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        entry = message_bus.handle_command(
            PayCommand(
                actor=actor_from_request(request),
                transaction_id=int(pk),
                amount=data.get("amount"),
                payment_method=data.get("payment_method"),
                desired_status=data.get("desired_status"),
            )
        )
        return Response(TransactionSerializer(entry).data)

    @action(detail=False, methods=["post"], url_path="pay")
    def pay_for_period(self, request):  # type: ignore
        serializer = PayByPeriodSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        entry = message_bus.handle_command(
            PayCommand(
                actor=actor_from_request(request),
                booking_id=data["booking"],
                month=data["month"],
                year=data["year"],
                amount=data.get("amount"),
                payment_method=data.get("payment_method"),
                desired_status=data.get("desired_status"),
            )
        )
        return Response(TransactionSerializer(entry).data)

    @action(detail=False, methods=["post"], url_path="monthly-pay")
    def monthly_payment(self, request):  # type: ignore
        serializer = MonthlyPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        entry = message_bus.handle_command(
            RecordMonthlyPaymentCommand(
                actor=actor_from_request(request),
                booking_id=data["booking"],
                amount=data["amount"],
                month=data.get("month"),
                year=data.get("year"),
                payment_method=data.get("payment_method"),
                total_expected=data.get("total_expected"),
            )
        )
        return Response(TransactionSerializer(entry).data, status=status.HTTP_201_CREATED)
