"""Integration tests for rent ledger endpoints."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.finances.models import Transaction
from apps.properties.models import Property
from apps.users.models import User


class TransactionAPITests(APITestCase):
    """Covers listing, paying and deleting ledger entries."""

    def setUp(self) -> None:
        self.tenant = User.objects.create_user(email="tenant@example.com", password="TenantPass123")
        self.owner = User.objects.create_user(
            email="owner@example.com",
            password="OwnerPass123",
            role=User.RoleChoices.OWNER,
        )
        self.property = Property.objects.create(
            owner=self.owner,
            title="Studio by the park",
            price=Decimal("500.00"),
            availability_status=Property.AvailabilityStatus.BOOKED,
        )
        now = timezone.now()
        self.booking = Booking.objects.create(
            tenant=self.tenant,
            property=self.property,
            start_date=now - timedelta(days=40),
            end_date=now + timedelta(days=60),
            status=Booking.Status.APPROVED,
        )
        self.entry = Transaction.objects.create(
            booking=self.booking,
            tenant=self.tenant,
            property=self.property,
            month=3,
            year=2024,
            month_name="March",
            total_expected=Decimal("500.00"),
        )
        self.client.force_authenticate(self.tenant)
        self.list_url = reverse("transaction-list")

    def test_tenant_lists_own_entries_with_due(self) -> None:
        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)
        row = response.data["results"][0]
        self.assertEqual(row["reference"], self.entry.reference)
        self.assertEqual(Decimal(row["due"]), Decimal("500.00"))
        self.assertFalse(row["is_due_cleared"])

    def test_filters_by_status_and_search(self) -> None:
        self.assertEqual(self.client.get(self.list_url, {"status": "paid"}).data["count"], 0)
        self.assertEqual(self.client.get(self.list_url, {"search": "march"}).data["count"], 1)
        self.assertEqual(self.client.get(self.list_url, {"search": "park"}).data["count"], 1)

    def test_other_tenant_sees_nothing(self) -> None:
        outsider = User.objects.create_user(email="outsider@example.com", password="Outsider123")
        self.client.force_authenticate(outsider)

        self.assertEqual(self.client.get(self.list_url).data["count"], 0)
        response = self.client.get(reverse("transaction-detail", args=[self.entry.id]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_pay_entry_completes_booking(self) -> None:
        response = self.client.post(
            reverse("transaction-pay", args=[self.entry.id]),
            {"payment_method": "bank_transfer"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], Transaction.Status.PAID)
        self.assertTrue(response.data["is_due_cleared"])
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, Booking.Status.COMPLETED)

    def test_overpayment_returns_remaining_due(self) -> None:
        response = self.client.post(
            reverse("transaction-pay", args=[self.entry.id]),
            {"amount": "600.00", "desired_status": "unpaid"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "invalid_input")
        self.assertEqual(response.data["remaining_due"], "500.00")
        self.assertEqual(response.data["current_paid"], "0.00")

    def test_grouped_listing_for_tenant_nests_owner_then_property(self) -> None:
        response = self.client.get(self.list_url, {"grouped": "true"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["grouped"]), 1)
        owner_group = response.data["grouped"][0]
        self.assertEqual(owner_group["owner_id"], self.owner.id)
        property_group = owner_group["properties"][0]
        self.assertEqual(property_group["property_id"], self.property.id)
        self.assertEqual([row["id"] for row in property_group["transactions"]], [self.entry.id])

    def test_grouped_listing_for_owner_nests_property_then_tenant(self) -> None:
        second_tenant = User.objects.create_user(email="second@example.com", password="SecondPass123")
        Transaction.objects.create(
            booking=self.booking,
            tenant=second_tenant,
            property=self.property,
            month=4,
            year=2024,
            month_name="April",
            total_expected=Decimal("500.00"),
        )
        self.client.force_authenticate(self.owner)

        response = self.client.get(self.list_url, {"grouped": "true"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 2)
        property_group = response.data["grouped"][0]
        self.assertEqual(property_group["property_id"], self.property.id)
        tenant_ids = {group["tenant_id"] for group in property_group["tenants"]}
        self.assertEqual(tenant_ids, {self.tenant.id, second_tenant.id})

    def test_plain_listing_has_no_grouping(self) -> None:
        self.assertNotIn("grouped", self.client.get(self.list_url).data)

    def test_owner_cannot_pay(self) -> None:
        self.client.force_authenticate(self.owner)

        response = self.client.post(reverse("transaction-pay", args=[self.entry.id]), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)

    def test_pay_for_period_creates_entry(self) -> None:
        response = self.client.post(
            reverse("transaction-pay-for-period"),
            {"booking": self.booking.id, "month": 4, "year": 2024, "amount": "100.00", "desired_status": "unpaid"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["month_name"], "April")
        self.assertEqual(Decimal(response.data["total_paid"]), Decimal("100.00"))

    def test_monthly_payment(self) -> None:
        response = self.client.post(
            reverse("transaction-monthly-payment"),
            {"booking": self.booking.id, "amount": "200.00", "month": 3, "year": 2024},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["id"], self.entry.id)
        self.assertEqual(response.data["status"], Transaction.Status.UNPAID)
        self.assertEqual(Decimal(response.data["due"]), Decimal("300.00"))

    def test_owner_deletes_entry(self) -> None:
        self.client.force_authenticate(self.owner)

        response = self.client.delete(reverse("transaction-detail", args=[self.entry.id]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Transaction.objects.filter(pk=self.entry.id).exists())
