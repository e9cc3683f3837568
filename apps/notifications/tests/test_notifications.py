"""Tests for notification delivery and the notifications API."""

from __future__ import annotations

from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.finances.domain.events import RentDueReminder
from apps.notifications.handlers import on_rent_due
from apps.notifications.models import Notification
from apps.notifications.services import create_in_app_notification, set_read_state
from apps.notifications.tasks import deliver_notification
from apps.users.models import User


@pytest.mark.django_db
def test_delivery_to_missing_user_is_dropped():
    assert deliver_notification(user_id=4242, title="Hello", message="Nobody home") is None
    assert not Notification.objects.exists()


@pytest.mark.django_db
def test_unknown_property_reference_is_cleared(tenant):
    notification = create_in_app_notification(tenant.pk, "Hello", "Hi", property_id=999)
    assert notification.property_id is None


@pytest.mark.django_db
def test_set_read_state_only_touches_the_owner(tenant, owner):
    create_in_app_notification(tenant.pk, "One", "1")
    create_in_app_notification(tenant.pk, "Two", "2")
    create_in_app_notification(owner.pk, "Three", "3")

    assert set_read_state(tenant.pk, is_read=True) == 2
    assert set_read_state(tenant.pk, is_read=True) == 0
    assert Notification.objects.filter(user=owner, is_read=False).count() == 1


@pytest.mark.django_db
def test_rent_due_event_reaches_tenant_and_owner(owner, tenant, prop):
    on_rent_due(
        RentDueReminder(
            booking_id=1,
            property_id=prop.pk,
            property_title=prop.title,
            tenant_id=tenant.pk,
            tenant_name="Tenant",
            owner_id=owner.pk,
            month=12,
            year=2023,
            period_label="December 2023",
            total_expected=Decimal("1200.00"),
            total_paid=Decimal("200.00"),
            due=Decimal("1000.00"),
        )
    )

    tenant_note = Notification.objects.get(user=tenant)
    assert tenant_note.message == (
        "Monthly rent due for Garden flat (December 2023). Paid $200.00 of $1,200.00. Due $1,000.00."
    )
    assert tenant_note.link == "/dashboard?tab=transactions"
    assert Notification.objects.get(user=owner).title == "Tenant due reminder"


class NotificationAPITests(APITestCase):
    """Covers listing and read-state endpoints."""

    def setUp(self) -> None:
        self.user = User.objects.create_user(email="tenant@example.com", password="TenantPass123")
        self.other = User.objects.create_user(email="other@example.com", password="OtherPass123")
        self.first = Notification.objects.create(user=self.user, title="Booking approved", message="a")
        self.second = Notification.objects.create(user=self.user, title="Rent due reminder", message="b")
        self.foreign = Notification.objects.create(user=self.other, title="Booking rejected", message="c")
        self.client.force_authenticate(self.user)

    def test_list_counts_unread(self) -> None:
        self.first.is_read = True
        self.first.save()

        response = self.client.get(reverse("notification-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 2)
        self.assertEqual(response.data["unread_count"], 1)

        unread = self.client.get(reverse("notification-list"), {"unread_only": "true"})
        self.assertEqual([row["id"] for row in unread.data["results"]], [self.second.id])

    def test_mark_read_and_unread(self) -> None:
        response = self.client.post(reverse("notification-mark-read", args=[self.first.id]))
        self.assertEqual(response.data, {"status": "read"})
        self.first.refresh_from_db()
        self.assertTrue(self.first.is_read)

        self.client.post(reverse("notification-mark-unread", args=[self.first.id]))
        self.first.refresh_from_db()
        self.assertFalse(self.first.is_read)

    def test_mark_all_read_then_unread(self) -> None:
        response = self.client.post(reverse("notification-mark-all-read"))
        self.assertEqual(response.data, {"updated": 2})

        response = self.client.post(reverse("notification-mark-all-unread"))
        self.assertEqual(response.data, {"updated": 2})
        self.foreign.refresh_from_db()
        self.assertFalse(self.foreign.is_read)

    def test_foreign_notifications_are_invisible(self) -> None:
        response = self.client.post(reverse("notification-mark-read", args=[self.foreign.id]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        response = self.client.delete(reverse("notification-detail", args=[self.foreign.id]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(Notification.objects.filter(pk=self.foreign.id).exists())

    def test_delete_own_notification(self) -> None:
        response = self.client.delete(reverse("notification-detail", args=[self.first.id]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Notification.objects.filter(pk=self.first.id).exists())
