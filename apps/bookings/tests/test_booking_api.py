"""Integration tests for booking API endpoints."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking, LeaveRequest
from apps.notifications.models import Notification
from apps.properties.models import Property
from apps.users.models import User


class BookingAPITests(APITestCase):
    """Covers requesting, deciding, cancelling and deleting bookings."""

    def setUp(self) -> None:
        self.tenant = User.objects.create_user(
            email="tenant@example.com",
            password="TenantPass123",
            username="Dana",
            role=User.RoleChoices.TENANT,
        )
        self.owner = User.objects.create_user(
            email="owner@example.com",
            password="OwnerPass123",
            username="Arman",
            role=User.RoleChoices.OWNER,
        )
        self.property = Property.objects.create(
            owner=self.owner,
            title="Modern apartment",
            location="City centre",
            price=Decimal("150.00"),
        )
        self.client.force_authenticate(self.tenant)
        self.list_url = reverse("booking-list")

    def _payload(self, days_ahead: int = 1, nights: int = 3) -> dict[str, str]:
        start = timezone.localdate() + timedelta(days=days_ahead)
        return {
            "property": str(self.property.id),
            "start_date": str(start),
            "end_date": str(start + timedelta(days=nights)),
            "message": "Hello",
        }

    def _create_booking(self) -> int:
        response = self.client.post(self.list_url, self._payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response.data["id"]

    def test_tenant_can_request_booking(self) -> None:
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(self.list_url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], Booking.Status.PENDING)
        self.assertEqual(Decimal(response.data["total_amount"]), Decimal("450.00"))
        booking = Booking.objects.get()
        self.assertEqual(booking.tenant, self.tenant)
        self.assertEqual(booking.property, self.property)
        self.assertTrue(
            Notification.objects.filter(user=self.owner, title="New booking request").exists()
        )

    def test_owner_cannot_request_booking(self) -> None:
        self.client.force_authenticate(self.owner)

        response = self.client.post(self.list_url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)
        self.assertEqual(response.data["code"], "forbidden")

    def test_booked_property_is_refused(self) -> None:
        self.property.availability_status = Property.AvailabilityStatus.BOOKED
        self.property.save()

        response = self.client.post(self.list_url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "invalid_state")

    def test_past_start_date_is_refused(self) -> None:
        response = self.client.post(self.list_url, self._payload(days_ahead=-3), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "invalid_input")

    def test_listing_is_scoped_to_the_caller(self) -> None:
        self._create_booking()
        outsider = User.objects.create_user(email="outsider@example.com", password="Outsider123")

        self.assertEqual(self.client.get(self.list_url).data["count"], 1)
        self.client.force_authenticate(self.owner)
        self.assertEqual(self.client.get(self.list_url).data["count"], 1)
        self.client.force_authenticate(outsider)
        self.assertEqual(self.client.get(self.list_url).data["count"], 0)

    def test_owner_approves_booking(self) -> None:
        booking_id = self._create_booking()
        self.client.force_authenticate(self.owner)

        response = self.client.post(
            reverse("booking-decide", args=[booking_id]), {"status": "approved"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], Booking.Status.APPROVED)
        self.property.refresh_from_db()
        self.assertEqual(self.property.availability_status, Property.AvailabilityStatus.BOOKED)

    def test_tenant_cannot_decide(self) -> None:
        booking_id = self._create_booking()

        response = self.client.post(
            reverse("booking-decide", args=[booking_id]), {"status": "approved"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)

    def test_tenant_can_cancel_booking(self) -> None:
        booking_id = self._create_booking()

        response = self.client.post(reverse("booking-cancel", args=[booking_id]), format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data, {"id": booking_id, "status": Booking.Status.CANCELLED})

    def test_delete_unknown_booking_is_404(self) -> None:
        response = self.client.delete(reverse("booking-detail", args=[999]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)
        self.assertEqual(response.data["code"], "not_found")

    def test_owner_deletes_booking(self) -> None:
        booking_id = self._create_booking()
        self.client.force_authenticate(self.owner)

        response = self.client.delete(reverse("booking-detail", args=[booking_id]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Booking.objects.filter(pk=booking_id).exists())

    def test_unauthenticated_requests_are_rejected(self) -> None:
        self.client.force_authenticate(None)

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class LeaveRequestAPITests(APITestCase):
    """Covers the leave request round trip between tenant and owner."""

    def setUp(self) -> None:
        self.tenant = User.objects.create_user(email="tenant@example.com", password="TenantPass123")
        self.owner = User.objects.create_user(
            email="owner@example.com",
            password="OwnerPass123",
            role=User.RoleChoices.OWNER,
        )
        self.property = Property.objects.create(
            owner=self.owner,
            title="Loft",
            price=Decimal("900.00"),
            availability_status=Property.AvailabilityStatus.BOOKED,
        )
        now = timezone.now()
        self.booking = Booking.objects.create(
            tenant=self.tenant,
            property=self.property,
            start_date=now - timedelta(days=10),
            end_date=now + timedelta(days=90),
            status=Booking.Status.APPROVED,
        )
        self.client.force_authenticate(self.tenant)

    def test_request_then_immediate_approval(self) -> None:
        response = self.client.post(
            reverse("leave-request-list"),
            {"booking": self.booking.id, "message": "Job offer elsewhere"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        leave_request_id = response.data["id"]

        duplicate = self.client.post(reverse("leave-request-list"), {"booking": self.booking.id}, format="json")
        self.assertEqual(duplicate.status_code, status.HTTP_409_CONFLICT, duplicate.data)

        self.client.force_authenticate(self.owner)
        decision = self.client.post(
            reverse("leave-request-decide", args=[leave_request_id]),
            {"decision": "approve", "condition": "immediate"},
            format="json",
        )

        self.assertEqual(decision.status_code, status.HTTP_200_OK, decision.data)
        self.assertEqual(decision.data["status"], LeaveRequest.Status.APPROVED)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, Booking.Status.COMPLETED)
        self.property.refresh_from_db()
        self.assertEqual(self.property.availability_status, Property.AvailabilityStatus.AVAILABLE)

    def test_invalid_decision_is_a_validation_error(self) -> None:
        leave_request = LeaveRequest.objects.create(booking=self.booking, tenant=self.tenant, owner=self.owner)
        self.client.force_authenticate(self.owner)

        response = self.client.post(
            reverse("leave-request-decide", args=[leave_request.id]),
            {"decision": "postpone"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("decision", response.data)
