"""API views for notifications."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from .models import Notification
from .serializers import NotificationSerializer
from .services import set_read_state


class NotificationViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """List, read-state toggles and deletion of the caller's notifications."""

    serializer_class = NotificationSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):  # type: ignore
        qs = Notification.objects.filter(user=self.request.user)
        if self.action == 'list' and self.request.query_params.get('unread_only') in ('1', 'true', 'True'):
            qs = qs.filter(is_read=False)
        return qs

    def list(self, request, *args, **kwargs):  # type: ignore
        response = super().list(request, *args, **kwargs)
        unread = Notification.objects.filter(user=request.user, is_read=False).count()
        if isinstance(response.data, dict):
            response.data['unread_count'] = unread
        return response

    @action(detail=True, methods=['post'])
    def mark_read(self, request, pk=None):  # type: ignore
        notification = self.get_object()
        set_read_state(request.user.pk, is_read=True, notification_id=notification.pk)
        return Response({'status': 'read'}, status=status.HTTP_200_OK)

    @action(detail=True, methods=['post'])
    def mark_unread(self, request, pk=None):  # type: ignore
        notification = self.get_object()
        set_read_state(request.user.pk, is_read=False, notification_id=notification.pk)
        return Response({'status': 'unread'}, status=status.HTTP_200_OK)

    @action(detail=False, methods=['post'])
    def mark_all_read(self, request):  # type: ignore
        updated = set_read_state(request.user.pk, is_read=True)
        return Response({'updated': updated}, status=status.HTTP_200_OK)

    @action(detail=False, methods=['post'])
    def mark_all_unread(self, request):  # type: ignore
        updated = set_read_state(request.user.pk, is_read=False)
        return Response({'updated': updated}, status=status.HTTP_200_OK)
