"""User API views."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.application.message_bus import message_bus
from shared.infrastructure.identity import actor_from_request

from .application.command_handlers import DeleteAccountCommand, DeleteUserCommand
from .permissions import IsPlatformAdmin, IsSelfOrPlatformAdmin
from .serializers import UserSerializer

User = get_user_model()


class UserViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Users and account removal.

    - `me` returns the caller's profile
    - `destroy` removes a user (the user themself or an admin)
    - `account` (DELETE) removes the caller's own account and clears the
      auth cookie
    - listing is limited to platform admins
    """

    serializer_class = UserSerializer
    queryset = User.objects.all()
    lookup_value_regex = r"\d+"

    def get_permissions(self):  # type: ignore
        if self.action == "list":
            return [IsPlatformAdmin()]
        if self.action == "retrieve":
            return [IsSelfOrPlatformAdmin()]
        return [permissions.IsAuthenticated()]

    def destroy(self, request, pk=None):  # type: ignore
        counts = message_bus.handle_command(
            DeleteUserCommand(actor=actor_from_request(request), user_id=int(pk))
        )
        return Response({"deleted": counts}, status=status.HTTP_200_OK)

    @action(detail=False, methods=["get"])
    def me(self, request):  # type: ignore
        """Returns the caller's profile."""
        return Response(UserSerializer(request.user).data)

    @action(detail=False, methods=["delete"], url_path="account")
    def delete_account(self, request):  # type: ignore
        counts = message_bus.handle_command(DeleteAccountCommand(actor=actor_from_request(request)))
        response = Response({"deleted": counts}, status=status.HTTP_200_OK)
        response.delete_cookie(getattr(settings, "AUTH_COOKIE_NAME", "token"))
        return response
