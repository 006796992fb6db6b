"""User administration API views (Admin only).

Routes:
- ``GET  /api/v1/users/``                   list with role and company
- ``GET  /api/v1/users/{id}/role/``         role management view
- ``POST /api/v1/users/{id}/role/``         change role / company
- ``POST /api/v1/users/{id}/lock-unlock/``  toggle lockout
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.dtos import RoleChangeDTO
from modules.accounts.exceptions import CompanyRequired, InvalidRole, UserNotFound
from modules.accounts.filters import UserFilter
from modules.accounts.models import ApplicationUser
from modules.accounts.serializers import RoleChangeSerializer, UserListSerializer
from modules.accounts.services import UserService
from modules.core.permissions import IsAdmin
from modules.core.unit_of_work import DjangoUnitOfWork


class UserViewSet(ListModelMixin, GenericViewSet):
    permission_classes = [IsAdmin]
    filterset_class = UserFilter
    search_fields = ["username", "name", "email"]
    ordering_fields = ["username", "name", "date_joined"]
    ordering = ["username"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = ApplicationUser.objects.all()
    serializer_class = UserListSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = UserService(uow=DjangoUnitOfWork())

    def get_queryset(self):
        return self._service.list_users()

    @action(detail=True, methods=["get", "post"], url_path="role")
    def role(self, request: Request, pk: str | None = None) -> Response:
        if request.method == "POST":
            return self._change_role(request, pk)
        try:
            view_model = self._service.get_role_management(pk)
        except UserNotFound:
            return Response(
                {"detail": "User not found."}, status=status.HTTP_404_NOT_FOUND
            )
        return Response(view_model.model_dump(mode="json"))

    def _change_role(self, request: Request, pk: str | None) -> Response:
        serializer = RoleChangeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = RoleChangeDTO(**serializer.validated_data)

        try:
            user = self._service.change_role(pk, dto)
        except UserNotFound:
            return Response(
                {"detail": "User not found."}, status=status.HTTP_404_NOT_FOUND
            )
        except (InvalidRole, CompanyRequired) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(UserListSerializer(user).data)

    @action(detail=True, methods=["post"], url_path="lock-unlock")
    def lock_unlock(self, request: Request, pk: str | None = None) -> Response:
        try:
            result = self._service.lock_unlock(pk)
        except UserNotFound:
            return Response(
                {"success": False, "message": "Error while Locking/Unlocking"},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(
            {
                "success": True,
                "message": "Operation Successful",
                **result.model_dump(mode="json"),
            }
        )
