"""Company API views.

Administrators manage companies; domain exceptions are translated into
HTTP status codes here and nowhere else.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.companies.dtos import ADDRESS_FIELDS, CompanyDTO, UpdateCompanyDTO
from modules.companies.exceptions import CompanyNotFound
from modules.companies.filters import CompanyFilter
from modules.companies.models import Company
from modules.companies.repositories.django_repository import CompanyDjangoRepository
from modules.companies.serializers import CompanySerializer
from modules.companies.services import CompanyService
from modules.core.permissions import IsAdmin

COMPANY_FIELDS = ("name", *ADDRESS_FIELDS)


class CompanyViewSet(ListModelMixin, GenericViewSet):
    """CRUD for companies (Admin only)."""

    permission_classes = [IsAdmin]
    filterset_class = CompanyFilter
    search_fields = ["name", "city"]
    ordering_fields = ["name", "created_at"]
    ordering = ["name"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = Company.objects.alive()
    serializer_class = CompanySerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CompanyService(repository=CompanyDjangoRepository())

    def get_queryset(self):
        return self._service.list_companies()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/companies/{pk}/"""
        try:
            company = self._service.get_company(pk)
        except CompanyNotFound:
            return Response(
                {"detail": "Company not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(CompanySerializer(company).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/companies/"""
        data = request.data
        try:
            dto = CompanyDTO(**{field: data.get(field, "") for field in COMPANY_FIELDS})
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        company = self._service.create_company(dto)
        return Response(
            CompanySerializer(company).data, status=status.HTTP_201_CREATED
        )

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/companies/{pk}/"""
        data = request.data
        try:
            dto = UpdateCompanyDTO(
                **{field: data[field] for field in COMPANY_FIELDS if field in data}
            )
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            company = self._service.update_company(pk, dto)
        except CompanyNotFound:
            return Response(
                {"detail": "Company not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(CompanySerializer(company).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/companies/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/companies/{pk}/"""
        try:
            self._service.delete_company(pk)
        except CompanyNotFound:
            return Response(
                {"detail": "Company not found. Deletion aborted."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(status=status.HTTP_204_NO_CONTENT)
