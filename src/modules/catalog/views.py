"""Catalog API views.

Anyone may browse categories and products; administrators manage them.
Product writes accept multipart bodies with the cover in the ``image``
field.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.catalog.dtos import CategoryDTO, ProductDTO
from modules.catalog.exceptions import (
    CategoryNotFound,
    InvalidImagePath,
    ProductNotFound,
)
from modules.catalog.filters import ProductFilter
from modules.catalog.models import Category, Product
from modules.catalog.repositories.django_repository import (
    CategoryDjangoRepository,
    ProductDjangoRepository,
)
from modules.catalog.serializers import CategorySerializer, ProductSerializer
from modules.catalog.services import CategoryService, ProductService
from modules.catalog.storage import ProductImageStore
from modules.core.permissions import IsAdminOrReadOnly

PRODUCT_FIELDS = (
    "title",
    "description",
    "isbn",
    "author",
    "list_price",
    "price",
    "price50",
    "price100",
    "category_id",
)


def _not_found(message: str) -> Response:
    return Response({"detail": message}, status=status.HTTP_404_NOT_FOUND)


class CategoryViewSet(ListModelMixin, GenericViewSet):
    permission_classes = [IsAdminOrReadOnly]
    queryset = Category.objects.alive()
    serializer_class = CategorySerializer
    pagination_class = None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CategoryService(repository=CategoryDjangoRepository())

    def get_queryset(self):
        return self._service.list_categories()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/categories/{pk}/"""
        try:
            category = self._service.get_category(pk)
        except CategoryNotFound:
            return _not_found("Category not found.")
        return Response(CategorySerializer(category).data)

    def _dto(self, request: Request) -> CategoryDTO:
        return CategoryDTO(
            name=request.data.get("name", ""),
            display_order=request.data.get("display_order", 0),
        )

    def create(self, request: Request) -> Response:
        """POST /api/v1/categories/"""
        try:
            dto = self._dto(request)
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        category = self._service.create_category(dto)
        return Response(CategorySerializer(category).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/categories/{pk}/"""
        try:
            dto = self._dto(request)
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        try:
            category = self._service.update_category(pk, dto)
        except CategoryNotFound:
            return _not_found("Category not found.")
        return Response(CategorySerializer(category).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/categories/{pk}/"""
        try:
            self._service.delete_category(pk)
        except CategoryNotFound:
            return _not_found("Category not found.")
        return Response(status=status.HTTP_204_NO_CONTENT)


class ProductViewSet(ListModelMixin, GenericViewSet):
    """Product browsing and upsert.

    ``PATCH`` keeps every field that is not supplied; ``PUT`` and ``POST``
    need the full product.
    """

    permission_classes = [IsAdminOrReadOnly]
    filterset_class = ProductFilter
    search_fields = ["title", "author", "isbn"]
    ordering_fields = ["title", "author", "price", "created_at"]
    ordering = ["title"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = Product.objects.alive()
    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(
            repository=ProductDjangoRepository(),
            category_repository=CategoryDjangoRepository(),
            image_store=ProductImageStore(),
        )

    def get_queryset(self):
        return self._service.list_products()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(pk)
        except ProductNotFound:
            return _not_found("Product not found.")
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Upsert
    # ------------------------------------------------------------------

    def _upsert(
        self, request: Request, pk: str | None = None, partial: bool = False
    ) -> Response:
        data = request.data
        values = {field: data[field] for field in PRODUCT_FIELDS if field in data}
        if partial:
            try:
                current = self._service.get_product(pk)
            except ProductNotFound:
                return _not_found("Product not found.")
            for field in PRODUCT_FIELDS:
                values.setdefault(field, getattr(current, field))

        try:
            dto = ProductDTO(**values)
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            product = self._service.upsert_product(
                dto, image=request.FILES.get("image"), product_id=pk
            )
        except ProductNotFound:
            return _not_found("Product not found.")
        except CategoryNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except InvalidImagePath as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        code = status.HTTP_201_CREATED if pk is None else status.HTTP_200_OK
        return Response(ProductSerializer(product).data, status=code)

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        return self._upsert(request)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/products/{pk}/"""
        return self._upsert(request, pk)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        return self._upsert(request, pk, partial=True)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        try:
            self._service.delete_product(pk)
        except ProductNotFound:
            return _not_found("Product not found.")
        except InvalidImagePath as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["delete"], url_path="image")
    def delete_image(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/image/"""
        try:
            product = self._service.delete_image(pk)
        except ProductNotFound:
            return _not_found("Product not found.")
        except InvalidImagePath as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(ProductSerializer(product).data)
