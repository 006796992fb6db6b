import django.core.validators
import django.db.models.deletion
import uuid6
from decimal import Decimal
from django.db import migrations, models


def price_field():
    return models.DecimalField(
        decimal_places=2,
        max_digits=10,
        validators=[
            django.core.validators.MinValueValidator(Decimal("1")),
            django.core.validators.MaxValueValidator(Decimal("1000")),
        ],
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "deleted_at",
                    models.DateTimeField(
                        blank=True, db_index=True, default=None, null=True
                    ),
                ),
                ("name", models.CharField(max_length=30)),
                (
                    "display_order",
                    models.PositiveSmallIntegerField(
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(100),
                        ]
                    ),
                ),
            ],
            options={
                "db_table": "categories",
                "ordering": ["display_order", "name"],
                "verbose_name_plural": "categories",
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "deleted_at",
                    models.DateTimeField(
                        blank=True, db_index=True, default=None, null=True
                    ),
                ),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("isbn", models.CharField(max_length=20)),
                ("author", models.CharField(max_length=255)),
                ("list_price", price_field()),
                ("price", price_field()),
                ("price50", price_field()),
                ("price100", price_field()),
                (
                    "image",
                    models.FileField(
                        blank=True, default="", max_length=255, upload_to=""
                    ),
                ),
                (
                    "category",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="products",
                        to="catalog.category",
                    ),
                ),
            ],
            options={
                "db_table": "products",
                "ordering": ["title"],
                "indexes": [
                    models.Index(fields=["isbn"], name="products_isbn_idx")
                ],
            },
        ),
    ]
