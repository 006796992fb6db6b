from __future__ import annotations

from decimal import Decimal

import structlog
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.core.management import call_command
from django.core.management.base import BaseCommand
from django.db import transaction
from django.db.utils import Error as DatabaseError

from modules.catalog.models import Category, Product
from modules.companies.models import Company
from modules.core.constants import Role

logger = structlog.get_logger(__name__)

DEFAULT_ADMIN_USERNAME = "admin_default"
DEFAULT_ADMIN_PASSWORD = "Admin@123"

CATEGORIES = [("Action", 1), ("SciFi", 2), ("History", 3)]

COMPANIES = [
    ("Tech Solution", "123 Tech St", "Tech City", "IL", "12121", "6669990000"),
    ("Vivid Books", "999 Vid St", "Vid City", "IL", "66666", "7779990000"),
    ("Readers Club", "999 Main St", "Lala land", "NY", "99999", "1113335555"),
]

# title, author, isbn, list price, price (1-50), price50, price100, category
PRODUCTS = [
    ("Fortune of Time", "Billy Spark", "SWD9999001", 99, 90, 85, 80, "Action"),
    ("Dark Skies", "Nancy Hoover", "CAW777777701", 40, 30, 25, 20, "Action"),
    ("Vanish in the Sunset", "Julian Button", "RITO5555501", 55, 50, 40, 35, "Action"),
    ("Cotton Candy", "Abby Muscles", "WS3333333301", 70, 65, 60, 55, "SciFi"),
    ("Rock in the Ocean", "Ron Parker", "SOTJ1111111101", 30, 27, 25, 20, "SciFi"),
    ("Leaves and Wonders", "Laura Phantom", "FOT000000001", 25, 23, 22, 20, "History"),
]

PRODUCT_DESCRIPTION = (
    "Praesent vitae sodales libero. Praesent molestie orci augue, vitae euismod "
    "velit sollicitudin ac. Praesent vestibulum facilisis nibh ut ultricies."
)


class Command(BaseCommand):
    help = "Seed roles, the default administrator and the demo catalog (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--migrate",
            action="store_true",
            help="Apply pending migrations first; failures are logged and ignored.",
        )

    def handle(self, *args, **options):
        if options["migrate"]:
            self._migrate()

        self.stdout.write("Seeding bookshop data...")
        with transaction.atomic():
            roles_created = self._seed_roles()
            admin_created = self._seed_admin() if roles_created else False
            categories = self._seed_categories()
            companies = self._seed_companies()
            products = self._seed_products(categories)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"roles={roles_created}, "
                f"admin={int(admin_created)}, "
                f"categories={len(categories)}, "
                f"companies={companies}, "
                f"products={products}"
            )
        )

    def _migrate(self) -> None:
        try:
            call_command("migrate", interactive=False, verbosity=0)
        except DatabaseError as exc:
            logger.warning("seed.migrate_failed", error=str(exc))
            self.stdout.write(self.style.WARNING("Migrations skipped (see log)."))

    def _seed_roles(self) -> int:
        created = 0
        for role in Role.values:
            _, was_created = Group.objects.get_or_create(name=role)
            created += int(was_created)
        return created

    def _seed_admin(self) -> bool:
        """The default administrator is only created alongside the roles."""
        User = get_user_model()
        if User.objects.filter(username=DEFAULT_ADMIN_USERNAME).exists():
            return False
        admin = User.objects.create_user(
            DEFAULT_ADMIN_USERNAME,
            email="admin@bookshop.local",
            password=DEFAULT_ADMIN_PASSWORD,
            name="Default Admin",
            phone_number="0000000000",
            street_address="1 Admin Way",
            city="Admin City",
            state="N/A",
            postal_code="00000",
        )
        admin.groups.add(Group.objects.get(name=Role.ADMIN))
        logger.info("seed.admin_created", username=DEFAULT_ADMIN_USERNAME)
        return True

    def _seed_categories(self) -> dict[str, Category]:
        categories: dict[str, Category] = {}
        for name, display_order in CATEGORIES:
            category, _ = Category.objects.alive().get_or_create(
                name=name, defaults={"display_order": display_order}
            )
            categories[name] = category
        return categories

    def _seed_companies(self) -> int:
        created = 0
        for name, street, city, state, postal_code, phone in COMPANIES:
            _, was_created = Company.objects.alive().get_or_create(
                name=name,
                defaults={
                    "street_address": street,
                    "city": city,
                    "state": state,
                    "postal_code": postal_code,
                    "phone_number": phone,
                },
            )
            created += int(was_created)
        return created

    def _seed_products(self, categories: dict[str, Category]) -> int:
        created = 0
        for title, author, isbn, list_price, price, price50, price100, category in PRODUCTS:
            _, was_created = Product.objects.alive().get_or_create(
                isbn=isbn,
                defaults={
                    "title": title,
                    "author": author,
                    "description": PRODUCT_DESCRIPTION,
                    "list_price": Decimal(list_price),
                    "price": Decimal(price),
                    "price50": Decimal(price50),
                    "price100": Decimal(price100),
                    "category": categories[category],
                },
            )
            created += int(was_created)
        return created
