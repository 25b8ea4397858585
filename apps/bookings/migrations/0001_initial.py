from decimal import Decimal
import uuid

import apps.halls.models
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("halls", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("hall_name", models.CharField(blank=True, max_length=255)),
                ("date", models.DateField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("confirmed", "Confirmed"),
                            ("cancelled", "Cancelled"),
                            ("completed", "Completed"),
                        ],
                        default="pending",
                        max_length=16,
                    ),
                ),
                ("customer_name", models.CharField(max_length=255)),
                ("customer_phone", models.CharField(max_length=32)),
                ("customer_email", models.EmailField(blank=True, max_length=254)),
                (
                    "event_type",
                    models.CharField(
                        choices=[
                            ("wedding", "Wedding"),
                            ("reception", "Reception"),
                            ("birthday", "Birthday"),
                            ("corporate", "Corporate"),
                            ("engagement", "Engagement"),
                            ("anniversary", "Anniversary"),
                            ("babyShower", "Baby shower"),
                            ("other", "Other"),
                        ],
                        default="other",
                        max_length=20,
                    ),
                ),
                ("guest_count", models.PositiveIntegerField(default=1)),
                (
                    "dietary_preference",
                    models.CharField(
                        choices=[("veg", "Vegetarian"), ("non-veg", "Non-vegetarian")],
                        default="veg",
                        max_length=10,
                    ),
                ),
                ("special_requests", models.TextField(blank=True)),
                ("notes", models.TextField(blank=True)),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("advance_amount", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("advance_paid", models.BooleanField(default=False)),
                ("discount", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("currency", models.CharField(default=apps.halls.models.default_currency, max_length=3)),
                ("cancellation_reason", models.CharField(blank=True, max_length=255)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField()),
                (
                    "customer",
                    models.ForeignKey(
                        blank=True,
                        help_text="Account to notify. Walk-in customers have none.",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="bookings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "hall",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bookings",
                        to="halls.hall",
                    ),
                ),
            ],
            options={
                "verbose_name": "Booking",
                "verbose_name_plural": "Bookings",
                "ordering": ["-date", "-created_at"],
                "indexes": [
                    models.Index(fields=["hall", "date"], name="booking_hall_date_idx"),
                    models.Index(fields=["status", "created_at"], name="booking_status_created_idx"),
                    models.Index(fields=["status", "date"], name="booking_status_date_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("status__in", ["pending", "confirmed"])),
                        fields=("hall", "date"),
                        name="booking_one_active_per_slot",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("advance_amount__lte", models.F("total_amount"))),
                        name="booking_advance_within_total",
                    ),
                ],
            },
        ),
    ]
