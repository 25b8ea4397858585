from datetime import timedelta
from decimal import Decimal

from dateutil.relativedelta import relativedelta
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from apps.halls.models import Hall
from apps.halls.repositories import DjangoHallRepository
from shared.infrastructure.clock import venue_today

User = get_user_model()

SAMPLE_HALL = {
    "name": "Tisha Grand Hall",
    "description": (
        "Elegant 10,000 sq ft venue for weddings, receptions and corporate events, "
        "with a professional kitchen, bridal suite and built-in stage."
    ),
    "address": "123 Celebration Avenue",
    "city": "Mumbai",
    "phone": "+91 98765 43210",
    "capacity": 500,
    "base_price": Decimal("75000"),
}


class Command(BaseCommand):
    help = "Creates the sample hall with an owner account and opens its calendar"

    def add_arguments(self, parser):
        parser.add_argument("--months", type=int, default=3, help="How many months to open")
        parser.add_argument("--owner", default="owner", help="Username of the hall owner")
        parser.add_argument("--password", default=None, help="Password for a newly created owner")

    @transaction.atomic
    def handle(self, *args, **options):
        owner, created = User.objects.get_or_create(username=options["owner"])
        if created:
            if options["password"]:
                owner.set_password(options["password"])
            else:
                owner.set_unusable_password()
            owner.save()
            self.stdout.write(f"Created owner account: {owner.username}")

        hall, created = Hall.objects.get_or_create(
            name=SAMPLE_HALL["name"],
            defaults={**SAMPLE_HALL, "owner": owner},
        )
        if created:
            self.stdout.write(f"Created hall: {hall.name} ({hall.id})")
        else:
            self.stdout.write(self.style.WARNING(f"Hall {hall.name} already exists, reusing it"))

        start = venue_today()
        end = start + relativedelta(months=options["months"])
        days = [start + timedelta(days=offset) for offset in range((end - start).days + 1)]
        opened = DjangoHallRepository().open_dates(hall.id, days)

        self.stdout.write(
            self.style.SUCCESS(
                f"Opened {opened} dates from {start.isoformat()} to {end.isoformat()}"
            )
        )
