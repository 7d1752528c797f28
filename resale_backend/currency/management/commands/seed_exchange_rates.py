# currency/management/commands/seed_exchange_rates.py

from django.core.management.base import BaseCommand, CommandError

from currency.services.rate_registry import list_rates, seed_default_rates


class Command(BaseCommand):
    help = "Seed default exchange rates (settings.EXCHANGE_RATE_DEFAULTS) for a client"

    def add_arguments(self, parser):
        parser.add_argument("--client-id", type=int, required=True)
        parser.add_argument(
            "--overwrite",
            action="store_true",
            help="Replace rates that are already configured",
        )

    def handle(self, *args, **options):
        client_id = options["client_id"]
        if client_id <= 0:
            raise CommandError("--client-id must be positive")

        touched = seed_default_rates(client_id, overwrite=options["overwrite"])

        for row in touched:
            self.stdout.write(f"  {row.method_code:<20} {row.rate}")

        self.stdout.write(
            self.style.SUCCESS(
                f"Seeded {len(touched)} rate(s) for client {client_id}; "
                f"{len(list_rates(client_id))} configured in total."
            )
        )
