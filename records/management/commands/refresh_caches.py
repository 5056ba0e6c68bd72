from django.core.management.base import BaseCommand
from django.utils import timezone

from records.services.dashboard import CACHE_KEY, dashboard_stats


class Command(BaseCommand):
    help = "Recompute cached API payloads (dashboard statistics)."

    def handle(self, *args, **options):
        stats = dashboard_stats(refresh=True)
        self.stdout.write(self.style.SUCCESS(
            f"Refreshed {CACHE_KEY} at {timezone.now():%Y-%m-%d %H:%M:%S}: "
            f"{stats['total_patients']} patients, {stats['ipd_patients']} admitted"
        ))
