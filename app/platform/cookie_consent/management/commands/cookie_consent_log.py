"""
Management command to export the cookie consent audit log.
Run: python manage.py cookie_consent_log [--category marketing] [--limit 100]
"""

import json

from django.core.management.base import BaseCommand

from app.platform.cookie_consent.audit import get_consent_log


class Command(BaseCommand):
    help = 'Print the cookie consent audit log as JSON lines (oldest first)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--category',
            help='Only entries for this consent category',
        )
        parser.add_argument(
            '--limit',
            type=int,
            help='Only the most recent N entries',
        )

    def handle(self, *args, **options):
        entries = get_consent_log(limit=options['limit'], category=options['category'])
        for entry in entries:
            self.stdout.write(json.dumps(entry, default=str, sort_keys=True))

        self.stderr.write(self.style.SUCCESS(f'{len(entries)} consent log entries'))
