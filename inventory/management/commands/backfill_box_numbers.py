"""
Management command to reconcile existing boxes with the box number pool.

Reserves every number already carried by a box, then assigns numbers to boxes
that have none (oldest first). Safe to run on every start; a run with nothing
to do changes nothing. Any failure rolls the whole run back and exits non-zero.

Usage:
    python manage.py backfill_box_numbers
    python manage.py backfill_box_numbers --dry-run --verbose
"""

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from inventory.backfill import backfill_box_numbers
from inventory.constants import BACKFILL_LOG_PREVIEW


class Command(BaseCommand):
    help = 'Assign box numbers to unnumbered boxes and reserve numbers already in use'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be assigned without committing anything',
        )
        parser.add_argument(
            '--verbose',
            action='store_true',
            help='List individual box number assignments',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        verbose = options['verbose']

        try:
            with transaction.atomic():
                result = backfill_box_numbers()
                if dry_run:
                    transaction.set_rollback(True)
        except Exception as e:
            raise CommandError(f'Box number backfill failed, nothing was committed: {e}') from e

        prefix = '[DRY RUN] ' if dry_run else ''

        if not result.changed:
            self.stdout.write(self.style.SUCCESS(f'{prefix}Box numbers are up to date'))
            return

        if result.reserved:
            self.stdout.write(
                self.style.WARNING(f'{prefix}Reserved {result.reserved} box number(s) already in use')
            )

        if verbose and result.assignments:
            for box_id, number in result.assignments[:BACKFILL_LOG_PREVIEW]:
                self.stdout.write(f'  - Box ID {box_id} -> #{number}')
            remaining = len(result.assignments) - BACKFILL_LOG_PREVIEW
            if remaining > 0:
                self.stdout.write(f'  ... and {remaining} more')

        verb = 'Would assign' if dry_run else 'Assigned'
        self.stdout.write(
            self.style.SUCCESS(f'{prefix}{verb} {result.assigned} box number(s)')
        )
