"""
Management command to move sessions to 'ongoing' or 'completed'.

This command should be run periodically (e.g., every few minutes via cron)
so session statuses follow the clock.
"""

from datetime import datetime

from django.core.management.base import BaseCommand, CommandError

from scheduling import services


class Command(BaseCommand):
    help = 'Update session statuses from the current time'

    def add_arguments(self, parser):
        parser.add_argument(
            '--at',
            type=str,
            default=None,
            help='Evaluate statuses at this "YYYY-MM-DD HH:MM:SS" time instead of now'
        )

    def handle(self, *args, **options):
        now = None
        if options['at']:
            try:
                now = datetime.strptime(options['at'], '%Y-%m-%d %H:%M:%S')
            except ValueError:
                raise CommandError(f'Invalid --at value: {options["at"]}')

        self.stdout.write('Refreshing session statuses...')

        changed = services.refresh_session_statuses(now=now)

        self.stdout.write(
            self.style.SUCCESS(
                f'Successfully updated {changed} session(s)'
            )
        )
