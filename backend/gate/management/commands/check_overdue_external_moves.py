"""
Report external process moves that are overdue or due back soon. Intended to run daily (cron).
"""
import logging
from datetime import date
from django.utils import timezone
from django.core.management.base import BaseCommand, CommandError
from backend.gate.models import RETURN_REMINDER_DAYS
from backend.gate.services import external_returns_due

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'List open external process moves that are overdue or due back within a few days'

    def add_arguments(self, parser):
        parser.add_argument(
            '--as-of',
            type=str,
            help='Compare expected return dates against this date (YYYY-MM-DD) instead of today',
        )
        parser.add_argument(
            '--days',
            type=int,
            default=RETURN_REMINDER_DAYS,
            help=f'Also report moves due back within this many days (default {RETURN_REMINDER_DAYS})',
        )

    def handle(self, *args, **options):
        as_of = timezone.localdate()
        if options.get('as_of'):
            try:
                as_of = date.fromisoformat(options['as_of'])
            except ValueError:
                raise CommandError(f"Invalid --as-of date: {options['as_of']}")
        if options['days'] < 0:
            raise CommandError('--days cannot be negative')

        moves = list(external_returns_due(as_of=as_of, within_days=options['days']))
        if not moves:
            self.stdout.write(self.style.SUCCESS('✓ No external returns overdue or due soon'))
            return

        overdue = 0
        for move in moves:
            days_late = move.days_overdue(as_of)
            if days_late:
                overdue += 1
                label = self.style.ERROR(f'OVERDUE {days_late}d')
            else:
                days_left = (move.expected_return_date - as_of).days
                label = self.style.WARNING('DUE TODAY' if days_left == 0 else f'DUE IN {days_left}d')
            partner = move.partner.name if move.partner else '-'
            self.stdout.write(
                f'  {label}  {move.work_order.wo_number}  {move.process_type}  {partner}  '
                f'challan {move.challan_no or "-"}  pending {move.quantity_pending}  '
                f'expected {move.expected_return_date}'
            )

        if overdue:
            logger.warning(f"{overdue} external move(s) overdue as of {as_of}")
        self.stdout.write(f'\n{overdue} overdue, {len(moves) - overdue} due within {options["days"]} day(s)')
