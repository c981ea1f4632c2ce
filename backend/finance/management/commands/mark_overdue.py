"""
Flag invoices past their due date as overdue. Intended to run daily (cron).
"""
from datetime import date
from django.utils import timezone
from django.core.management.base import BaseCommand, CommandError
from backend.finance.models import Invoice
from backend.finance.services import mark_overdue_invoices


class Command(BaseCommand):
    help = 'Mark issued and part-paid invoices past their due date as overdue'

    def add_arguments(self, parser):
        parser.add_argument(
            '--as-of',
            type=str,
            help='Evaluate due dates against this date (YYYY-MM-DD) instead of today',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List the invoices that would be marked without changing them',
        )

    def handle(self, *args, **options):
        as_of = None
        if options.get('as_of'):
            try:
                as_of = date.fromisoformat(options['as_of'])
            except ValueError:
                raise CommandError(f"Invalid --as-of date: {options['as_of']}")

        if options['dry_run']:
            cutoff = as_of or timezone.localdate()
            invoices = Invoice.objects.filter(
                status__in=['issued', 'part_paid'], due_date__lt=cutoff, balance_amount__gt=0
            ).select_related('customer').order_by('due_date')
            self.stdout.write(self.style.WARNING('DRY RUN MODE - No invoices will be changed\n'))
            for invoice in invoices:
                self.stdout.write(
                    f'  {invoice.invoice_no}  {invoice.customer.customer_name}  due {invoice.due_date}  '
                    f'balance {invoice.balance_amount}'
                )
            self.stdout.write(f'\n{invoices.count()} invoice(s) would be marked overdue')
            return

        count = mark_overdue_invoices(today=as_of)
        self.stdout.write(self.style.SUCCESS(f'✓ Marked {count} invoice(s) overdue'))
