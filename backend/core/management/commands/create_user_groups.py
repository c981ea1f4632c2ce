from django.core.management.base import BaseCommand
from django.contrib.auth.models import Group, Permission

from backend.core.permissions import (
    ROLE_ADMIN, ROLE_DIRECTOR, ROLE_CFO, ROLE_STORES, ROLE_PURCHASE, ROLE_PRODUCTION,
    ROLE_QUALITY, ROLE_PACKING, ROLE_ACCOUNTS, ROLE_SALES, ROLE_MAINTENANCE,
)


class Command(BaseCommand):
    help = 'Create Django user groups for the factory roles (Admin, Quality, Stores, Accounts, ...)'

    def handle(self, *args, **options):
        groups_config = [
            {'name': ROLE_ADMIN, 'apps': '*'},
            {'name': ROLE_DIRECTOR, 'apps': '*'},
            {'name': ROLE_CFO, 'apps': ['finance', 'reports', 'parties']},
            {'name': ROLE_STORES, 'apps': ['gate', 'inventory', 'purchasing']},
            {'name': ROLE_PURCHASE, 'apps': ['purchasing', 'parties', 'gate']},
            {'name': ROLE_PRODUCTION, 'apps': ['production', 'maintenance']},
            {'name': ROLE_QUALITY, 'apps': ['quality', 'inventory']},
            {'name': ROLE_PACKING, 'apps': ['logistics', 'gate']},
            {'name': ROLE_ACCOUNTS, 'apps': ['finance', 'reports', 'purchasing']},
            {'name': ROLE_SALES, 'apps': ['logistics', 'parties']},
            {'name': ROLE_MAINTENANCE, 'apps': ['maintenance']},
        ]

        created_count = 0
        updated_count = 0

        for group_config in groups_config:
            group, created = Group.objects.get_or_create(name=group_config['name'])

            if created:
                self.stdout.write(self.style.SUCCESS(f'✓ Created group: {group_config["name"]}'))
                created_count += 1
            else:
                self.stdout.write(f'  Group already exists: {group_config["name"]}')
                updated_count += 1

            if group_config['apps'] == '*':
                # Full access except Django admin log entries
                permissions = Permission.objects.exclude(content_type__app_label='admin')
            else:
                permissions = Permission.objects.filter(content_type__app_label__in=group_config['apps'])
            group.permissions.set(permissions)
            self.stdout.write(f'  Assigned {permissions.count()} permissions to {group_config["name"]}')

        self.stdout.write(self.style.SUCCESS(
            f'\nCompleted: {created_count} groups created, {updated_count} groups already existed'
        ))
