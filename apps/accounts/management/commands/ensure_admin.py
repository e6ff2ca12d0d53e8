"""
Create the first admin account if it does not exist.

Usage:
    python manage.py ensure_admin
    python manage.py ensure_admin --email owner@station.pk --password secret

Defaults come from the ADMIN_EMAIL, ADMIN_PASSWORD and ADMIN_NAME
environment variables.
"""

from decouple import config
from django.core.management.base import BaseCommand, CommandError

from apps.accounts.services import ensure_admin_user


class Command(BaseCommand):
    help = 'Create the admin account if it is missing'

    def add_arguments(self, parser):
        parser.add_argument('--email', default=config('ADMIN_EMAIL', default='admin@example.com'))
        parser.add_argument('--password', default=config('ADMIN_PASSWORD', default=''))
        parser.add_argument('--name', default=config('ADMIN_NAME', default='Admin'))

    def handle(self, *args, **options):
        if not options['password']:
            raise CommandError('Set ADMIN_PASSWORD or pass --password')

        user, created = ensure_admin_user(
            email=options['email'],
            password=options['password'],
            name=options['name'],
        )
        if created:
            self.stdout.write(self.style.SUCCESS(f'Admin user created: {user.email}'))
        else:
            self.stdout.write(f'Admin user already exists: {user.email}')
