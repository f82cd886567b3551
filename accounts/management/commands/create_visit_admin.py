"""
Management command to create or reset a dashboard administrator.

Usage:
    python manage.py create_visit_admin
    python manage.py create_visit_admin --username officer --password 'S3cret!'
"""

import os

from django.core.management.base import BaseCommand
from django.db import transaction
from accounts.models import User


class Command(BaseCommand):
    help = 'Creates (or resets) an administrator for the farm visit dashboard'

    def add_arguments(self, parser):
        parser.add_argument(
            '--username',
            default=os.getenv('VISIT_ADMIN_USERNAME', 'admin'),
            help='Administrator username (default: admin)',
        )
        parser.add_argument(
            '--password',
            default=os.getenv('VISIT_ADMIN_PASSWORD', 'admin123'),
            help='Administrator password (default: admin123, change it in production)',
        )
        parser.add_argument(
            '--email',
            default='',
            help='Optional contact email',
        )

    def handle(self, *args, **options):
        username = options['username']
        password = options['password']

        with transaction.atomic():
            user, created = User.objects.get_or_create(
                username=username,
                defaults={'email': options['email']},
            )
            user.role = User.UserRole.ADMIN
            user.is_active = True
            user.is_staff = True
            if options['email']:
                user.email = options['email']
            user.set_password(password)
            user.save()

        if created:
            self.stdout.write(self.style.SUCCESS(f'✓ Created administrator: {username}'))
        else:
            self.stdout.write(self.style.WARNING(f'✓ Reset existing administrator: {username}'))

        self.stdout.write('\n' + '=' * 60)
        self.stdout.write('LOGIN INSTRUCTIONS:')
        self.stdout.write('POST to /api/auth/login/ with:')
        self.stdout.write(f'  {{"username": "{username}", "password": "<password>"}}')
        self.stdout.write('=' * 60)
