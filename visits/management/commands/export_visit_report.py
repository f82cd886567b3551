"""
Management command to write a farm visit report to disk.

Usage:
    python manage.py export_visit_report <visit_id>
    python manage.py export_visit_report <visit_id> --format html --output /tmp/reports
"""

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from visits.exceptions import PresentationBlocked
from visits.models import FarmVisit
from visits.services.export import EXPORT_FORMATS, PDF, FilePresenter, export_visit_document


class Command(BaseCommand):
    help = 'Exports one farm visit report as a PDF or printable HTML file'

    def add_arguments(self, parser):
        parser.add_argument('visit_id', help='ID of the farm visit')
        parser.add_argument(
            '--format',
            dest='fmt',
            choices=EXPORT_FORMATS,
            default=PDF,
            help='Document format (default: pdf)',
        )
        parser.add_argument(
            '--output',
            default='.',
            help='Target file or directory (default: current directory)',
        )

    def handle(self, *args, **options):
        try:
            visit = FarmVisit.objects.get(pk=options['visit_id'])
        except (FarmVisit.DoesNotExist, ValidationError):
            raise CommandError(f"Farm visit {options['visit_id']} not found")

        try:
            path = export_visit_document(visit, FilePresenter(options['output']), options['fmt'])
        except PresentationBlocked as e:
            raise CommandError(e.message)

        self.stdout.write(self.style.SUCCESS(f'✓ Report written to {path}'))
