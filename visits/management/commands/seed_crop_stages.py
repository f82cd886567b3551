"""
Management command to load crop growth-stage reference data.

Usage:
    python manage.py seed_crop_stages
    python manage.py seed_crop_stages --clear
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from visits.models import CropStage


CROP_STAGES = {
    'Maize': ['Germination', 'Vegetative', 'Tasseling', 'Silking', 'Grain Filling', 'Maturity'],
    'Rice': ['Germination', 'Seedling', 'Tillering', 'Panicle Initiation', 'Flowering', 'Ripening'],
    'Onion': ['Germination', 'Leaf Development', 'Bulb Formation', 'Bulb Enlargement', 'Maturity'],
    'Beans': ['Germination', 'Vegetative', 'Flowering', 'Pod Formation', 'Pod Filling', 'Maturity'],
    'Cassava': ['Sprouting', 'Canopy Development', 'Root Bulking', 'Starch Accumulation', 'Dormancy'],
    'Tomato': ['Germination', 'Seedling', 'Vegetative', 'Flowering', 'Fruit Set', 'Ripening'],
    'Coffee': ['Flowering', 'Pinhead', 'Berry Expansion', 'Berry Filling', 'Ripening'],
    'Banana': ['Planting', 'Vegetative', 'Shooting', 'Bunch Development', 'Harvest'],
    'Groundnuts': ['Germination', 'Vegetative', 'Pegging', 'Pod Filling', 'Maturity'],
    'Sorghum': ['Germination', 'Vegetative', 'Booting', 'Flowering', 'Grain Filling', 'Maturity'],
}


class Command(BaseCommand):
    help = 'Loads crop growth-stage reference data used by the farm visit form'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete existing crop stages before loading',
        )

    def handle(self, *args, **options):
        with transaction.atomic():
            if options['clear']:
                deleted, _ = CropStage.objects.all().delete()
                self.stdout.write(self.style.WARNING(f'Removed {deleted} existing crop stage records'))

            created_count = 0
            updated_count = 0
            for crop_name, stages in CROP_STAGES.items():
                _, created = CropStage.objects.update_or_create(
                    crop_name=crop_name,
                    defaults={'stages': stages},
                )
                if created:
                    created_count += 1
                else:
                    updated_count += 1

        self.stdout.write(self.style.SUCCESS(
            f'✓ Crop stages loaded: {created_count} created, {updated_count} updated'
        ))
