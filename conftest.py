"""
Shared pytest fixtures for the farm visit backend.
"""
from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from visits.models import CropStage, FarmVisit

User = get_user_model()


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        username='admin',
        password='admin123',
        email='admin@farmvisits.test',
        role=User.UserRole.ADMIN
    )


@pytest.fixture
def officer_user(db):
    return User.objects.create_user(
        username='officer',
        password='officer123',
        role=User.UserRole.EXTENSION_OFFICER
    )


@pytest.fixture
def admin_client(api_client, admin_user):
    api_client.force_authenticate(user=admin_user)
    return api_client


@pytest.fixture
def crop_stages(db):
    return [
        CropStage.objects.create(
            crop_name='Maize',
            stages=['Germination', 'Vegetative', 'Tasseling', 'Maturity']
        ),
        CropStage.objects.create(
            crop_name='Beans',
            stages=['Germination', 'Flowering', 'Pod Filling']
        ),
    ]


@pytest.fixture
def visit_payload():
    """A valid submission for a Mixed farm."""
    return {
        'farmer_name': 'Grace Nakato',
        'farm_id': 'FRM-001',
        'phone_number': '+256700000001',
        'village_location': 'Kasese',
        'gps_coordinates': '0.1833, 30.0833',
        'farm_size_acres': '2.50',
        'farm_type': 'Mixed',
        'visit_date': '2025-01-05',
        'visit_type': 'Routine',
        'officer_name': 'Peter Okello',
        'time_spent_hours': '1.5',
        'main_crops': 'Maize',
        'crop_stage': '',
        'crop_issues': ['Pests'],
        'livestock_type': 'Goats',
        'number_of_animals': 5,
        'livestock_issues': [],
        'advice_given': 'Apply pesticide.\nRotate grazing paddocks.',
        'follow_up_needed': False,
        'routine_check': False,
        'training_needed': True,
    }


@pytest.fixture
def make_visit(db):
    """Factory for saved FarmVisit rows."""
    def _make_visit(**overrides):
        fields = {
            'farmer_name': 'Grace Nakato',
            'farm_id': 'FRM-001',
            'phone_number': '+256700000001',
            'village_location': 'Kasese',
            'farm_size_acres': Decimal('2.50'),
            'farm_type': FarmVisit.FarmType.CROP,
            'visit_date': date(2025, 1, 5),
            'visit_type': FarmVisit.VisitType.ROUTINE,
            'officer_name': 'Peter Okello',
            'time_spent_hours': Decimal('1.50'),
            'main_crops': 'Maize',
            'advice_given': 'Weed twice before tasseling.',
        }
        fields.update(overrides)
        return FarmVisit.objects.create(**fields)
    return _make_visit
