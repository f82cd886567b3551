"""
Tests for the cached crop stage lookup.
"""
import pytest
from django.core.cache import cache

from visits.models import CropStage
from visits.services.crop_stages import CACHE_KEY, get_available_stages

pytestmark = pytest.mark.django_db


class TestGetAvailableStages:

    def test_case_insensitive_match(self, crop_stages):
        assert get_available_stages('  BEANS ') == ['Germination', 'Flowering', 'Pod Filling']

    @pytest.mark.parametrize('crop_name', ['', '   ', None, 'Sunflower'])
    def test_no_stages(self, crop_stages, crop_name):
        assert get_available_stages(crop_name) == []

    def test_table_is_cached(self, crop_stages, django_assert_num_queries):
        get_available_stages('Maize')
        assert cache.get(CACHE_KEY) is not None

        with django_assert_num_queries(0):
            get_available_stages('Beans')

    def test_changes_invalidate_cache(self, crop_stages):
        """Test saving or deleting a crop refreshes the lookup."""
        assert get_available_stages('Maize')[0] == 'Germination'

        maize = CropStage.objects.get(crop_name='Maize')
        maize.stages = ['Planting', 'Harvest']
        maize.save()
        assert get_available_stages('Maize') == ['Planting', 'Harvest']

        maize.delete()
        assert get_available_stages('Maize') == []
