"""
Crop Stage Lookup

Read-through cache over the CropStage reference table. The whole table is
small, so it is cached as one mapping and invalidated whenever a row
changes (see visits.signals).
"""
import logging

from django.conf import settings
from django.core.cache import cache

from visits.models import CropStage

logger = logging.getLogger(__name__)

CACHE_KEY = 'visits:crop_stages'


def load_crop_stage_table():
    """Return {crop_name: [stages...]} for every registered crop."""
    table = cache.get(CACHE_KEY)
    if table is not None:
        return table

    table = {
        crop.crop_name: list(crop.stages or [])
        for crop in CropStage.objects.all()
    }
    cache.set(CACHE_KEY, table, timeout=settings.CROP_STAGE_CACHE_TIMEOUT)
    logger.debug(f"Crop stage table cached ({len(table)} crops)")
    return table


def get_available_stages(crop_name):
    """
    Ordered growth stages for `crop_name`.

    Matching ignores case and surrounding whitespace. Unregistered or empty
    crop names give an empty list.
    """
    if not crop_name or not crop_name.strip():
        return []

    wanted = crop_name.strip().lower()
    for name, stages in load_crop_stage_table().items():
        if name.lower() == wanted:
            return list(stages)
    return []


def invalidate_crop_stage_cache():
    cache.delete(CACHE_KEY)
