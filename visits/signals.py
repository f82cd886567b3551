"""
Farm Visit Signals

Keeps the crop stage cache in step with the CropStage table.
"""
import logging

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import CropStage
from .services.crop_stages import invalidate_crop_stage_cache

logger = logging.getLogger(__name__)


@receiver(post_save, sender=CropStage)
@receiver(post_delete, sender=CropStage)
def crop_stage_changed(sender, instance, **kwargs):
    invalidate_crop_stage_cache()
    logger.info(f"Crop stage cache invalidated after change to {instance.crop_name}")
