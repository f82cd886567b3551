"""
Farm Visit Models

Database schema for farm visit reports submitted by extension officers and
the crop growth-stage reference table used by the submission form.
"""
import uuid
from typing import NamedTuple, Optional, Tuple

from django.core.validators import MinValueValidator
from django.db import models


CROP_ISSUES = ['Pests', 'Diseases', 'Nutrient Deficiency', 'Poor Germination', 'Water Stress']
LIVESTOCK_ISSUES = ['Illness', 'Parasites', 'Malnutrition', 'Poor Housing']


class CropObservation(NamedTuple):
    """Crop payload of a visit; present only on Crop and Mixed farms."""
    main_crops: str
    crop_stage: str
    crop_issues: Tuple[str, ...]


class LivestockObservation(NamedTuple):
    """Livestock payload of a visit; present only on Livestock and Mixed farms."""
    livestock_type: str
    number_of_animals: int
    livestock_issues: Tuple[str, ...]


class FarmVisit(models.Model):
    """
    One farm visit report.

    `farm_type` is the discriminant for the two observation payloads: crop
    fields only mean something on Crop/Mixed farms and livestock fields only
    on Livestock/Mixed farms. Read them through `crop_observation` and
    `livestock_observation` rather than the raw columns.
    """

    class FarmType(models.TextChoices):
        CROP = 'Crop', 'Crop'
        LIVESTOCK = 'Livestock', 'Livestock'
        MIXED = 'Mixed', 'Mixed'

    class VisitType(models.TextChoices):
        ROUTINE = 'Routine', 'Routine'
        EMERGENCY = 'Emergency', 'Emergency'
        FOLLOW_UP = 'Follow-up', 'Follow-up'

    CROP_FARM_TYPES = (FarmType.CROP, FarmType.MIXED)
    LIVESTOCK_FARM_TYPES = (FarmType.LIVESTOCK, FarmType.MIXED)

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )

    # Farmer Details
    farmer_name = models.CharField(max_length=200)
    farm_id = models.CharField(max_length=100, db_index=True)
    phone_number = models.CharField(max_length=30)
    village_location = models.CharField(max_length=200)
    gps_coordinates = models.CharField(
        max_length=100,
        blank=True,
        default='',
        help_text="Free-form GPS reading, e.g. 0.3476° N, 32.5825° E"
    )
    farm_size_acres = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)]
    )
    farm_type = models.CharField(
        max_length=20,
        choices=FarmType.choices,
        default=FarmType.CROP
    )

    # Visit Details
    visit_date = models.DateField()
    visit_type = models.CharField(
        max_length=20,
        choices=VisitType.choices,
        default=VisitType.ROUTINE,
        db_index=True
    )
    officer_name = models.CharField(max_length=200)
    time_spent_hours = models.DecimalField(
        max_digits=6,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)]
    )

    # Crop observations (Crop / Mixed farms)
    main_crops = models.CharField(max_length=200, blank=True, default='')
    crop_stage = models.CharField(max_length=100, blank=True, default='')
    crop_issues = models.JSONField(
        default=list,
        blank=True,
        help_text=f"Subset of: {', '.join(CROP_ISSUES)}"
    )

    # Livestock observations (Livestock / Mixed farms)
    livestock_type = models.CharField(max_length=200, blank=True, default='')
    number_of_animals = models.PositiveIntegerField(default=0)
    livestock_issues = models.JSONField(
        default=list,
        blank=True,
        help_text=f"Subset of: {', '.join(LIVESTOCK_ISSUES)}"
    )

    # Media
    photo_urls = models.JSONField(
        default=list,
        blank=True,
        help_text="Ordered photo URLs (legacy single photo_url is folded in on submission)"
    )
    video_link = models.URLField(max_length=500, blank=True, default='')

    # Recommendations
    advice_given = models.TextField()

    # Follow-up
    follow_up_needed = models.BooleanField(default=False)
    proposed_follow_up_date = models.DateField(null=True, blank=True)
    routine_check = models.BooleanField(default=False)
    routine_check_date = models.DateField(null=True, blank=True)
    training_needed = models.BooleanField(default=False)
    referral_to_specialist = models.CharField(max_length=255, blank=True, default='')
    additional_notes = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'farm_visits'
        ordering = ['-created_at']
        verbose_name = 'Farm Visit'
        verbose_name_plural = 'Farm Visits'
        indexes = [
            models.Index(fields=['visit_type', 'created_at'], name='farm_visit_type_created_idx'),
        ]

    def __str__(self):
        return f"{self.farmer_name} - {self.farm_id} ({self.visit_type})"

    @property
    def crop_observation(self) -> Optional[CropObservation]:
        if self.farm_type not in self.CROP_FARM_TYPES or not self.main_crops:
            return None
        return CropObservation(
            main_crops=self.main_crops,
            crop_stage=self.crop_stage or '',
            crop_issues=tuple(self.crop_issues or ()),
        )

    @property
    def livestock_observation(self) -> Optional[LivestockObservation]:
        if self.farm_type not in self.LIVESTOCK_FARM_TYPES or not self.livestock_type:
            return None
        return LivestockObservation(
            livestock_type=self.livestock_type,
            number_of_animals=self.number_of_animals or 0,
            livestock_issues=tuple(self.livestock_issues or ()),
        )

    @property
    def report_id(self):
        # Unsaved visits have no identity yet
        if self._state.adding or not self.id:
            return ''
        return str(self.id)

    def clean(self):
        for field, value in inapplicable_observation_values(self.farm_type).items():
            setattr(self, field, value)
        if not self.follow_up_needed:
            self.proposed_follow_up_date = None
        if not self.routine_check:
            self.routine_check_date = None


def inapplicable_observation_values(farm_type):
    """
    Blank values for the observation fields `farm_type` does not allow.

    Returns an empty dict for Mixed farms.
    """
    values = {}
    if farm_type not in FarmVisit.CROP_FARM_TYPES:
        values.update({'main_crops': '', 'crop_stage': '', 'crop_issues': []})
    if farm_type not in FarmVisit.LIVESTOCK_FARM_TYPES:
        values.update({'livestock_type': '', 'number_of_animals': 0, 'livestock_issues': []})
    return values


class CropStage(models.Model):
    """
    Reference data: the ordered growth stages of a crop.

    Read-only from the API; maintained through the Django admin or the
    seed_crop_stages command.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )

    crop_name = models.CharField(max_length=100, unique=True)

    stages = models.JSONField(
        default=list,
        help_text="Ordered growth-stage labels"
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'crop_stages'
        ordering = ['crop_name']
        verbose_name = 'Crop Stage'
        verbose_name_plural = 'Crop Stages'

    def __str__(self):
        return f"{self.crop_name} ({len(self.stages)} stages)"
