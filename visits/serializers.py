"""
Farm Visit Serializers

Serializers for the public submission form, the admin dashboard and the
crop stage reference data.
"""
import os

from django.conf import settings
from rest_framework import serializers

from .models import CROP_ISSUES, LIVESTOCK_ISSUES, CropStage, FarmVisit, inapplicable_observation_values
from .services.crop_stages import get_available_stages
from .services.photo_storage import normalize_photo_urls


def _dedupe(values):
    """Drop repeated entries, keeping first occurrence order."""
    return list(dict.fromkeys(values))


class FarmVisitSerializer(serializers.ModelSerializer):
    """Read serializer for the admin dashboard list and detail views."""

    report_id = serializers.CharField(read_only=True)

    class Meta:
        model = FarmVisit
        fields = [
            'id', 'report_id',
            'farmer_name', 'farm_id', 'phone_number', 'village_location',
            'gps_coordinates', 'farm_size_acres', 'farm_type',
            'visit_date', 'visit_type', 'officer_name', 'time_spent_hours',
            'main_crops', 'crop_stage', 'crop_issues',
            'livestock_type', 'number_of_animals', 'livestock_issues',
            'photo_urls', 'video_link',
            'advice_given',
            'follow_up_needed', 'proposed_follow_up_date',
            'routine_check', 'routine_check_date',
            'training_needed', 'referral_to_specialist', 'additional_notes',
            'created_at',
        ]
        read_only_fields = fields


class FarmVisitSubmitSerializer(serializers.ModelSerializer):
    """
    Public farm visit form submission.

    Observation fields the chosen farm type does not allow are cleared, as
    are follow-up and routine-check dates whose flag is off. The legacy
    single `photo_url` is folded into `photo_urls`.
    """

    crop_issues = serializers.ListField(
        child=serializers.ChoiceField(choices=CROP_ISSUES),
        required=False,
        help_text=f"Any of: {', '.join(CROP_ISSUES)}"
    )

    livestock_issues = serializers.ListField(
        child=serializers.ChoiceField(choices=LIVESTOCK_ISSUES),
        required=False,
        help_text=f"Any of: {', '.join(LIVESTOCK_ISSUES)}"
    )

    number_of_animals = serializers.IntegerField(
        min_value=0,
        required=False,
        allow_null=True
    )

    photo_urls = serializers.ListField(
        child=serializers.CharField(max_length=500, allow_blank=True),
        required=False
    )

    # Legacy single-photo field, accepted on input only
    photo_url = serializers.CharField(
        max_length=500,
        required=False,
        allow_blank=True,
        allow_null=True,
        write_only=True
    )

    class Meta:
        model = FarmVisit
        fields = [
            'farmer_name', 'farm_id', 'phone_number', 'village_location',
            'gps_coordinates', 'farm_size_acres', 'farm_type',
            'visit_date', 'visit_type', 'officer_name', 'time_spent_hours',
            'main_crops', 'crop_stage', 'crop_issues',
            'livestock_type', 'number_of_animals', 'livestock_issues',
            'photo_urls', 'photo_url', 'video_link',
            'advice_given',
            'follow_up_needed', 'proposed_follow_up_date',
            'routine_check', 'routine_check_date',
            'training_needed', 'referral_to_specialist', 'additional_notes',
        ]

    def validate_crop_issues(self, value):
        return _dedupe(value)

    def validate_livestock_issues(self, value):
        return _dedupe(value)

    def validate(self, attrs):
        farm_type = attrs.get('farm_type', FarmVisit.FarmType.CROP)

        if attrs.get('number_of_animals') is None:
            attrs['number_of_animals'] = 0

        attrs.update(inapplicable_observation_values(farm_type))

        if not attrs.get('follow_up_needed'):
            attrs['proposed_follow_up_date'] = None
        if not attrs.get('routine_check'):
            attrs['routine_check_date'] = None

        crop_stage = attrs.get('crop_stage', '')
        if crop_stage:
            stages = get_available_stages(attrs.get('main_crops', ''))
            if crop_stage not in stages:
                raise serializers.ValidationError({
                    'crop_stage': f"'{crop_stage}' is not a registered stage for {attrs.get('main_crops') or 'this crop'}"
                })

        attrs['photo_urls'] = normalize_photo_urls(
            attrs.get('photo_urls'),
            attrs.pop('photo_url', None)
        )
        return attrs


class CropStageSerializer(serializers.ModelSerializer):

    class Meta:
        model = CropStage
        fields = ['id', 'crop_name', 'stages']
        read_only_fields = fields


class PhotoUploadSerializer(serializers.Serializer):
    """Single photo attached to a farm visit form."""

    photo = serializers.FileField(required=True)

    def validate_photo(self, value):
        ext = os.path.splitext(value.name)[1].lower()
        if ext not in settings.VISIT_PHOTO_EXTENSIONS:
            raise serializers.ValidationError(
                f"Unsupported file type. Allowed: {', '.join(settings.VISIT_PHOTO_EXTENSIONS)}"
            )

        if value.size > settings.MAX_UPLOAD_SIZE:
            max_mb = settings.MAX_UPLOAD_SIZE // (1024 * 1024)
            raise serializers.ValidationError(
                f"File size exceeds maximum allowed size of {max_mb}MB"
            )

        return value
