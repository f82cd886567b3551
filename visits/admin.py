"""
Farm Visit Django Admin Configuration
"""
from django.contrib import admin, messages

from .exceptions import PresentationBlocked
from .models import CropStage, FarmVisit
from .services.export import PDF, AttachmentPresenter, export_visit_document


@admin.register(FarmVisit)
class FarmVisitAdmin(admin.ModelAdmin):
    """Admin interface for submitted farm visits."""

    list_display = [
        'farmer_name', 'farm_id', 'village_location', 'visit_type',
        'farm_type', 'officer_name', 'visit_date', 'follow_up_needed', 'created_at'
    ]

    list_filter = ['visit_type', 'farm_type', 'follow_up_needed', 'training_needed', 'visit_date']

    search_fields = ['farmer_name', 'farm_id', 'village_location', 'officer_name']

    readonly_fields = ['id', 'created_at']

    date_hierarchy = 'visit_date'

    actions = ['download_report_pdf']

    fieldsets = (
        ('Farmer Details', {
            'fields': (
                'farmer_name', 'farm_id', 'phone_number', 'village_location',
                'gps_coordinates', 'farm_size_acres', 'farm_type'
            )
        }),
        ('Visit Details', {
            'fields': ('visit_date', 'visit_type', 'officer_name', 'time_spent_hours')
        }),
        ('Crop Observations', {
            'fields': ('main_crops', 'crop_stage', 'crop_issues'),
            'classes': ('collapse',)
        }),
        ('Livestock Observations', {
            'fields': ('livestock_type', 'number_of_animals', 'livestock_issues'),
            'classes': ('collapse',)
        }),
        ('Media', {
            'fields': ('photo_urls', 'video_link')
        }),
        ('Recommendations & Follow-up', {
            'fields': (
                'advice_given', 'follow_up_needed', 'proposed_follow_up_date',
                'routine_check', 'routine_check_date', 'training_needed',
                'referral_to_specialist', 'additional_notes'
            )
        }),
        ('Metadata', {
            'fields': ('id', 'created_at'),
            'classes': ('collapse',)
        }),
    )

    @admin.action(description='Download report PDF')
    def download_report_pdf(self, request, queryset):
        if queryset.count() != 1:
            self.message_user(request, 'Select exactly one visit to download its report.', messages.WARNING)
            return None

        try:
            return export_visit_document(queryset.get(), AttachmentPresenter(), PDF)
        except PresentationBlocked as e:
            self.message_user(request, e.message, messages.ERROR)
            return None


@admin.register(CropStage)
class CropStageAdmin(admin.ModelAdmin):
    """Admin interface for crop growth-stage reference data."""

    list_display = ['crop_name', 'stage_count', 'created_at']
    search_fields = ['crop_name']
    readonly_fields = ['id', 'created_at']

    def stage_count(self, obj):
        """Number of growth stages."""
        return len(obj.stages or [])
    stage_count.short_description = 'Stages'
