"""
Farm Visit URL Configuration
"""
from django.urls import path

from .views import (
    CropStageListView,
    FarmVisitDetailView,
    FarmVisitExportView,
    FarmVisitListCreateView,
    FarmVisitReportView,
    PhotoUploadView,
)

app_name = 'visits'

urlpatterns = [
    # Public form endpoints
    path('crop-stages/', CropStageListView.as_view(), name='crop-stages'),
    path('photos/', PhotoUploadView.as_view(), name='photo-upload'),

    # Submission (public) and dashboard list (admin)
    path('', FarmVisitListCreateView.as_view(), name='list-create'),

    # Administrator endpoints
    path('<uuid:pk>/', FarmVisitDetailView.as_view(), name='detail'),
    path('<uuid:pk>/report/', FarmVisitReportView.as_view(), name='report'),
    path('<uuid:pk>/export/<str:fmt>/', FarmVisitExportView.as_view(), name='export'),
]
