"""
Farm Visit Views

Public endpoints for the submission form (crop stages, photo upload, visit
submission) and administrator endpoints for the dashboard (list, detail,
delete, in-page report and exports).
"""
import logging

from django.db import DatabaseError
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsVisitAdministrator

from .exceptions import DeleteFailed, FetchFailed, PresentationBlocked, SubmitFailed, UploadFailed
from .filters import FarmVisitFilter
from .models import CropStage, FarmVisit
from .serializers import (
    CropStageSerializer,
    FarmVisitSerializer,
    FarmVisitSubmitSerializer,
    PhotoUploadSerializer,
)
from .services.crop_stages import get_available_stages
from .services.export import (
    HTML, PDF, AttachmentPresenter, InlinePresenter, export_visit_document
)
from .services.photo_storage import VisitPhotoStorage
from .services.report_renderer import render_visit_report, report_as_dict

logger = logging.getLogger(__name__)


def error_response(error, status_code, **extra):
    """Standard {'error', 'code'} body for a VisitError."""
    return Response(
        {'error': error.message, 'code': error.code, **extra},
        status=status_code
    )


def load_visit(pk):
    """Fetch one visit for the report views; store errors become FetchFailed."""
    try:
        return get_object_or_404(FarmVisit, pk=pk)
    except DatabaseError as e:
        logger.exception(f"Failed to load farm visit {pk}")
        raise FetchFailed('Could not load this farm visit. Please try again.') from e


class CropStageListView(APIView):
    """
    GET /api/visits/crop-stages/
    GET /api/visits/crop-stages/?crop=Maize

    Without `crop`, every registered crop with its stages. With `crop`, the
    ordered stages of that crop (case-insensitive; empty if unregistered).
    """
    permission_classes = [AllowAny]

    def get(self, request):
        crop = request.query_params.get('crop')
        try:
            if crop is not None:
                return Response({
                    'crop': crop,
                    'stages': get_available_stages(crop),
                })

            crop_stages = CropStage.objects.all()
            return Response(CropStageSerializer(crop_stages, many=True).data)
        except DatabaseError:
            logger.exception("Failed to load crop stages")
            return error_response(
                FetchFailed('Could not load crop stages. Please try again.'),
                status.HTTP_503_SERVICE_UNAVAILABLE
            )


class PhotoUploadView(APIView):
    """
    POST /api/visits/photos/

    Multipart upload of one photo (field `photo`). Returns the public URL
    to send back as `photo_url` / `photo_urls` with the visit.
    """
    permission_classes = [AllowAny]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        serializer = PhotoUploadSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {'error': 'Validation failed', 'fields': serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            url = VisitPhotoStorage().upload(serializer.validated_data['photo'])
        except UploadFailed as e:
            return error_response(e, status.HTTP_502_BAD_GATEWAY)

        return Response(
            {'photo_url': request.build_absolute_uri(url)},
            status=status.HTTP_201_CREATED
        )


class FarmVisitListCreateView(generics.ListCreateAPIView):
    """
    POST /api/visits/   public form submission
    GET  /api/visits/   administrator dashboard list

    List query parameters: `search`, `visit_type` (Routine, Emergency,
    Follow-up or all). Newest visits first.
    """
    queryset = FarmVisit.objects.all().order_by('-created_at')
    filter_backends = [DjangoFilterBackend]
    filterset_class = FarmVisitFilter

    def get_permissions(self):
        if self.request.method == 'POST':
            return [AllowAny()]
        return [IsVisitAdministrator()]

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return FarmVisitSubmitSerializer
        return FarmVisitSerializer

    def list(self, request, *args, **kwargs):
        try:
            visits = list(self.filter_queryset(self.get_queryset()))
            results = FarmVisitSerializer(visits, many=True).data
        except DatabaseError:
            logger.exception("Failed to load farm visits")
            return error_response(
                FetchFailed(),
                status.HTTP_503_SERVICE_UNAVAILABLE,
                count=0,
                results=[]
            )

        return Response({
            'count': len(visits),
            'search': request.query_params.get('search', ''),
            'visit_type': request.query_params.get('visit_type') or 'all',
            'results': results,
        })

    def create(self, request, *args, **kwargs):
        serializer = FarmVisitSubmitSerializer(data=request.data)
        try:
            # Stage validation reads the crop stage table
            if not serializer.is_valid():
                return Response(
                    {'error': 'Validation failed', 'fields': serializer.errors},
                    status=status.HTTP_400_BAD_REQUEST
                )
            visit = serializer.save()
        except DatabaseError:
            logger.exception(f"Failed to save farm visit for farm {request.data.get('farm_id')}")
            return error_response(SubmitFailed(), status.HTTP_503_SERVICE_UNAVAILABLE)

        logger.info(f"Farm visit {visit.id} submitted by {visit.officer_name} for farm {visit.farm_id}")
        return Response({
            'message': 'Farm visit submitted successfully!',
            'visit': FarmVisitSerializer(visit).data,
        }, status=status.HTTP_201_CREATED)


class FarmVisitDetailView(generics.RetrieveDestroyAPIView):
    """
    GET    /api/visits/<id>/
    DELETE /api/visits/<id>/?confirm=true

    Deletion is refused unless the request carries confirm=true.
    """
    permission_classes = [IsVisitAdministrator]
    serializer_class = FarmVisitSerializer
    queryset = FarmVisit.objects.all()

    def destroy(self, request, *args, **kwargs):
        if request.query_params.get('confirm', '').lower() != 'true':
            return Response(
                {
                    'error': 'Are you sure you want to delete this entry? Repeat the request with confirm=true.',
                    'code': 'CONFIRMATION_REQUIRED'
                },
                status=status.HTTP_400_BAD_REQUEST
            )

        visit_id = kwargs.get('pk')
        try:
            self.get_object().delete()
        except DatabaseError:
            logger.exception(f"Failed to delete farm visit {visit_id}")
            return error_response(DeleteFailed(), status.HTTP_503_SERVICE_UNAVAILABLE)

        logger.info(f"Farm visit {visit_id} deleted by {request.user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)


class FarmVisitReportView(APIView):
    """
    GET /api/visits/<id>/report/

    Ordered report sections for the in-page expansion.
    """
    permission_classes = [IsVisitAdministrator]

    def get(self, request, pk):
        try:
            visit = load_visit(pk)
        except FetchFailed as e:
            return error_response(e, status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response({
            'id': str(visit.id),
            'sections': report_as_dict(render_visit_report(visit)),
        })


class FarmVisitExportView(APIView):
    """
    GET /api/visits/<id>/export/pdf/     PDF download
    GET /api/visits/<id>/export/print/   printable HTML page
    """
    permission_classes = [IsVisitAdministrator]

    FORMATS = {
        'pdf': (PDF, AttachmentPresenter),
        'print': (HTML, InlinePresenter),
    }

    def get(self, request, pk, fmt):
        if fmt not in self.FORMATS:
            return Response(
                {'error': f"Unknown export format: {fmt}", 'code': 'INVALID_FORMAT'},
                status=status.HTTP_404_NOT_FOUND
            )

        export_format, presenter_class = self.FORMATS[fmt]

        try:
            visit = load_visit(pk)
            return export_visit_document(visit, presenter_class(), export_format)
        except FetchFailed as e:
            return error_response(e, status.HTTP_503_SERVICE_UNAVAILABLE)
        except PresentationBlocked as e:
            logger.warning(f"Export of visit {visit.id} blocked: {e.message}")
            return error_response(e, status.HTTP_409_CONFLICT)
