"""
Tests for the farm visit API endpoints.
"""
import uuid
from datetime import timedelta
from unittest.mock import MagicMock, PropertyMock, patch

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError
from django.utils import timezone
from rest_framework import status

from visits.exceptions import PresentationBlocked
from visits.models import FarmVisit

pytestmark = pytest.mark.django_db

VISITS_URL = '/api/visits/'


def detail_url(visit):
    return f'{VISITS_URL}{visit.id}/'


class TestSubmitVisit:
    """Test the public submission form endpoint."""

    def test_anonymous_submission(self, api_client, visit_payload):
        """Test officers can submit without signing in."""
        response = api_client.post(VISITS_URL, visit_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['message'] == 'Farm visit submitted successfully!'
        visit = FarmVisit.objects.get()
        assert visit.farmer_name == 'Grace Nakato'
        assert visit.crop_issues == ['Pests']
        assert response.data['visit']['id'] == str(visit.id)

    def test_validation_errors(self, api_client, visit_payload):
        visit_payload.pop('farmer_name')
        response = api_client.post(VISITS_URL, visit_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Validation failed'
        assert 'farmer_name' in response.data['fields']
        assert FarmVisit.objects.count() == 0

    def test_store_failure_returns_submit_failed(self, api_client, visit_payload):
        """Test a database error keeps the form data and reports SUBMIT_FAILED."""
        with patch('visits.serializers.FarmVisitSubmitSerializer.save', side_effect=DatabaseError('down')):
            response = api_client.post(VISITS_URL, visit_payload, format='json')

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data == {
            'error': 'Error submitting form. Please try again.',
            'code': 'SUBMIT_FAILED',
        }

    def test_crop_stage_lookup_failure_returns_submit_failed(self, api_client, visit_payload):
        """Test a database error during stage validation reports SUBMIT_FAILED."""
        visit_payload['crop_stage'] = 'Vegetative'
        with patch('visits.services.crop_stages.CropStage.objects.all', side_effect=DatabaseError('down')):
            response = api_client.post(VISITS_URL, visit_payload, format='json')

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data['code'] == 'SUBMIT_FAILED'
        assert FarmVisit.objects.count() == 0


class TestVisitList:
    """Test the administrator dashboard list."""

    def test_requires_authentication(self, api_client):
        response = api_client.get(VISITS_URL)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_non_admin_forbidden(self, api_client, officer_user):
        api_client.force_authenticate(user=officer_user)
        response = api_client.get(VISITS_URL)
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_newest_first(self, admin_client, make_visit):
        older = make_visit(farm_id='OLD-1')
        newer = make_visit(farm_id='NEW-1')
        FarmVisit.objects.filter(pk=older.pk).update(created_at=timezone.now() - timedelta(days=1))

        response = admin_client.get(VISITS_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 2
        assert [v['farm_id'] for v in response.data['results']] == [newer.farm_id, older.farm_id]

    def test_search_and_type_filter(self, admin_client, make_visit):
        make_visit(farm_id='A', farmer_name='Grace Nakato', visit_type='Emergency')
        make_visit(farm_id='B', farmer_name='Grace Nakato', visit_type='Routine')
        make_visit(farm_id='C', farmer_name='John Mugisha', visit_type='Emergency')

        response = admin_client.get(VISITS_URL, {'search': 'NAKATO', 'visit_type': 'Emergency'})

        assert [v['farm_id'] for v in response.data['results']] == ['A']
        assert response.data['search'] == 'NAKATO'
        assert response.data['visit_type'] == 'Emergency'

    def test_all_sentinel(self, admin_client, make_visit):
        make_visit(visit_type='Emergency')
        make_visit(visit_type='Follow-up')

        response = admin_client.get(VISITS_URL, {'visit_type': 'all'})

        assert response.data['count'] == 2

    def test_store_failure_returns_empty_list(self, admin_client):
        """Test FETCH_FAILED leaves the list empty."""
        with patch(
            'visits.views.FarmVisitListCreateView.filter_queryset',
            side_effect=DatabaseError('down')
        ):
            response = admin_client.get(VISITS_URL)

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data['code'] == 'FETCH_FAILED'
        assert response.data['results'] == []

    def test_serialization_failure_returns_empty_list(self, admin_client, make_visit):
        """Test a store error while serializing the rows is still FETCH_FAILED."""
        make_visit()
        with patch(
            'rest_framework.serializers.ListSerializer.data',
            new_callable=PropertyMock,
            side_effect=DatabaseError('down')
        ):
            response = admin_client.get(VISITS_URL)

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data['code'] == 'FETCH_FAILED'
        assert response.data['count'] == 0

    def test_search_folds_non_ascii_case(self, admin_client, make_visit):
        make_visit(farm_id='U1', farmer_name='Élise Namara')
        make_visit(farm_id='U2', farmer_name='Grace Nakato')

        response = admin_client.get(VISITS_URL, {'search': 'élise'})

        assert [v['farm_id'] for v in response.data['results']] == ['U1']


class TestVisitDetailAndDelete:

    def test_retrieve(self, admin_client, make_visit):
        visit = make_visit()
        response = admin_client.get(detail_url(visit))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['farm_id'] == 'FRM-001'

    def test_delete_requires_confirmation(self, admin_client, make_visit):
        visit = make_visit()
        response = admin_client.delete(detail_url(visit))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'CONFIRMATION_REQUIRED'
        assert FarmVisit.objects.filter(pk=visit.pk).exists()

    def test_confirmed_delete(self, admin_client, make_visit):
        visit = make_visit()
        response = admin_client.delete(f'{detail_url(visit)}?confirm=true')

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not FarmVisit.objects.filter(pk=visit.pk).exists()

    def test_delete_missing_visit(self, admin_client):
        response = admin_client.delete(f'{VISITS_URL}{uuid.uuid4()}/?confirm=true')
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_store_failure_returns_delete_failed(self, admin_client, make_visit):
        """Test the record survives a failed delete."""
        visit = make_visit()
        with patch('visits.models.FarmVisit.delete', side_effect=DatabaseError('down')):
            response = admin_client.delete(f'{detail_url(visit)}?confirm=true')

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data['code'] == 'DELETE_FAILED'
        assert FarmVisit.objects.filter(pk=visit.pk).exists()

    def test_lookup_failure_returns_delete_failed(self, admin_client, make_visit):
        visit = make_visit()
        with patch('visits.views.FarmVisitDetailView.get_object', side_effect=DatabaseError('down')):
            response = admin_client.delete(f'{detail_url(visit)}?confirm=true')

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data['code'] == 'DELETE_FAILED'
        assert FarmVisit.objects.filter(pk=visit.pk).exists()

    def test_anonymous_delete_refused(self, api_client, make_visit):
        visit = make_visit()
        response = api_client.delete(f'{detail_url(visit)}?confirm=true')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert FarmVisit.objects.filter(pk=visit.pk).exists()


class TestReportAndExport:

    def test_report_sections(self, admin_client, make_visit):
        visit = make_visit(farm_type='Mixed', livestock_type='Goats', number_of_animals=5)
        response = admin_client.get(f'{detail_url(visit)}report/')

        assert response.status_code == status.HTTP_200_OK
        assert [s['title'] for s in response.data['sections']] == [
            'Farmer Details', 'Visit Information', 'Crop Information',
            'Livestock Information', 'Recommendations', 'Follow-up',
        ]

    def test_pdf_download(self, admin_client, make_visit):
        visit = make_visit()
        response = admin_client.get(f'{detail_url(visit)}export/pdf/')

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'] == 'application/pdf'
        assert response['Content-Disposition'].startswith('attachment;')
        assert response.content.startswith(b'%PDF')

    def test_print_page(self, admin_client, make_visit):
        visit = make_visit()
        response = admin_client.get(f'{detail_url(visit)}export/print/')

        assert response.status_code == status.HTTP_200_OK
        assert b'window.print()' in response.content

    def test_unknown_format(self, admin_client, make_visit):
        visit = make_visit()
        response = admin_client.get(f'{detail_url(visit)}export/docx/')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['code'] == 'INVALID_FORMAT'

    def test_presentation_blocked(self, admin_client, make_visit):
        """Test a blocked presenter surfaces an actionable message."""
        visit = make_visit()
        with patch('visits.views.export_visit_document', side_effect=PresentationBlocked()):
            response = admin_client.get(f'{detail_url(visit)}export/pdf/')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'PRESENTATION_BLOCKED'
        assert 'allow popups' in response.data['error']

    @pytest.mark.parametrize('suffix', ['report/', 'export/pdf/', 'export/print/'])
    def test_lookup_failure_returns_fetch_failed(self, admin_client, make_visit, suffix):
        visit = make_visit()
        with patch('visits.views.get_object_or_404', side_effect=DatabaseError('down')):
            response = admin_client.get(f'{detail_url(visit)}{suffix}')

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data['code'] == 'FETCH_FAILED'

    def test_export_requires_admin(self, api_client, make_visit):
        visit = make_visit()
        response = api_client.get(f'{detail_url(visit)}export/pdf/')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestCropStages:

    def test_list_ordered_by_crop_name(self, api_client, crop_stages):
        response = api_client.get(f'{VISITS_URL}crop-stages/')

        assert response.status_code == status.HTTP_200_OK
        assert [c['crop_name'] for c in response.data] == ['Beans', 'Maize']

    def test_lookup_is_case_insensitive(self, api_client, crop_stages):
        response = api_client.get(f'{VISITS_URL}crop-stages/', {'crop': 'maize'})

        assert response.data['stages'] == ['Germination', 'Vegetative', 'Tasseling', 'Maturity']

    def test_unknown_crop_has_no_stages(self, api_client, crop_stages):
        response = api_client.get(f'{VISITS_URL}crop-stages/', {'crop': 'Sunflower'})
        assert response.data['stages'] == []

    @pytest.mark.parametrize('params', [{}, {'crop': 'Maize'}])
    def test_store_failure_returns_fetch_failed(self, api_client, params):
        with patch('visits.services.crop_stages.CropStage.objects.all', side_effect=DatabaseError('down')):
            response = api_client.get(f'{VISITS_URL}crop-stages/', params)

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data['code'] == 'FETCH_FAILED'


class TestPhotoUpload:

    def test_upload_returns_public_url(self, api_client):
        photo = SimpleUploadedFile('farm.JPG', b'fake-image-bytes', content_type='image/jpeg')
        response = api_client.post(f'{VISITS_URL}photos/', {'photo': photo}, format='multipart')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['photo_url'].startswith('http://testserver/media/farm-photos/')
        assert response.data['photo_url'].endswith('.jpg')

    def test_rejects_unsupported_type(self, api_client):
        upload = SimpleUploadedFile('notes.txt', b'hello', content_type='text/plain')
        response = api_client.post(f'{VISITS_URL}photos/', {'photo': upload}, format='multipart')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'photo' in response.data['fields']

    def test_rejects_oversized_file(self, api_client, settings):
        settings.MAX_UPLOAD_SIZE = 10
        photo = SimpleUploadedFile('farm.png', b'x' * 11, content_type='image/png')
        response = api_client.post(f'{VISITS_URL}photos/', {'photo': photo}, format='multipart')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_storage_failure_returns_upload_failed(self, api_client):
        storage = MagicMock()
        storage.save.side_effect = OSError('bucket unavailable')
        photo = SimpleUploadedFile('farm.jpg', b'fake-image-bytes', content_type='image/jpeg')

        with patch('visits.services.photo_storage.default_storage', storage):
            response = api_client.post(f'{VISITS_URL}photos/', {'photo': photo}, format='multipart')

        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert response.data['code'] == 'UPLOAD_FAILED'
