"""
Tests for the farm visit admin: the report download action and the
field clearing applied when records are edited there.
"""
from datetime import date
from unittest.mock import patch

import pytest
from django.contrib.admin.sites import AdminSite
from django.contrib.messages import WARNING
from django.contrib.messages.storage.cookie import CookieStorage
from django.test import RequestFactory

from visits.admin import FarmVisitAdmin
from visits.exceptions import PresentationBlocked
from visits.models import FarmVisit

pytestmark = pytest.mark.django_db


@pytest.fixture
def model_admin():
    return FarmVisitAdmin(FarmVisit, AdminSite())


@pytest.fixture
def admin_request(admin_user):
    request = RequestFactory().post('/admin/visits/farmvisit/')
    request.user = admin_user
    request._messages = CookieStorage(request)
    return request


class TestDownloadReportAction:

    def test_single_visit_returns_pdf(self, model_admin, admin_request, make_visit):
        visit = make_visit(farm_id='FRM-009')

        response = model_admin.download_report_pdf(admin_request, FarmVisit.objects.filter(pk=visit.pk))

        assert response['Content-Type'] == 'application/pdf'
        assert response['Content-Disposition'] == 'attachment; filename="farm_visit_FRM-009_20250105.pdf"'
        assert response.content.startswith(b'%PDF')

    def test_several_visits_warn(self, model_admin, admin_request, make_visit):
        """Test the action refuses to guess which report to download."""
        make_visit(farm_id='A')
        make_visit(farm_id='B')

        response = model_admin.download_report_pdf(admin_request, FarmVisit.objects.all())

        assert response is None
        messages = list(admin_request._messages)
        assert len(messages) == 1
        assert messages[0].level == WARNING
        assert 'exactly one' in messages[0].message

    def test_blocked_export_reported(self, model_admin, admin_request, make_visit):
        visit = make_visit()
        with patch('visits.admin.export_visit_document', side_effect=PresentationBlocked()):
            response = model_admin.download_report_pdf(admin_request, FarmVisit.objects.filter(pk=visit.pk))

        assert response is None
        assert 'allow popups' in list(admin_request._messages)[0].message


class TestFarmVisitClean:

    def test_livestock_visit_drops_crop_fields(self):
        visit = FarmVisit(
            farm_type=FarmVisit.FarmType.LIVESTOCK,
            main_crops='Maize',
            crop_stage='Vegetative',
            crop_issues=['Pests'],
            livestock_type='Goats',
            number_of_animals=5,
            livestock_issues=['Disease'],
        )

        visit.clean()

        assert visit.main_crops == ''
        assert visit.crop_stage == ''
        assert visit.crop_issues == []
        assert visit.livestock_type == 'Goats'
        assert visit.number_of_animals == 5
        assert visit.crop_observation is None

    def test_dates_cleared_when_flags_off(self):
        visit = FarmVisit(
            farm_type=FarmVisit.FarmType.MIXED,
            follow_up_needed=False,
            proposed_follow_up_date=date(2025, 2, 1),
            routine_check=True,
            routine_check_date=date(2025, 3, 1),
        )

        visit.clean()

        assert visit.proposed_follow_up_date is None
        assert visit.routine_check_date == date(2025, 3, 1)
