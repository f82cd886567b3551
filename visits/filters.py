"""
Farm Visit Dashboard Filters

Query parameters:
    search      free text matched against farmer name, farm ID, village and officer
    visit_type  Routine | Emergency | Follow-up | all
"""
import django_filters

from .models import FarmVisit
from .services.filtering import ALL_VISIT_TYPES, filter_visits, visit_filter_q


class FarmVisitFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    visit_type = django_filters.CharFilter(method='filter_visit_type')

    class Meta:
        model = FarmVisit
        fields = ['search', 'visit_type']

    def filter_search(self, queryset, name, value):
        # Matched in Python so case folding does not depend on the database collation
        matched = [visit.pk for visit in filter_visits(queryset, query=value)]
        return queryset.filter(pk__in=matched)

    def filter_visit_type(self, queryset, name, value):
        return queryset.filter(visit_filter_q(type_filter=value or ALL_VISIT_TYPES))
