"""
Farm Visit Filtering

The dashboard narrows the loaded visits by free text and visit type. The
same predicate is offered in two forms:

- filter_visits(): pure, order-preserving filter over records already in
  memory (model instances or plain mappings).
- visit_filter_q(): a Q object with the same semantics for database-side
  filtering. `__icontains` folds case the way the database collation does,
  which for SQLite covers ASCII only, so the dashboard search runs
  filter_visits() over the fetched rows and uses the Q form for visit type.
"""
from collections.abc import Mapping

from django.db.models import Q

ALL_VISIT_TYPES = 'all'

# Fields matched by the free-text query
SEARCH_FIELDS = ('farmer_name', 'farm_id', 'village_location', 'officer_name')


def _read(record, field):
    if isinstance(record, Mapping):
        value = record.get(field)
    else:
        value = getattr(record, field, None)
    return '' if value is None else str(value)


def _normalise(query, type_filter):
    return query or '', type_filter or ALL_VISIT_TYPES


def matches_visit(record, query='', type_filter=ALL_VISIT_TYPES):
    """
    Check one record against the dashboard predicates.

    Both restrictions must hold: the visit type equals `type_filter` (unless
    it is 'all'), and the lowercased query appears in one of the searchable
    fields (unless the query is empty).
    """
    query, type_filter = _normalise(query, type_filter)

    if type_filter != ALL_VISIT_TYPES and _read(record, 'visit_type') != type_filter:
        return False

    if query:
        term = query.lower()
        return any(term in _read(record, field).lower() for field in SEARCH_FIELDS)

    return True


def filter_visits(records, query='', type_filter=ALL_VISIT_TYPES):
    """
    Return the records matching `query` and `type_filter`, in input order.

    Reapplying the same predicates to the output returns it unchanged.
    """
    return [record for record in records if matches_visit(record, query, type_filter)]


def visit_filter_q(query='', type_filter=ALL_VISIT_TYPES):
    """Database form of matches_visit()."""
    query, type_filter = _normalise(query, type_filter)
    condition = Q()

    if type_filter != ALL_VISIT_TYPES:
        condition &= Q(visit_type=type_filter)

    if query:
        text = Q()
        for field in SEARCH_FIELDS:
            text |= Q(**{f'{field}__icontains': query})
        condition &= text

    return condition
