"""
Farm Visit Report Renderer

Turns one FarmVisit into an ordered tuple of report sections. The dashboard
expansion endpoint, the PDF export and the printable HTML page all iterate
the output of render_visit_report(), so the three can never disagree about
which sections appear, in what order, or how values are formatted.

Section order:
    1. Farmer Details
    2. Visit Information
    3. Crop Information       (Crop/Mixed farms with main crops recorded)
    4. Livestock Information  (Livestock/Mixed farms with livestock recorded)
    5. Photos                 (only when photos exist)
    6. Video                  (only when a video link exists)
    7. Recommendations
    8. Follow-up
"""
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import NamedTuple, Tuple

from dateutil import parser as date_parser
from django.utils import timezone

NOT_AVAILABLE = 'N/A'

# Field kinds tell the presentation layer how to draw a value
TEXT = 'text'
MULTILINE = 'multiline'
LINK = 'link'
IMAGE = 'image'
BADGE = 'badge'
FLAG = 'flag'


class ReportField(NamedTuple):
    label: str
    value: str
    kind: str = TEXT


class ReportSection(NamedTuple):
    key: str
    title: str
    fields: Tuple[ReportField, ...]


# Two defaults differing in year, month and day
_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 2, 2)


def _parse_date_string(text):
    """
    Parse `text` only if it names a full calendar date.

    dateutil fills missing parts from its default, so the string is parsed
    against two different defaults; any disagreement means a part was missing.
    """
    try:
        first = date_parser.parse(text, default=_DEFAULT_A)
        second = date_parser.parse(text, default=_DEFAULT_B)
    except (ValueError, OverflowError):
        return None

    if first.date() != second.date():
        return None
    return first


def format_long_date(value):
    """
    Format a date as "January 5, 2025".

    Accepts date/datetime objects and ISO-like strings. Missing, empty or
    unparseable values give "N/A".
    """
    if value is None or value == '':
        return NOT_AVAILABLE

    if isinstance(value, str):
        value = _parse_date_string(value)
        if value is None:
            return NOT_AVAILABLE

    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        value = value.date()

    if not isinstance(value, date):
        return NOT_AVAILABLE

    return f"{value:%B} {value.day}, {value.year}"


def format_number(value):
    """Render a quantity without trailing zeros: Decimal('2.50') -> '2.5'."""
    if value is None or value == '':
        return '0'
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        return str(value)
    if number == number.to_integral_value():
        return str(number.quantize(Decimal(1)))
    return format(number.normalize(), 'f')


def yes_no(flag):
    return 'Yes' if flag else 'No'


def _farmer_details(visit):
    return ReportSection('farmer_details', 'Farmer Details', (
        ReportField('Farmer Name', visit.farmer_name),
        ReportField('Farm ID', visit.farm_id),
        ReportField('Village/Location', visit.village_location),
        ReportField('Phone Number', visit.phone_number),
        ReportField('GPS Coordinates', visit.gps_coordinates or NOT_AVAILABLE),
        ReportField('Farm Size', f"{format_number(visit.farm_size_acres)} acres"),
        ReportField('Farm Type', visit.farm_type),
    ))


def _visit_information(visit, date_formatter):
    return ReportSection('visit_information', 'Visit Information', (
        ReportField('Date of Visit', date_formatter(visit.visit_date)),
        ReportField('Visit Type', visit.visit_type, BADGE),
        ReportField('Officer Name', visit.officer_name),
        ReportField('Time Spent', f"{format_number(visit.time_spent_hours)} hours"),
        ReportField('Created', date_formatter(visit.created_at)),
    ))


def _crop_information(crop):
    fields = [
        ReportField('Main Crops', crop.main_crops),
        ReportField('Crop Stage', crop.crop_stage or NOT_AVAILABLE),
    ]
    if crop.crop_issues:
        fields.append(ReportField('Crop Issues', ', '.join(crop.crop_issues)))
    return ReportSection('crop_information', 'Crop Information', tuple(fields))


def _livestock_information(livestock):
    fields = [
        ReportField('Livestock Type', livestock.livestock_type),
        ReportField('Number of Animals', str(livestock.number_of_animals or 0)),
    ]
    if livestock.livestock_issues:
        fields.append(ReportField('Livestock Issues', ', '.join(livestock.livestock_issues)))
    return ReportSection('livestock_information', 'Livestock Information', tuple(fields))


def _photos(photo_urls):
    return ReportSection('photos', 'Photos', tuple(
        ReportField(f'Photo {position}', url, IMAGE)
        for position, url in enumerate(photo_urls, start=1)
    ))


def _follow_up(visit, date_formatter):
    fields = [ReportField('Follow-up Needed', yes_no(visit.follow_up_needed), FLAG)]
    if visit.follow_up_needed and visit.proposed_follow_up_date:
        fields.append(ReportField('Proposed Follow-up Date', date_formatter(visit.proposed_follow_up_date)))

    fields.append(ReportField('Routine Check', yes_no(visit.routine_check), FLAG))
    if visit.routine_check and visit.routine_check_date:
        fields.append(ReportField('Routine Check Date', date_formatter(visit.routine_check_date)))

    fields.append(ReportField('Training Needed', yes_no(visit.training_needed), FLAG))
    if visit.referral_to_specialist:
        fields.append(ReportField('Referral to Specialist', visit.referral_to_specialist))
    if visit.additional_notes:
        fields.append(ReportField('Additional Notes', visit.additional_notes, MULTILINE))
    return ReportSection('follow_up', 'Follow-up', tuple(fields))


def render_visit_report(visit, date_formatter=format_long_date):
    """
    Build the ordered report sections for `visit`.

    Never raises on missing optional fields: they fall back to "N/A", are
    omitted, or default to 0.
    """
    sections = [
        _farmer_details(visit),
        _visit_information(visit, date_formatter),
    ]

    crop = visit.crop_observation
    if crop is not None:
        sections.append(_crop_information(crop))

    livestock = visit.livestock_observation
    if livestock is not None:
        sections.append(_livestock_information(livestock))

    photo_urls = [url for url in (visit.photo_urls or []) if url]
    if photo_urls:
        sections.append(_photos(photo_urls))

    if visit.video_link:
        sections.append(ReportSection('video', 'Video', (
            ReportField('Video Link', visit.video_link, LINK),
        )))

    sections.append(ReportSection('recommendations', 'Recommendations', (
        ReportField('Advice Given', visit.advice_given or '', MULTILINE),
    )))

    sections.append(_follow_up(visit, date_formatter))
    return tuple(sections)


def report_as_dict(sections):
    """JSON-ready form of render_visit_report() output."""
    return [
        {
            'key': section.key,
            'title': section.title,
            'fields': [
                {'label': field.label, 'value': field.value, 'kind': field.kind}
                for field in section.fields
            ],
        }
        for section in sections
    ]
