"""
Field Transforms - Per-field normalization of raw CSV cells

Every transform takes a CellValue and returns the normalized value or None.
Transforms are total: unparseable input becomes None (numbers, dates) or is
passed through unchanged (classification, identifiers), never an exception.

FIELD_TRANSFORMS holds an entry for every canonical field; fields that need
no normalization are registered with ``passthrough``.
"""

import math
import re
from datetime import datetime
from typing import Any, Callable, Optional, Pattern

from services.common.cell_value import CellKind, CellValue
from services.enums import PropertyField as P, TransactionField as T
from services.registry import FieldRegistry

Transform = Callable[[CellValue], Any]

# Leading numeric prefix, the same prefix a lenient float parser accepts
_NUMERIC_PREFIX = re.compile(r'^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')

_CURRENCY_CHARS = re.compile(r'[$,]')
_DECIMAL_CHARS = re.compile(r'[$,%]')
_SQUARE_FEET_CHARS = re.compile(r'[,SF\s]', re.IGNORECASE)
_ACRE_CHARS = re.compile(r'[,AC\s]', re.IGNORECASE)

_STAR_RATING = re.compile(r'(\d)\s*Star', re.IGNORECASE)
_CREXI_PROPERTY_URL = re.compile(r'crexi\.com/properties/(\d+)', re.IGNORECASE)

TRUTHY_TOKENS = frozenset(['yes', 'true', '1', 'y'])
_FALSY_PRESENCE_TOKENS = frozenset(['none', '0'])

# Substring keyword -> property type. Checked in order, first hit wins.
PROPERTY_TYPE_KEYWORDS = (
    ('industrial', 'industrial'),
    ('warehouse', 'industrial'),
    ('distribution', 'industrial'),
    ('manufacturing', 'industrial'),
    ('flex', 'industrial'),
    ('office', 'office'),
    ('retail', 'retail'),
    ('shopping', 'retail'),
    ('strip center', 'retail'),
    ('multifamily', 'multifamily'),
    ('apartment', 'multifamily'),
    ('land', 'land'),
    ('special purpose', 'special_purpose'),
    ('hospitality', 'special_purpose'),
    ('hotel', 'special_purpose'),
    ('self storage', 'special_purpose'),
)

STATE_CODES = {
    'ALABAMA': 'AL', 'ALASKA': 'AK', 'ARIZONA': 'AZ', 'ARKANSAS': 'AR',
    'CALIFORNIA': 'CA', 'COLORADO': 'CO', 'CONNECTICUT': 'CT', 'DELAWARE': 'DE',
    'DISTRICT OF COLUMBIA': 'DC', 'FLORIDA': 'FL', 'GEORGIA': 'GA', 'HAWAII': 'HI',
    'IDAHO': 'ID', 'ILLINOIS': 'IL', 'INDIANA': 'IN', 'IOWA': 'IA',
    'KANSAS': 'KS', 'KENTUCKY': 'KY', 'LOUISIANA': 'LA', 'MAINE': 'ME',
    'MARYLAND': 'MD', 'MASSACHUSETTS': 'MA', 'MICHIGAN': 'MI', 'MINNESOTA': 'MN',
    'MISSISSIPPI': 'MS', 'MISSOURI': 'MO', 'MONTANA': 'MT', 'NEBRASKA': 'NE',
    'NEVADA': 'NV', 'NEW HAMPSHIRE': 'NH', 'NEW JERSEY': 'NJ', 'NEW MEXICO': 'NM',
    'NEW YORK': 'NY', 'NORTH CAROLINA': 'NC', 'NORTH DAKOTA': 'ND', 'OHIO': 'OH',
    'OKLAHOMA': 'OK', 'OREGON': 'OR', 'PENNSYLVANIA': 'PA', 'RHODE ISLAND': 'RI',
    'SOUTH CAROLINA': 'SC', 'SOUTH DAKOTA': 'SD', 'TENNESSEE': 'TN', 'TEXAS': 'TX',
    'UTAH': 'UT', 'VERMONT': 'VT', 'VIRGINIA': 'VA', 'WASHINGTON': 'WA',
    'WEST VIRGINIA': 'WV', 'WISCONSIN': 'WI', 'WYOMING': 'WY',
}

DATE_FORMATS = (
    '%Y-%m-%d',
    '%m/%d/%Y',
    '%m-%d-%Y',
    '%Y/%m/%d',
    '%m/%d/%y',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%dT%H:%M:%S.%f',
    '%Y-%m-%d %H:%M:%S',
    '%Y-%m-%d %H:%M:%S.%f',
    '%m/%d/%Y %H:%M',
    '%m/%d/%Y %H:%M:%S',
    '%m/%d/%Y %I:%M %p',
    '%m/%d/%Y %I:%M:%S %p',
    '%B %d, %Y',
    '%b %d, %Y',
    '%b %d %Y',
    '%d %B %Y',
    '%d %b %Y',
)


# ----------------------------------------------------------------------------
# Numeric helpers
# ----------------------------------------------------------------------------

def parse_leading_float(text: str) -> Optional[float]:
    """Parse the numeric prefix of ``text`` ("12.5 ft" -> 12.5), None if there is none"""
    match = _NUMERIC_PREFIX.match(text.strip())
    if not match:
        return None
    number = float(match.group(0))
    return number if math.isfinite(number) else None


def round_half_up(number) -> int:
    """Round .5 upwards, unlike Python's round() which rounds to even"""
    return int(math.floor(float(number) + 0.5))


def _numeric(cell: CellValue, strip: Pattern, integer: bool = False):
    if cell.kind is CellKind.NUMBER:
        if not math.isfinite(cell.raw):
            return None
        if integer:
            return round_half_up(cell.raw)
        return cell.raw
    if cell.kind is not CellKind.TEXT or cell.is_blank:
        return None
    number = parse_leading_float(strip.sub('', cell.text))
    if number is None:
        return None
    return round_half_up(number) if integer else number


# ----------------------------------------------------------------------------
# Transforms
# ----------------------------------------------------------------------------

def passthrough(cell: CellValue) -> Any:
    """Identity: the raw value exactly as received"""
    return cell.raw


def parse_currency(cell: CellValue) -> Optional[float]:
    """'$1,250,000' -> 1250000.0"""
    return _numeric(cell, _CURRENCY_CHARS)


def parse_decimal(cell: CellValue) -> Optional[float]:
    return _numeric(cell, _DECIMAL_CHARS)


def parse_integer(cell: CellValue) -> Optional[int]:
    """'1,204' -> 1204; fractional values round half up"""
    return _numeric(cell, _CURRENCY_CHARS, integer=True)


def parse_square_feet(cell: CellValue) -> Optional[int]:
    """'12,500 SF' -> 12500"""
    return _numeric(cell, _SQUARE_FEET_CHARS, integer=True)


def parse_acres(cell: CellValue) -> Optional[float]:
    """'2.35 AC' -> 2.35"""
    return _numeric(cell, _ACRE_CHARS)


def parse_percentage(cell: CellValue) -> Optional[float]:
    """'95.5%' -> 95.5"""
    if cell.kind is CellKind.NUMBER:
        return cell.raw
    if cell.kind is not CellKind.TEXT or cell.is_blank:
        return None
    return parse_leading_float(cell.text.replace('%', '', 1))


def normalize_property_type(cell: CellValue) -> Any:
    """Map noisy provider type strings onto the fixed property type vocabulary

    Unrecognized values are returned unchanged.
    """
    if cell.is_blank:
        return None
    if cell.kind is not CellKind.TEXT:
        return cell.raw
    normalized = cell.text.lower().strip()
    for keyword, property_type in PROPERTY_TYPE_KEYWORDS:
        if keyword in normalized:
            return property_type
    return cell.raw


def star_rating_to_class(cell: CellValue) -> Any:
    """'3 Star' -> 'Class A', '2 Star' -> 'Class B', '1 Star' -> 'Class C'"""
    if cell.is_blank:
        return None
    match = _STAR_RATING.search(cell.text)
    if match:
        stars = int(match.group(1))
        if stars >= 3:
            return 'Class A'
        if stars == 2:
            return 'Class B'
        if stars == 1:
            return 'Class C'
    return cell.raw


def parse_flag(cell: CellValue) -> bool:
    """yes/true/1/y (any case) -> True, anything else -> False"""
    if cell.kind is CellKind.BOOLEAN:
        return cell.raw
    if cell.kind is CellKind.NUMBER:
        return cell.raw == 1
    if cell.is_blank:
        return False
    return cell.text.strip().lower() in TRUTHY_TOKENS


def parse_presence(cell: CellValue) -> bool:
    """Any value other than blank, 'none' or '0' -> True

    Used where the column lists names (e.g. rail lines) rather than yes/no.
    """
    if cell.kind is CellKind.BOOLEAN:
        return cell.raw
    if cell.kind is CellKind.NUMBER:
        return cell.raw != 0
    if cell.is_blank:
        return False
    return cell.text.strip().lower() not in _FALSY_PRESENCE_TOKENS


def extract_crexi_id(cell: CellValue) -> Any:
    """https://www.crexi.com/properties/123456 -> '123456'; other values kept as-is"""
    if cell.is_blank:
        return None
    match = _CREXI_PROPERTY_URL.search(cell.text)
    return match.group(1) if match else cell.raw


def normalize_state(cell: CellValue) -> Optional[str]:
    """Two-letter codes are upper-cased, full names looked up, anything else truncated"""
    if cell.is_blank:
        return None
    trimmed = cell.text.strip().upper()
    if len(trimmed) == 2:
        return trimmed
    return STATE_CODES.get(trimmed, trimmed[:2])


def parse_date(cell: CellValue) -> Optional[str]:
    """Normalize a date to YYYY-MM-DD, dropping any time of day

    ISO 8601 timestamps (including UTC offsets) are read first; anything else
    goes through DATE_FORMATS in order.
    """
    if cell.kind is CellKind.DATE:
        value = cell.raw
        return (value.date() if isinstance(value, datetime) else value).isoformat()
    if cell.kind is not CellKind.TEXT or cell.is_blank:
        return None

    value = cell.text.strip()
    if value.endswith('Z'):
        value = value[:-1]

    try:
        return datetime.fromisoformat(value).date().isoformat()
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date().isoformat()
        except ValueError:
            continue
    return None


# ----------------------------------------------------------------------------
# Registry
# ----------------------------------------------------------------------------

FIELD_TRANSFORMS = (
    FieldRegistry('field transforms')
    .register(parse_currency,
              P.IMPROVEMENT_VALUE, P.LAND_VALUE, P.TOTAL_PARCEL_VALUE, P.ANNUAL_TAX_BILL,
              T.SALE_PRICE, T.LOAN_AMOUNT, T.NOI, T.PRICE_PER_SF, T.PRICE_PER_ACRE)
    .register(parse_square_feet, P.BUILDING_SIZE, P.LAND_AREA_SF)
    .register(parse_acres, P.LOT_SIZE_ACRES)
    .register(parse_integer,
              P.YEAR_BUILT, P.YEAR_RENOVATED, P.NUMBER_OF_UNITS, P.NUMBER_OF_FLOORS,
              P.NUMBER_OF_BUILDINGS, P.NUMBER_OF_ADDRESSES, P.DAYS_ON_MARKET,
              P.DOCK_DOORS, P.GRADE_DOORS, P.PARKING_SPACES)
    .register(parse_decimal,
              P.LATITUDE, P.LONGITUDE, P.CLEAR_HEIGHT_FT, P.PARKING_RATIO, P.RENT_PER_SF)
    .register(parse_percentage,
              P.PERCENT_LEASED, P.VACANCY_PERCENT,
              T.CAP_RATE, T.ASKING_CAP_RATE, T.INTEREST_RATE)
    .register(normalize_property_type, P.PROPERTY_TYPE)
    .register(star_rating_to_class, P.BUILDING_CLASS)
    .register(parse_flag, P.OPPORTUNITY_ZONE, P.REO_SALE_FLAG)
    .register(parse_presence, P.RAIL_SERVED)
    .register(extract_crexi_id, P.CREXI_ID)
    .register(normalize_state, P.STATE)
    .register(parse_date,
              P.USPS_VACANCY_DATE, P.PFC_RECORDING_DATE,
              T.TRANSACTION_DATE, T.LEASE_SIGNED_DATE, T.LEASE_COMMENCEMENT,
              T.LEASE_EXPIRATION_DATE, T.MATURITY_DATE)
    .register(passthrough,
              # Text kept verbatim
              P.ADDRESS, P.CITY, P.ZIP, P.COUNTY, P.PROPERTY_NAME, P.BUILDING_PARK,
              P.COSTAR_ID, P.APN, P.UNIT, P.PROPERTY_SUBTYPE, P.BUILDING_STATUS, P.ZONING,
              P.SUBMARKET, P.MARKET, P.CROSS_STREET, P.TYPICAL_FLOOR_SIZE,
              P.MONTH_BUILT, P.MONTH_RENOVATED, P.CONSTRUCTION_MATERIAL,
              P.COLUMN_SPACING, P.SPRINKLER_TYPE, P.NUMBER_OF_CRANES, P.POWER,
              P.OFFICE_SPACE, P.NUMBER_OF_ELEVATORS, P.ANCHOR_TENANT, P.ANCHOR_GLA,
              P.NUMBER_OF_BEDS, P.AVG_UNIT_SF, P.AFFORDABLE_TYPE,
              P.HOTEL_CLASS, P.HOTEL_GRADE, P.HOTEL_OPERATOR, P.ROOMS, P.BRAND,
              P.DATA_CENTER_TYPE, P.CAPACITY_TOTAL_KW,
              P.TOTAL_VACANT_AVAILABLE, P.DIRECT_AVAILABLE_SPACE, P.SUBLET_AVAILABLE_SPACE,
              P.AVG_WEIGHTED_RENT, P.OPS_EXPENSE, P.OPS_EXPENSE_PER_SF,
              P.TAXES_TOTAL, P.TAXES_PER_SF, P.TAX_YEAR, P.PARCEL_VALUE_TYPE,
              P.OWNER_NAME, P.OWNER_CONTACT, P.OWNER_PHONE, P.OWNER_ADDRESS,
              P.OWNER_UNIT, P.OWNER_CITY, P.OWNER_STATE, P.OWNER_ZIP, P.OWNER_CARE_OF,
              P.PARENT_COMPANY, P.FUND_NAME,
              P.PROPERTY_MANAGER_NAME, P.PROPERTY_MANAGER_PHONE,
              P.LEASING_COMPANY_NAME, P.LEASING_COMPANY_CONTACT, P.LEASING_COMPANY_PHONE,
              P.DEVELOPER_NAME, P.ARCHITECT_NAME,
              P.PARCEL_NUMBER_MIN, P.PARCEL_NUMBER_MAX,
              P.FLOOD_RISK, P.FLOOD_ZONE, P.WATER, P.SEWER, P.GAS,
              P.ENERGY_STAR, P.LEED_CERTIFIED, P.AMENITIES, P.FEATURES,
              P.USPS_VACANCY, P.PFC_INDICATOR, P.PFC_DOCUMENT_TYPE, P.TRANSACTION_EVENT_TYPE,
              T.FOR_SALE_STATUS, T.BUYER_NAME, T.SELLER_COMPANY, T.SELLER_CONTACT,
              T.LEASE_RATE, T.LEASE_TYPE, T.LEASE_TERM, T.LEASE_TERM_REMAINING,
              T.RENT_BUMPS, T.LEASE_OPTIONS, T.TENANT_NAME, T.LENDER, T.LOAN_TYPE)
    .freeze()
)


def get_transform(field: str) -> Transform:
    """Transform registered for ``field``; unknown fields pass through"""
    return FIELD_TRANSFORMS.get(getattr(field, 'value', field), passthrough)


def transform_value(field: str, raw: Any) -> Any:
    """Normalize one raw cell for a canonical field"""
    return get_transform(field)(CellValue.from_raw(raw))
