"""
Field Validators - Post-transform acceptance rules

Rules only ever see non-null transformed values. A failing rule makes the
row transformer null the field and record a diagnostic; the row itself is
always kept.

FIELD_VALIDATORS has an entry for every canonical field. None means the
field is deliberately unvalidated. The cap rate rule is registered for
standalone checks only: the row pipeline never validates transaction values.
"""

import math
import re
from decimal import Decimal
from typing import Any, Callable, Optional

from config import get_config
from services.enums import PropertyField as P, TransactionField as T
from services.registry import FieldRegistry

Validator = Callable[[Any], bool]

_config = get_config()

YEAR_BUILT_MIN = _config.YEAR_BUILT_MIN
YEAR_BUILT_MAX = _config.YEAR_BUILT_MAX

# Location Type values that end up in address columns
PLACEHOLDER_ADDRESSES = frozenset(['suburban', 'urban', 'cbd', 'rural'])

_ZIP_CODE = re.compile(r'^\d{5}(-?\d{4})?$')


def is_number(value: Any) -> bool:
    """Real numbers only; booleans and NaN are rejected"""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    return True


def number_between(low: float, high: float) -> Validator:
    """Build an inclusive numeric range rule"""
    def rule(value: Any) -> bool:
        return is_number(value) and low <= value <= high
    rule.__name__ = f'number_between_{low}_{high}'
    return rule


def is_positive_number(value: Any) -> bool:
    return is_number(value) and value > 0


def is_valid_address(value: Any) -> bool:
    """Street address: more than 3 characters and not a location-type word"""
    if not isinstance(value, str):
        return False
    stripped = value.strip()
    return len(stripped) > 3 and stripped.lower() not in PLACEHOLDER_ADDRESSES


def is_valid_city(value: Any) -> bool:
    return isinstance(value, str) and len(value.strip()) > 1


def is_valid_state(value: Any) -> bool:
    return isinstance(value, str) and len(value.strip()) == 2


def is_valid_zip(value: Any) -> bool:
    """Blank, 5-digit or ZIP+4 (with or without the dash)"""
    if isinstance(value, bool):
        return False
    text = str(value).strip()
    if not text:
        return True
    return bool(_ZIP_CODE.match(text))


FIELD_VALIDATORS = (
    FieldRegistry('field validators')
    .register(is_valid_address, P.ADDRESS)
    .register(is_valid_city, P.CITY)
    .register(is_valid_state, P.STATE)
    .register(is_valid_zip, P.ZIP)
    .register(is_positive_number, P.BUILDING_SIZE, P.LAND_AREA_SF, P.LOT_SIZE_ACRES)
    .register(number_between(YEAR_BUILT_MIN, YEAR_BUILT_MAX), P.YEAR_BUILT)
    .register(number_between(0, 100), P.PERCENT_LEASED, P.VACANCY_PERCENT)
    .register(number_between(-90, 90), P.LATITUDE)
    .register(number_between(-180, 180), P.LONGITUDE)
    .register(None,
              P.COUNTY, P.PROPERTY_NAME, P.BUILDING_PARK, P.COSTAR_ID, P.CREXI_ID,
              P.APN, P.UNIT, P.PROPERTY_TYPE, P.PROPERTY_SUBTYPE, P.BUILDING_CLASS,
              P.BUILDING_STATUS, P.ZONING, P.OPPORTUNITY_ZONE,
              P.SUBMARKET, P.MARKET, P.CROSS_STREET,
              P.TYPICAL_FLOOR_SIZE, P.NUMBER_OF_FLOORS, P.NUMBER_OF_UNITS,
              P.NUMBER_OF_BUILDINGS, P.NUMBER_OF_ADDRESSES,
              P.MONTH_BUILT, P.YEAR_RENOVATED, P.MONTH_RENOVATED, P.CONSTRUCTION_MATERIAL,
              P.CLEAR_HEIGHT_FT, P.DOCK_DOORS, P.GRADE_DOORS, P.RAIL_SERVED,
              P.COLUMN_SPACING, P.SPRINKLER_TYPE, P.NUMBER_OF_CRANES, P.POWER,
              P.OFFICE_SPACE, P.NUMBER_OF_ELEVATORS, P.ANCHOR_TENANT, P.ANCHOR_GLA,
              P.NUMBER_OF_BEDS, P.AVG_UNIT_SF, P.AFFORDABLE_TYPE,
              P.HOTEL_CLASS, P.HOTEL_GRADE, P.HOTEL_OPERATOR, P.ROOMS, P.BRAND,
              P.DATA_CENTER_TYPE, P.CAPACITY_TOTAL_KW,
              P.PARKING_SPACES, P.PARKING_RATIO,
              P.TOTAL_VACANT_AVAILABLE, P.DIRECT_AVAILABLE_SPACE, P.SUBLET_AVAILABLE_SPACE,
              P.DAYS_ON_MARKET, P.RENT_PER_SF, P.AVG_WEIGHTED_RENT,
              P.OPS_EXPENSE, P.OPS_EXPENSE_PER_SF, P.TAXES_TOTAL, P.TAXES_PER_SF,
              P.TAX_YEAR, P.PARCEL_VALUE_TYPE, P.IMPROVEMENT_VALUE, P.LAND_VALUE,
              P.TOTAL_PARCEL_VALUE, P.ANNUAL_TAX_BILL,
              P.OWNER_NAME, P.OWNER_CONTACT, P.OWNER_PHONE, P.OWNER_ADDRESS,
              P.OWNER_UNIT, P.OWNER_CITY, P.OWNER_STATE, P.OWNER_ZIP, P.OWNER_CARE_OF,
              P.PARENT_COMPANY, P.FUND_NAME,
              P.PROPERTY_MANAGER_NAME, P.PROPERTY_MANAGER_PHONE,
              P.LEASING_COMPANY_NAME, P.LEASING_COMPANY_CONTACT, P.LEASING_COMPANY_PHONE,
              P.DEVELOPER_NAME, P.ARCHITECT_NAME,
              P.PARCEL_NUMBER_MIN, P.PARCEL_NUMBER_MAX,
              P.FLOOD_RISK, P.FLOOD_ZONE, P.WATER, P.SEWER, P.GAS,
              P.ENERGY_STAR, P.LEED_CERTIFIED, P.AMENITIES, P.FEATURES,
              P.USPS_VACANCY, P.USPS_VACANCY_DATE,
              P.PFC_RECORDING_DATE, P.PFC_INDICATOR, P.PFC_DOCUMENT_TYPE,
              P.REO_SALE_FLAG, P.TRANSACTION_EVENT_TYPE)
    .register(number_between(0, 50), T.CAP_RATE)
    .register(None, *(field for field in T if field is not T.CAP_RATE))
    .freeze()
)


def get_validator(field: str) -> Optional[Validator]:
    """Validator registered for ``field``, or None"""
    return FIELD_VALIDATORS.get(getattr(field, 'value', field))


def validate(field: str, value: Any) -> bool:
    """Check a transformed value; null values and unvalidated fields always pass"""
    if value is None:
        return True
    rule = get_validator(field)
    if rule is None:
        return True
    return bool(rule(value))
