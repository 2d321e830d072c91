"""
Import mapping enums
These enums define the provider classifications and the canonical field
vocabulary shared with the storage and display layers
"""

from enum import Enum


class ImportSource(str, Enum):
    """Provider kinds a CSV header set can be classified as"""
    COSTAR = 'costar'
    CREXI = 'crexi'
    LOOPNET = 'loopnet'  # Recognized but never produced by detection
    MANUAL = 'manual'


class PropertyField(str, Enum):
    """Canonical master property fields"""
    # Required
    ADDRESS = 'address'
    CITY = 'city'
    STATE = 'state'

    # Identification
    ZIP = 'zip'
    COUNTY = 'county'
    PROPERTY_NAME = 'property_name'
    BUILDING_PARK = 'building_park'
    COSTAR_ID = 'costar_id'
    CREXI_ID = 'crexi_id'
    APN = 'apn'
    UNIT = 'unit'

    # Classification
    PROPERTY_TYPE = 'property_type'
    PROPERTY_SUBTYPE = 'property_subtype'
    BUILDING_CLASS = 'building_class'
    BUILDING_STATUS = 'building_status'
    ZONING = 'zoning'
    OPPORTUNITY_ZONE = 'opportunity_zone'

    # Geo
    LATITUDE = 'latitude'
    LONGITUDE = 'longitude'
    SUBMARKET = 'submarket'
    MARKET = 'market'
    CROSS_STREET = 'cross_street'

    # Size
    BUILDING_SIZE = 'building_size'
    LAND_AREA_SF = 'land_area_sf'
    LOT_SIZE_ACRES = 'lot_size_acres'
    TYPICAL_FLOOR_SIZE = 'typical_floor_size'
    NUMBER_OF_FLOORS = 'number_of_floors'
    NUMBER_OF_UNITS = 'number_of_units'
    NUMBER_OF_BUILDINGS = 'number_of_buildings'
    NUMBER_OF_ADDRESSES = 'number_of_addresses'

    # Building details
    YEAR_BUILT = 'year_built'
    MONTH_BUILT = 'month_built'
    YEAR_RENOVATED = 'year_renovated'
    MONTH_RENOVATED = 'month_renovated'
    CONSTRUCTION_MATERIAL = 'construction_material'

    # Industrial
    CLEAR_HEIGHT_FT = 'clear_height_ft'
    DOCK_DOORS = 'dock_doors'
    GRADE_DOORS = 'grade_doors'
    RAIL_SERVED = 'rail_served'
    COLUMN_SPACING = 'column_spacing'
    SPRINKLER_TYPE = 'sprinkler_type'
    NUMBER_OF_CRANES = 'number_of_cranes'
    POWER = 'power'

    # Office
    OFFICE_SPACE = 'office_space'
    NUMBER_OF_ELEVATORS = 'number_of_elevators'

    # Retail
    ANCHOR_TENANT = 'anchor_tenant'
    ANCHOR_GLA = 'anchor_gla'

    # Multifamily
    NUMBER_OF_BEDS = 'number_of_beds'
    AVG_UNIT_SF = 'avg_unit_sf'
    AFFORDABLE_TYPE = 'affordable_type'

    # Hotel
    HOTEL_CLASS = 'hotel_class'
    HOTEL_GRADE = 'hotel_grade'
    HOTEL_OPERATOR = 'hotel_operator'
    ROOMS = 'rooms'
    BRAND = 'brand'

    # Data center
    DATA_CENTER_TYPE = 'data_center_type'
    CAPACITY_TOTAL_KW = 'capacity_total_kw'

    # Parking
    PARKING_SPACES = 'parking_spaces'
    PARKING_RATIO = 'parking_ratio'

    # Leasing status
    PERCENT_LEASED = 'percent_leased'
    VACANCY_PERCENT = 'vacancy_percent'
    TOTAL_VACANT_AVAILABLE = 'total_vacant_available'
    DIRECT_AVAILABLE_SPACE = 'direct_available_space'
    SUBLET_AVAILABLE_SPACE = 'sublet_available_space'
    DAYS_ON_MARKET = 'days_on_market'

    # Rent
    RENT_PER_SF = 'rent_per_sf'
    AVG_WEIGHTED_RENT = 'avg_weighted_rent'

    # Expenses, tax and valuation
    OPS_EXPENSE = 'ops_expense'
    OPS_EXPENSE_PER_SF = 'ops_expense_per_sf'
    TAXES_TOTAL = 'taxes_total'
    TAXES_PER_SF = 'taxes_per_sf'
    TAX_YEAR = 'tax_year'
    PARCEL_VALUE_TYPE = 'parcel_value_type'
    IMPROVEMENT_VALUE = 'improvement_value'
    LAND_VALUE = 'land_value'
    TOTAL_PARCEL_VALUE = 'total_parcel_value'
    ANNUAL_TAX_BILL = 'annual_tax_bill'

    # Owner / contacts
    OWNER_NAME = 'owner_name'
    OWNER_CONTACT = 'owner_contact'
    OWNER_PHONE = 'owner_phone'
    OWNER_ADDRESS = 'owner_address'
    OWNER_UNIT = 'owner_unit'
    OWNER_CITY = 'owner_city'
    OWNER_STATE = 'owner_state'
    OWNER_ZIP = 'owner_zip'
    OWNER_CARE_OF = 'owner_care_of'
    PARENT_COMPANY = 'parent_company'
    FUND_NAME = 'fund_name'
    PROPERTY_MANAGER_NAME = 'property_manager_name'
    PROPERTY_MANAGER_PHONE = 'property_manager_phone'
    LEASING_COMPANY_NAME = 'leasing_company_name'
    LEASING_COMPANY_CONTACT = 'leasing_company_contact'
    LEASING_COMPANY_PHONE = 'leasing_company_phone'
    DEVELOPER_NAME = 'developer_name'
    ARCHITECT_NAME = 'architect_name'

    # Parcel / legal
    PARCEL_NUMBER_MIN = 'parcel_number_min'
    PARCEL_NUMBER_MAX = 'parcel_number_max'

    # Flood, utilities, green, amenities
    FLOOD_RISK = 'flood_risk'
    FLOOD_ZONE = 'flood_zone'
    WATER = 'water'
    SEWER = 'sewer'
    GAS = 'gas'
    ENERGY_STAR = 'energy_star'
    LEED_CERTIFIED = 'leed_certified'
    AMENITIES = 'amenities'
    FEATURES = 'features'

    # Vacancy
    USPS_VACANCY = 'usps_vacancy'
    USPS_VACANCY_DATE = 'usps_vacancy_date'

    # Distress / foreclosure
    PFC_RECORDING_DATE = 'pfc_recording_date'
    PFC_INDICATOR = 'pfc_indicator'
    PFC_DOCUMENT_TYPE = 'pfc_document_type'
    REO_SALE_FLAG = 'reo_sale_flag'
    TRANSACTION_EVENT_TYPE = 'transaction_event_type'


class TransactionField(str, Enum):
    """Canonical transaction fields covering sale, lease and financing terms"""
    # Sale
    SALE_PRICE = 'sale_price'
    TRANSACTION_DATE = 'transaction_date'
    PRICE_PER_SF = 'price_per_sf'
    PRICE_PER_ACRE = 'price_per_acre'
    ASKING_CAP_RATE = 'asking_cap_rate'
    CAP_RATE = 'cap_rate'
    NOI = 'noi'
    FOR_SALE_STATUS = 'for_sale_status'
    BUYER_NAME = 'buyer_name'
    SELLER_COMPANY = 'seller_company'
    SELLER_CONTACT = 'seller_contact'

    # Lease
    LEASE_SIGNED_DATE = 'lease_signed_date'
    LEASE_RATE = 'lease_rate'
    LEASE_TYPE = 'lease_type'
    LEASE_COMMENCEMENT = 'lease_commencement'
    LEASE_TERM = 'lease_term'
    LEASE_TERM_REMAINING = 'lease_term_remaining'
    LEASE_EXPIRATION_DATE = 'lease_expiration_date'
    RENT_BUMPS = 'rent_bumps'
    LEASE_OPTIONS = 'lease_options'
    TENANT_NAME = 'tenant_name'

    # Financing
    LENDER = 'lender'
    LOAN_AMOUNT = 'loan_amount'
    LOAN_TYPE = 'loan_type'
    INTEREST_RATE = 'interest_rate'
    MATURITY_DATE = 'maturity_date'


PROPERTY_FIELD_NAMES = frozenset(field.value for field in PropertyField)
TRANSACTION_FIELD_NAMES = frozenset(field.value for field in TransactionField)

# Every canonical field, property side first
CANONICAL_FIELDS = tuple(PropertyField) + tuple(TransactionField)
CANONICAL_FIELD_NAMES = PROPERTY_FIELD_NAMES | TRANSACTION_FIELD_NAMES
