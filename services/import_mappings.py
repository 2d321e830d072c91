"""
Import Mappings - Column alias configuration for CoStar and Crexi exports

Each table is an ordered sequence of (canonical field, aliases) pairs.
Both orders are part of the contract:
- field order decides which canonical field claims a header first
- alias order decides which of several present headers a field binds to

Sources:
  - CoStar Analytics Export (200+ fields)
  - Crexi Export (70+ fields)
"""

from typing import Tuple

from services.enums import ImportSource, PropertyField as P, TransactionField as T

AliasTable = Tuple[Tuple[str, Tuple[str, ...]], ...]


# ============================================================================
# SOURCE DETECTION
# ============================================================================

COSTAR_DETECTION_FIELDS = (
    'Star Rating',
    'PropertyID',
    'Submarket Name',
    'Market Name',
    'Building Park',
    'Rentable Building Area',
    'LEED Certified',
    'Submarket Cluster',
)

CREXI_DETECTION_FIELDS = (
    'Property Link',
    'Crexi',
    'USPS Vacancy',
    'PFC Recording Date',
    'PFC Indicator',
    'REO Sale Flag',
    'Transaction Event Type',
    'Mailing Address Care Of',
)

# A single hit on this column is enough to call a file Crexi
CREXI_UNIQUE_MARKER = 'Property Link'

# Fingerprint hits needed before a provider wins the vote
DETECTION_THRESHOLD = 2


# ============================================================================
# CREXI MAPPINGS
# ============================================================================

CREXI_TO_MASTER_PROPERTIES: AliasTable = (
    # Required fields
    (P.ADDRESS, ('Address',)),
    (P.CITY, ('City',)),
    (P.STATE, ('State',)),

    # Core identification
    (P.ZIP, ('Zip Code',)),
    (P.COUNTY, ('County',)),
    (P.PROPERTY_NAME, ('Property Name',)),
    (P.CREXI_ID, ('Property Link',)),  # ID extracted from the URL
    (P.APN, ('APN',)),
    (P.UNIT, ('Unit',)),

    # Classification
    (P.PROPERTY_TYPE, ('Property Type',)),
    (P.ZONING, ('Zoning Code',)),
    (P.OPPORTUNITY_ZONE, ('Opportunity Zone',)),

    # Location / geo
    (P.LATITUDE, ('Latitude',)),
    (P.LONGITUDE, ('Longitude',)),

    # Size metrics
    (P.BUILDING_SIZE, ('Building SqFt',)),
    (P.LOT_SIZE_ACRES, ('Lot Size Acres',)),
    (P.LAND_AREA_SF, ('Lot Size SqFt',)),
    (P.NUMBER_OF_UNITS, ('Number of Units',)),
    (P.NUMBER_OF_FLOORS, ('Number of Stories',)),
    (P.NUMBER_OF_BUILDINGS, ('Building Count',)),
    (P.NUMBER_OF_ADDRESSES, ('Number of Addresses',)),

    # Building details
    (P.YEAR_BUILT, ('Year Built',)),

    # Leasing status
    (P.PERCENT_LEASED, ('Occupancy',)),  # Crexi occupancy == percent leased
    (P.DAYS_ON_MARKET, ('Days on Market',)),

    # Utilities
    (P.WATER, ('Water Code',)),
    (P.SEWER, ('Sewer Code',)),

    # Vacancy
    (P.USPS_VACANCY, ('USPS Vacancy',)),
    (P.USPS_VACANCY_DATE, ('USPS Vacancy Date',)),

    # Tax / valuation
    (P.PARCEL_VALUE_TYPE, ('Parcel Value Type',)),
    (P.IMPROVEMENT_VALUE, ('Improvement Value',)),
    (P.LAND_VALUE, ('Land Value',)),
    (P.TOTAL_PARCEL_VALUE, ('Total Parcel Value',)),
    (P.TAX_YEAR, ('Tax Year',)),
    (P.ANNUAL_TAX_BILL, ('Annual Tax Bill',)),

    # Owner information
    (P.OWNER_NAME, ('Owner Name',)),
    (P.OWNER_ADDRESS, ('Mailing Address',)),
    (P.OWNER_UNIT, ('Mailing Address Unit',)),
    (P.OWNER_CITY, ('Mailing Address City',)),
    (P.OWNER_STATE, ('Mailing Address State',)),
    (P.OWNER_ZIP, ('Mailing Address Zip Code',)),
    (P.OWNER_CARE_OF, ('Mailing Address Care Of',)),

    # Foreclosure / distress
    (P.PFC_RECORDING_DATE, ('PFC Recording Date',)),
    (P.PFC_INDICATOR, ('PFC Indicator',)),
    (P.PFC_DOCUMENT_TYPE, ('PFC Document Type',)),
    (P.REO_SALE_FLAG, ('REO Sale Flag',)),
    (P.TRANSACTION_EVENT_TYPE, ('Transaction Event Type',)),
)

CREXI_TO_TRANSACTIONS: AliasTable = (
    # Sale information
    (T.SALE_PRICE, ('Sold Price',)),
    (T.TRANSACTION_DATE, ('Sale Date',)),
    (T.PRICE_PER_SF, ('Sold Price/ SqFt',)),
    (T.PRICE_PER_ACRE, ('Sold Price/ Acre',)),
    (T.ASKING_CAP_RATE, ('Asking Cap Rate',)),
    (T.CAP_RATE, ('Closing Cap Rate',)),
    (T.NOI, ('Closing NOI',)),

    # Lease information
    (T.LEASE_SIGNED_DATE, ('Lease Signed',)),
    (T.LEASE_RATE, ('Lease Rate',)),
    (T.LEASE_TYPE, ('Lease Type',)),
    (T.LEASE_COMMENCEMENT, ('Lease Commencement',)),
    (T.LEASE_TERM, ('Lease Term',)),
    (T.LEASE_TERM_REMAINING, ('Lease Term Remaining',)),
    (T.LEASE_EXPIRATION_DATE, ('Lease Expiration Date',)),
    (T.RENT_BUMPS, ('Rent Bumps',)),
    (T.LEASE_OPTIONS, ('Lease Options',)),
    (T.TENANT_NAME, ('Tenant(s)',)),

    # Financing
    (T.LENDER, ('Lender',)),
    (T.LOAN_AMOUNT, ('Loan Amount',)),
    (T.LOAN_TYPE, ('Loan Type',)),
    (T.INTEREST_RATE, ('Interest Rate',)),
    (T.MATURITY_DATE, ('Financing Maturity Date',)),
)


# ============================================================================
# COSTAR MAPPINGS
# ============================================================================

COSTAR_TO_MASTER_PROPERTIES: AliasTable = (
    # Required fields
    (P.ADDRESS, ('Property Address', 'Property Location')),
    (P.CITY, ('City', 'Property City')),
    (P.STATE, ('State', 'Property State')),

    # Core identification
    (P.ZIP, ('Zip', 'Property Zip', 'Property Zip Code')),
    (P.COUNTY, ('County Name', 'Property County')),
    (P.PROPERTY_NAME, ('Property Name', 'Building Name')),
    (P.BUILDING_PARK, ('Building Park',)),
    (P.COSTAR_ID, ('PropertyID', 'CoStar ID')),

    # Classification
    (P.PROPERTY_TYPE, ('Property Type',)),
    (P.PROPERTY_SUBTYPE, ('Secondary Type',)),
    (P.BUILDING_CLASS, ('Building Class', 'Star Rating')),
    (P.BUILDING_STATUS, ('Building Status', 'Constr Status')),
    (P.ZONING, ('Zoning', 'Proposed Land Use')),

    # Location / geo
    (P.LATITUDE, ('Latitude',)),
    (P.LONGITUDE, ('Longitude',)),
    (P.SUBMARKET, ('Submarket Name', 'Submarket Cluster')),
    (P.MARKET, ('Market Name', 'Market Segment')),
    (P.CROSS_STREET, ('Cross Street',)),

    # Size metrics
    (P.BUILDING_SIZE, ('Rentable Building Area', 'Building SF', 'Total Available Space (SF)')),
    (P.LAND_AREA_SF, ('Land Area (SF)',)),
    (P.LOT_SIZE_ACRES, ('Land Area (AC)',)),
    (P.TYPICAL_FLOOR_SIZE, ('Typical Floor Size',)),
    (P.NUMBER_OF_FLOORS, ('Number Of Stories', 'Number of Floors')),
    (P.NUMBER_OF_UNITS, ('Number Of Units',)),
    (P.NUMBER_OF_BUILDINGS, ('Total Buildings',)),

    # Building details
    (P.YEAR_BUILT, ('Year Built',)),
    (P.MONTH_BUILT, ('Month Built',)),
    (P.YEAR_RENOVATED, ('Year Renovated',)),
    (P.MONTH_RENOVATED, ('Month Renovated',)),
    (P.CONSTRUCTION_MATERIAL, ('Construction Material',)),

    # Industrial specific
    (P.CLEAR_HEIGHT_FT, ('Ceiling Ht', 'Ceiling Height', 'Clear Height')),
    (P.DOCK_DOORS, ('Number Of Loading Docks', 'Loading Docks')),
    (P.GRADE_DOORS, ('Drive Ins', 'Grade Level Doors')),
    (P.RAIL_SERVED, ('Rail Lines',)),
    (P.COLUMN_SPACING, ('Column Spacing',)),
    (P.SPRINKLER_TYPE, ('Sprinklers',)),
    (P.NUMBER_OF_CRANES, ('Number Of Cranes',)),
    (P.POWER, ('Power',)),

    # Office specific
    (P.OFFICE_SPACE, ('Office Space',)),
    (P.NUMBER_OF_ELEVATORS, ('Number Of Elevators',)),

    # Retail specific
    (P.ANCHOR_TENANT, ('Anchor Tenants',)),
    (P.ANCHOR_GLA, ('Anchor GLA',)),

    # Multifamily specific
    (P.NUMBER_OF_BEDS, ('Number of Beds',)),
    (P.AVG_UNIT_SF, ('Avg Unit SF',)),
    (P.AFFORDABLE_TYPE, ('Affordable Type',)),

    # Hotel specific
    (P.HOTEL_CLASS, ('Hotel Class',)),
    (P.HOTEL_GRADE, ('Hotel Grade',)),
    (P.HOTEL_OPERATOR, ('Hotel Operator',)),
    (P.ROOMS, ('Rooms',)),
    (P.BRAND, ('Brand', 'Proposed Brand')),

    # Data center specific
    (P.DATA_CENTER_TYPE, ('Data Center Type',)),
    (P.CAPACITY_TOTAL_KW, ('Capacity - Total Utility kW',)),

    # Parking
    (P.PARKING_SPACES, ('Number Of Parking Spaces',)),
    (P.PARKING_RATIO, ('Parking Ratio',)),

    # Leasing status
    (P.PERCENT_LEASED, ('Percent Leased',)),
    (P.VACANCY_PERCENT, ('Vacancy %',)),
    (P.TOTAL_VACANT_AVAILABLE, ('Total Vacant Available',)),
    (P.DIRECT_AVAILABLE_SPACE, ('Direct Available Space',)),
    (P.SUBLET_AVAILABLE_SPACE, ('Sublet Available Space',)),
    (P.DAYS_ON_MARKET, ('Days On Market',)),

    # Rent metrics
    (P.RENT_PER_SF, ('Rent/SF', 'Avg Asking/SF', 'Avg Effective/SF')),
    (P.AVG_WEIGHTED_RENT, ('Average Weighted Rent',)),

    # Expenses & financials
    (P.OPS_EXPENSE, ('Ops Expense',)),
    (P.OPS_EXPENSE_PER_SF, ('Ops Expense Per SF',)),
    (P.TAXES_TOTAL, ('Taxes Total',)),
    (P.TAXES_PER_SF, ('Taxes Per SF',)),
    (P.TAX_YEAR, ('Tax Year',)),

    # Owner information
    (P.OWNER_NAME, ('Owner Name', 'True Owner Name', 'Recorded Owner Name')),
    (P.OWNER_CONTACT, ('Owner Contact', 'True Owner Contact', 'Recorded Owner Contact')),
    (P.OWNER_PHONE, ('Owner Phone', 'True Owner Phone', 'Recorded Owner Phone')),
    (P.OWNER_ADDRESS, ('Owner Address', 'True Owner Address', 'Recorded Owner Address')),
    (P.PARENT_COMPANY, ('Parent Company',)),
    (P.FUND_NAME, ('Fund Name',)),

    # Property manager
    (P.PROPERTY_MANAGER_NAME, ('Property Manager Name',)),
    (P.PROPERTY_MANAGER_PHONE, ('Property Manager Phone',)),

    # Leasing company
    (P.LEASING_COMPANY_NAME, ('Leasing Company Name',)),
    (P.LEASING_COMPANY_CONTACT, ('Leasing Company Contact',)),
    (P.LEASING_COMPANY_PHONE, ('Leasing Company Phone',)),

    # Developer / architect
    (P.DEVELOPER_NAME, ('Developer Name',)),
    (P.ARCHITECT_NAME, ('Architect Name',)),

    # Parcel / legal
    (P.PARCEL_NUMBER_MIN, ('Parcel Number 1(Min)',)),
    (P.PARCEL_NUMBER_MAX, ('Parcel Number 2(Max)',)),

    # Flood & environmental
    (P.FLOOD_RISK, ('Flood Risk', 'Flood Risk Area')),
    (P.FLOOD_ZONE, ('Flood Zone', 'Fema Flood Zone')),

    # Utilities
    (P.SEWER, ('Sewer',)),
    (P.WATER, ('Water',)),
    (P.GAS, ('Gas',)),

    # Green / sustainability
    (P.ENERGY_STAR, ('Energy Star',)),
    (P.LEED_CERTIFIED, ('LEED Certified',)),

    # Amenities
    (P.AMENITIES, ('Amenities',)),
    (P.FEATURES, ('Features',)),
)

COSTAR_TO_TRANSACTIONS: AliasTable = (
    (T.SALE_PRICE, ('Last Sale Price', 'For Sale Price')),
    (T.TRANSACTION_DATE, ('Last Sale Date',)),
    (T.PRICE_PER_SF, ('For Sale Price Per SF',)),
    (T.CAP_RATE, ('Cap Rate',)),
    (T.FOR_SALE_STATUS, ('For Sale Status',)),
    (T.BUYER_NAME, ('True Owner Name', 'Recorded Owner Name')),
    (T.SELLER_COMPANY, ('Sale Company Name', 'Sales Company')),
    (T.SELLER_CONTACT, ('Sale Company Contact', 'Sales Contact')),
)


# ============================================================================
# FIELDS TO SKIP (never mapped)
# ============================================================================

LOCATION_TYPE_COLUMN = 'Location Type'

SKIP_FIELDS = (
    # CoStar - Location Type is NOT the address!
    LOCATION_TYPE_COLUMN,

    # Geographic aggregations
    'Continent',
    'Subcontinent',
    'Country',

    # CoStar bedroom-specific rent data (too granular)
    'One Bedroom Asking Rent/Bed',
    'One Bedroom Asking Rent/SF',
    'Two Bedroom Asking Rent/Bed',
    'Two Bedroom Asking Rent/SF',
    'Three Bedroom Asking Rent/Bed',
    'Three Bedroom Asking Rent/SF',
    'Four Bedroom Asking Rent/Bed',
    'Four Bedroom Asking Rent/SF',
    'Studio Asking Rent/Bed',
    'Studio Asking Rent/SF',
)

REQUIRED_FIELDS = (P.ADDRESS, P.CITY, P.STATE)


def normalize_header(header) -> str:
    """Comparison key for a raw column name"""
    if not isinstance(header, str):
        return ''
    return header.strip().lower()


def alias_tables_for(source: ImportSource) -> Tuple[AliasTable, AliasTable]:
    """Return (property table, transaction table) for a source

    Only Crexi has dedicated tables. CoStar, LoopNet and manual files all
    resolve against the CoStar tables.
    """
    if source == ImportSource.CREXI:
        return CREXI_TO_MASTER_PROPERTIES, CREXI_TO_TRANSACTIONS
    return COSTAR_TO_MASTER_PROPERTIES, COSTAR_TO_TRANSACTIONS
