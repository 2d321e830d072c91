"""
Tests for field transforms - per-field normalization of raw CSV cells
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from services.common.cell_value import CellValue
from services.enums import CANONICAL_FIELD_NAMES
from services.field_transforms import (
    FIELD_TRANSFORMS,
    STATE_CODES,
    get_transform,
    passthrough,
    round_half_up,
    transform_value,
)


class TestCurrencyAndNumbers:
    """Numeric transforms never turn junk into zero"""

    def test_sale_price_examples(self):
        assert transform_value('sale_price', '$1,250,000') == 1250000
        assert transform_value('sale_price', '') is None
        assert transform_value('sale_price', 750000) == 750000

    @pytest.mark.parametrize('raw', [None, '', '   ', 'N/A', 'call for price', True, False])
    def test_unparseable_currency_is_none(self, raw):
        assert transform_value('sale_price', raw) is None

    def test_currency_keeps_cents(self):
        assert transform_value('loan_amount', '$1,234.56') == pytest.approx(1234.56)

    def test_leading_numeric_prefix_is_used(self):
        assert transform_value('noi', '$120,750 (est.)') == 120750

    def test_square_feet_strips_units_and_rounds(self):
        assert transform_value('building_size', '45,000 SF') == 45000
        assert transform_value('building_size', '12,500.5 sf') == 12501
        assert transform_value('land_area_sf', '10,890') == 10890

    def test_acres_strips_units(self):
        assert transform_value('lot_size_acres', '3.2 AC') == pytest.approx(3.2)
        assert transform_value('lot_size_acres', '1,250.75ac') == pytest.approx(1250.75)

    def test_integer_fields_round_half_up(self):
        assert transform_value('year_built', '1998') == 1998
        assert transform_value('number_of_units', '2.5') == 3
        assert transform_value('number_of_floors', 3.5) == 4
        assert transform_value('days_on_market', '1,204') == 1204

    def test_round_half_up_differs_from_bankers_rounding(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1
        assert round_half_up(-0.5) == 0

    def test_numeric_input_passes_through(self):
        assert transform_value('latitude', 27.95) == 27.95
        assert transform_value('sale_price', Decimal('99.5')) == Decimal('99.5')

    def test_non_finite_numbers_are_none(self):
        assert transform_value('sale_price', float('inf')) is None
        assert transform_value('year_built', float('nan')) is None

    def test_decimal_fields_strip_symbols(self):
        assert transform_value('rent_per_sf', '$18.50') == pytest.approx(18.5)
        assert transform_value('clear_height_ft', "32'") == 32


class TestPercentages:

    @pytest.mark.parametrize('field', ['percent_leased', 'vacancy_percent', 'cap_rate', 'asking_cap_rate', 'interest_rate'])
    def test_percent_sign_is_stripped(self, field):
        assert transform_value(field, '92.5%') == pytest.approx(92.5)

    def test_numeric_percentage_passes_through(self):
        assert transform_value('cap_rate', 6.25) == 6.25

    def test_blank_percentage_is_none(self):
        assert transform_value('cap_rate', '') is None
        assert transform_value('cap_rate', 'TBD') is None


class TestClassification:

    @pytest.mark.parametrize('raw, expected', [
        ('Industrial', 'industrial'),
        ('Warehouse/Distribution', 'industrial'),
        ('Flex', 'industrial'),
        ('Office', 'office'),
        ('Retail Strip Center', 'retail'),
        ('Shopping Center', 'retail'),
        ('Multifamily', 'multifamily'),
        ('Garden Apartment', 'multifamily'),
        ('Land', 'land'),
        ('Hospitality', 'special_purpose'),
        ('Self Storage', 'special_purpose'),
    ])
    def test_property_type_keywords(self, raw, expected):
        assert transform_value('property_type', raw) == expected

    def test_first_keyword_in_table_order_wins(self):
        # "office" is listed after the industrial keywords
        assert transform_value('property_type', 'Office/Warehouse') == 'industrial'

    def test_unknown_property_type_is_kept(self):
        assert transform_value('property_type', 'Health Care') == 'Health Care'

    def test_blank_property_type_is_none(self):
        assert transform_value('property_type', '') is None
        assert transform_value('property_type', None) is None

    @pytest.mark.parametrize('raw, expected', [
        ('5 Star', 'Class A'),
        ('3 Star', 'Class A'),
        ('2 Star', 'Class B'),
        ('1 Star', 'Class C'),
        ('3star', 'Class A'),
        ('B', 'B'),
        ('0 Star', '0 Star'),
    ])
    def test_star_rating_to_building_class(self, raw, expected):
        assert transform_value('building_class', raw) == expected

    def test_blank_building_class_is_none(self):
        assert transform_value('building_class', '') is None
        assert transform_value('building_class', None) is None


class TestBooleans:

    @pytest.mark.parametrize('raw', ['Yes', 'TRUE', '1', 'y', ' yes ', True, 1])
    def test_truthy_tokens(self, raw):
        assert transform_value('opportunity_zone', raw) is True

    @pytest.mark.parametrize('raw', ['No', 'false', '0', 'n', '', None, 'maybe', False, 0])
    def test_everything_else_is_false(self, raw):
        assert transform_value('reo_sale_flag', raw) is False

    @pytest.mark.parametrize('raw, expected', [
        ('CSX', True),
        ('Norfolk Southern', True),
        ('None', False),
        ('0', False),
        ('', False),
        (None, False),
    ])
    def test_rail_served_is_presence_based(self, raw, expected):
        assert transform_value('rail_served', raw) is expected


class TestIdentifiersAndState:

    def test_crexi_id_is_extracted_from_link(self):
        assert transform_value('crexi_id', 'https://www.crexi.com/properties/512345/florida-retail') == '512345'

    def test_crexi_id_without_link_is_kept(self):
        assert transform_value('crexi_id', 'CX-9') == 'CX-9'

    def test_state_examples(self):
        assert transform_value('state', 'california') == 'CA'
        assert transform_value('state', 'Timbuktu') == 'TI'

    def test_state_codes_are_uppercased(self):
        assert transform_value('state', ' fl ') == 'FL'

    def test_state_table_covers_states_and_dc(self):
        assert len(STATE_CODES) == 51
        assert transform_value('state', 'District of Columbia') == 'DC'
        assert transform_value('state', 'New Hampshire') == 'NH'

    def test_blank_state_is_none(self):
        assert transform_value('state', '') is None


class TestDates:

    @pytest.mark.parametrize('raw', [
        '2021-03-15',
        '3/15/2021',
        '03-15-2021',
        '2021/03/15',
        '3/15/21',
        '2021-03-15T10:30:00',
        '2021-03-15T10:30:00.000Z',
        '2021-03-15 10:30:00',
        '3/15/2021 10:30',
        'March 15, 2021',
        'Mar 15, 2021',
        '15 March 2021',
        'Mar 15 2021',
        '03/15/2021 10:30:00 AM',
        '2021-03-15 00:00:00.000',
        '2021-03-15T10:30:00-05:00',
        '2021-03-15T10:30:00+00:00',
        '2021-03-15T23:30:00-05:00',
    ])
    def test_formats_normalize_to_iso_date(self, raw):
        assert transform_value('transaction_date', raw) == '2021-03-15'

    def test_date_objects_are_accepted(self):
        assert transform_value('transaction_date', date(2021, 3, 15)) == '2021-03-15'
        assert transform_value('maturity_date', datetime(2021, 3, 15, 8, 0)) == '2021-03-15'

    @pytest.mark.parametrize('raw', ['', None, 'soon', '2021-13-45', 20210315])
    def test_invalid_dates_are_none(self, raw):
        assert transform_value('lease_expiration_date', raw) is None


class TestRegistry:

    def test_every_canonical_field_has_a_transform(self):
        assert set(FIELD_TRANSFORMS) == set(CANONICAL_FIELD_NAMES)

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            FIELD_TRANSFORMS['address'] = None

    def test_text_fields_pass_through_unchanged(self):
        assert transform_value('property_name', '  Bayside Plaza ') == '  Bayside Plaza '
        assert transform_value('owner_phone', 8135550100) == 8135550100

    def test_unknown_field_passes_through(self):
        assert get_transform('not_a_field') is passthrough
        assert transform_value('not_a_field', 'x') == 'x'

    def test_transforms_accept_cell_values(self):
        assert get_transform('sale_price')(CellValue.from_raw('$10')) == 10
