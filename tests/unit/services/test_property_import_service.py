"""
Tests for PropertyImportService - auto-mapping and batched row processing
"""

import pytest
from unittest.mock import Mock, call, patch

from services.column_mapping_service import ColumnMappingService
from services.common.result import Result
from services.enums import ImportSource
from services.import_models import AutoMapResult, ImportRowResult
from services.property_import_service import (
    ImportBatchReport,
    PropertyImportService,
    normalize_address_key,
)
from services.row_transform_service import RowTransformService
from tests.fixtures.factories import CostarRowFactory


class TestAutoMap:
    """Test file-level column mapping"""

    @pytest.fixture
    def service(self, mock_audit_logger):
        return PropertyImportService(audit_logger=mock_audit_logger)

    def test_empty_headers_fail(self, service):
        result = service.auto_map([])

        assert result.is_failure
        assert result.error_code == 'NO_HEADERS'

    def test_missing_headers_fail(self, service):
        assert service.auto_map(None).error_code == 'NO_HEADERS'

    def test_auto_map_detects_and_logs(self, service, mock_audit_logger, costar_headers):
        result = service.auto_map(costar_headers)

        assert result.is_success
        auto_map = result.unwrap()
        assert auto_map.detected_source == ImportSource.COSTAR
        mock_audit_logger.log_auto_map.assert_called_once_with(
            'costar',
            mapped=len(auto_map.mapped_columns),
            unmapped=0,
            warnings=0
        )
        mock_audit_logger.log_structural_warning.assert_not_called()

    def test_structural_warnings_are_logged(self, service, mock_audit_logger, manual_headers):
        result = service.auto_map(manual_headers)

        mock_audit_logger.log_structural_warning.assert_called_once_with(
            'CRITICAL: No address column found. Import will fail for all rows.'
        )
        assert result.unwrap().has_critical_warnings

    def test_critical_mapping_is_flagged_in_the_service_log(self, service, manual_headers, costar_headers):
        with patch('services.property_import_service.logger') as mock_logger:
            service.auto_map(manual_headers)

        mock_logger.warning.assert_called_once_with(
            "Required columns missing; every row will fail validation",
            source='manual'
        )

        with patch('services.property_import_service.logger') as mock_logger:
            service.auto_map(costar_headers)

        mock_logger.warning.assert_not_called()

    def test_user_mapping_uses_overrides(self, service, manual_headers):
        result = service.auto_map(manual_headers, column_mapping={
            'Address': 'address', 'City': 'city', 'State': 'state', 'Notes': 'bogus'
        })

        auto_map = result.unwrap()
        assert auto_map.property_mapping == {'Address': 'address', 'City': 'city', 'State': 'state'}
        assert auto_map.detected_source == ImportSource.MANUAL
        assert auto_map.warnings == ['Skipped invalid column mapping: Notes -> bogus']

    def test_explicit_source_is_kept_with_overrides(self, service, manual_headers):
        result = service.auto_map(manual_headers, source=ImportSource.CREXI, column_mapping={})

        assert result.unwrap().detected_source == ImportSource.CREXI

    def test_mapping_error_becomes_failure(self, mock_audit_logger, costar_headers):
        column_mapping_service = Mock(spec=ColumnMappingService)
        column_mapping_service.resolve.side_effect = RuntimeError('table corrupt')
        service = PropertyImportService(
            column_mapping_service=column_mapping_service,
            audit_logger=mock_audit_logger
        )

        result = service.auto_map(costar_headers)

        assert result.is_failure
        assert result.error_code == 'IMPORT_ERROR'
        assert 'table corrupt' in result.error

    def test_to_dict_uses_camel_case(self, service, costar_headers):
        payload = service.auto_map(costar_headers).unwrap().to_dict()

        assert set(payload) == {
            'propertyMapping', 'transactionMapping', 'unmappedColumns', 'warnings', 'detectedSource'
        }
        assert payload['detectedSource'] == 'costar'


class TestTransformRows:
    """Test batched row processing"""

    @pytest.fixture
    def service(self, mock_audit_logger):
        return PropertyImportService(audit_logger=mock_audit_logger, batch_size=2)

    @pytest.fixture
    def rows(self):
        return CostarRowFactory.build_batch(5)

    def test_defaults_come_from_testing_config(self):
        service = PropertyImportService()

        assert service.batch_size == 2
        assert service.max_error_samples == 5

    def test_all_rows_are_processed_in_order(self, service, rows, costar_auto_map):
        result = service.transform_rows(rows, costar_auto_map)

        assert result.is_success
        report = result.unwrap()
        assert isinstance(report, ImportBatchReport)
        assert [row_number for row_number, _ in report.results] == [1, 2, 3, 4, 5]
        assert report.total_rows == 5
        assert report.diagnostics.rows_with_errors == 0
        assert report.processing_time >= 0

    def test_row_handler_receives_each_result(self, service, rows, costar_auto_map):
        handler = Mock()

        service.transform_rows(rows, costar_auto_map, row_handler=handler)

        assert handler.call_count == 5
        row_number, result = handler.call_args_list[0][0]
        assert row_number == 1
        assert isinstance(result, ImportRowResult)
        assert result.property['address'] == rows[0]['Property Address']

    def test_failing_handler_is_recorded_and_processing_continues(self, service, rows, costar_auto_map):
        def handler(row_number, result):
            if row_number == 2:
                raise RuntimeError('duplicate key')

        report = service.transform_rows(rows, costar_auto_map, row_handler=handler).unwrap()

        assert report.total_rows == 5
        assert report.diagnostics.handler_failures == 1
        assert report.diagnostics.row_errors == {2: ('Row handler failed: duplicate key',)}

    def test_results_are_not_kept_when_a_handler_consumes_them(self, service, rows, costar_auto_map):
        handler = Mock()

        report = service.transform_rows(rows, costar_auto_map, row_handler=handler).unwrap()

        assert handler.call_count == 5
        assert report.results == []
        assert report.total_rows == 5

    def test_handler_failure_log_names_the_property(self, service, costar_auto_map):
        rows = [CostarRowFactory.build(property_address='123 N. Main Street')]

        with patch('services.property_import_service.logger') as mock_logger:
            service.transform_rows(rows, costar_auto_map, row_handler=Mock(side_effect=RuntimeError('db down')))

        mock_logger.warning.assert_called_once_with(
            "Row handler failed", row=1, address_key='123main', error='db down'
        )

    def test_progress_is_reported_after_each_batch(self, service, rows, costar_auto_map):
        progress = Mock()

        service.transform_rows(rows, costar_auto_map, progress_callback=progress)

        assert progress.call_args_list == [call(2, 5), call(4, 5), call(5, 5)]

    def test_batch_size_override(self, service, rows, costar_auto_map):
        progress = Mock()

        service.transform_rows(rows, costar_auto_map, progress_callback=progress, batch_size=10)

        progress.assert_called_once_with(5, 5)

    def test_generator_rows_report_unknown_total(self, service, rows, costar_auto_map):
        progress = Mock()

        service.transform_rows((row for row in rows), costar_auto_map, progress_callback=progress)

        assert progress.call_args_list[-1] == call(5, None)

    def test_row_errors_are_collected(self, service, costar_auto_map):
        rows = [
            CostarRowFactory.build(),
            CostarRowFactory.build(year_built='1756'),
            CostarRowFactory.build(property_address='CBD'),
        ]

        report = service.transform_rows(rows, costar_auto_map).unwrap()

        assert report.diagnostics.rows_with_errors == 2
        assert report.diagnostics.field_error_counts == {'year_built': 1, 'address': 1}
        assert report.results[1][1].property['year_built'] is None

    def test_diagnostics_include_file_level_warnings(self, service, column_mapping_service, manual_headers):
        auto_map = column_mapping_service.resolve(manual_headers)
        rows = [{'Address': '1 Main St', 'City': 'Tampa', 'State': 'FL', 'Zip': '33602'}]

        report = service.transform_rows(rows, auto_map).unwrap()
        summary = report.to_dict()

        assert summary['warnings'] == ['CRITICAL: No address column found. Import will fail for all rows.']
        assert summary['unmapped_columns'] == ['Address', 'Notes']
        assert 'processing_time' in summary
        assert report.results[0][1].missing_required_fields() == ['address']

    def test_chunking_does_not_change_the_report(self, mock_audit_logger, rows, costar_auto_map):
        rows[1]['Year Built'] = '1700'
        rows[3]['Percent Leased'] = '140%'
        small = PropertyImportService(audit_logger=mock_audit_logger, batch_size=1)
        large = PropertyImportService(audit_logger=mock_audit_logger, batch_size=100)

        first = small.transform_rows(rows, costar_auto_map).unwrap()
        second = large.transform_rows(rows, costar_auto_map).unwrap()

        assert first.diagnostics == second.diagnostics

    def test_batch_completion_is_logged(self, service, mock_audit_logger, rows, costar_auto_map):
        service.transform_rows(rows, costar_auto_map)

        mock_audit_logger.log_batch_complete.assert_called_once()
        kwargs = mock_audit_logger.log_batch_complete.call_args.kwargs
        assert kwargs['rows'] == 5
        assert kwargs['handler_failures'] == 0

    def test_broken_row_source_fails(self, service, costar_auto_map):
        def broken_rows():
            yield CostarRowFactory.build()
            raise IOError('stream closed')

        result = service.transform_rows(broken_rows(), costar_auto_map)

        assert result.is_failure
        assert result.error_code == 'IMPORT_ERROR'

    def test_uses_injected_row_transformer(self, mock_audit_logger, costar_auto_map):
        transformer = Mock(spec=RowTransformService)
        transformer.transform_row.return_value = ImportRowResult()
        service = PropertyImportService(row_transform_service=transformer, audit_logger=mock_audit_logger)

        service.transform_rows([{'City': 'Tampa'}], costar_auto_map)

        transformer.transform_row.assert_called_once_with(
            {'City': 'Tampa'},
            costar_auto_map.property_mapping,
            costar_auto_map.transaction_mapping
        )


class TestNormalizeAddressKey:

    @pytest.mark.parametrize('address, expected', [
        ('123 Main Street', '123main'),
        ('123 main st.', '123main'),
        ('123  MAIN   ST', '123main'),
        ('123 N. Main St', '123main'),
        ('4100 West Kennedy Blvd.', '4100kennedy'),
        ('55 Smith Ave', '55smith'),
        ('10 Broadway', '10broadway'),
        ('Suite #200, 1 Park Pl', 'suite2001park'),
    ])
    def test_keys(self, address, expected):
        assert normalize_address_key(address) == expected

    def test_blank_address(self):
        assert normalize_address_key('') == ''
        assert normalize_address_key(None) == ''


class TestResult:
    """The shared Result type used by the import facade"""

    def test_success(self):
        result = Result.success({'rows': 3})

        assert result
        assert result.unwrap() == {'rows': 3}
        assert result.unwrap_or(None) == {'rows': 3}

    def test_failure(self):
        result = Result.failure('No headers found in CSV', code='NO_HEADERS')

        assert not result
        assert result.unwrap_or('fallback') == 'fallback'
        with pytest.raises(ValueError):
            result.unwrap()
        assert repr(result) == "Result.failure(error='No headers found in CSV', code='NO_HEADERS')"
