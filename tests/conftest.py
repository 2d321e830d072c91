# tests/conftest.py
"""
This file contains shared fixtures for the pytest test suite.
Fixtures defined here are automatically available to all tests.

IMPORT_ENV is forced to 'testing' before any application module is imported,
so module-level settings (validator bounds, batch size) come from TestingConfig.
"""
import os

os.environ['IMPORT_ENV'] = 'testing'

import pytest
from unittest.mock import Mock

from config import get_config
from logging_config import ImportAuditLogger, setup_logging
from services.column_mapping_service import ColumnMappingService
from services.enums import ImportSource
from services.row_transform_service import RowTransformService
from tests.fixtures.factories import CostarRowFactory, CrexiRowFactory


@pytest.fixture
def costar_headers():
    """Header line of a typical CoStar analytics export"""
    return list(CostarRowFactory.build().keys())


@pytest.fixture
def crexi_headers():
    """Header line of a typical Crexi export"""
    return list(CrexiRowFactory.build().keys())


@pytest.fixture
def manual_headers():
    return ['Address', 'City', 'State', 'Zip', 'Notes']


@pytest.fixture
def column_mapping_service():
    return ColumnMappingService()


@pytest.fixture
def costar_auto_map(column_mapping_service, costar_headers):
    return column_mapping_service.resolve(costar_headers, ImportSource.COSTAR)


@pytest.fixture
def row_transform_service():
    return RowTransformService()


@pytest.fixture
def mock_audit_logger():
    """Audit logger that records calls instead of writing"""
    return Mock(spec=ImportAuditLogger)


@pytest.fixture(scope='session', autouse=True)
def configure_logging():
    """Structured logging configured once, the way an application entry point would"""
    settings = get_config()
    setup_logging(settings.APP_NAME, settings.LOG_LEVEL)
