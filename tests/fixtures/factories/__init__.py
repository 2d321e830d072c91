"""
Test Data Factories for the import mapping engine

Usage:
    from tests.fixtures.factories import CostarRowFactory

    # Single row with generated address data
    row = CostarRowFactory.build()

    # Override a column by its factory attribute name
    row = CostarRowFactory.build(year_built='1756')

    # Batch of rows
    rows = CostarRowFactory.build_batch(10)
"""

from .row_factories import CostarRowFactory, CrexiRowFactory

__all__ = [
    'CostarRowFactory',
    'CrexiRowFactory',
]
