"""
Test support for database-backed applications.

Two independent helpers:
- Native updates: run raw statements against the backing store, outside
  any ORM session, with guaranteed release of cursor and connection.
- Accessor-based comparison: assert that two objects of the same type
  return the same values from their zero-argument accessors.
"""
__version__ = '0.1.0'

from dbsupport.compare import assert_same_contents, extract_properties
from dbsupport.connection import connection_factory, resolve_connection_factory
from dbsupport.exceptions import ConfigurationError, ConnectionFailure
from dbsupport.exceptions import ContentMismatch, DatabaseError, DbConnectionError
from dbsupport.exceptions import IntegrityError, OperationalError, ProgrammingError
from dbsupport.native import native_update, run_native_update
from dbsupport.options import SupportOptions

__all__ = [
    'run_native_update',
    'native_update',
    'resolve_connection_factory',
    'connection_factory',
    'assert_same_contents',
    'extract_properties',
    'SupportOptions',
    'DatabaseError',
    'ConnectionFailure',
    'ConfigurationError',
    'ContentMismatch',
    'DbConnectionError',
    'IntegrityError',
    'OperationalError',
    'ProgrammingError',
]
