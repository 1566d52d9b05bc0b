"""
Exception classes and driver exception groups.
"""
import sqlite3

import psycopg


class DatabaseError(Exception):
    """Base class for all dbsupport errors.
    """


class ConnectionFailure(DatabaseError):
    """Error establishing or releasing a database connection.
    """


class ConfigurationError(DatabaseError):
    """A connection provider could not be turned into a connection factory.
    """


class ContentMismatch(AssertionError):
    """Expected and actual objects do not expose the same contents.
    """


DbConnectionError = (
    psycopg.OperationalError,
    psycopg.InterfaceError,
    sqlite3.OperationalError,
    sqlite3.InterfaceError,
    ConnectionFailure,
    )

IntegrityError = (
    psycopg.IntegrityError,
    sqlite3.IntegrityError,
    )

ProgrammingError = (
    psycopg.ProgrammingError,
    sqlite3.ProgrammingError,
    )

OperationalError = (
    psycopg.OperationalError,
    sqlite3.OperationalError,
    )
