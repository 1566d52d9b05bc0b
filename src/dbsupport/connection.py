"""
Connection providers for native updates.

dbsupport never owns the application's connections. A provider is one of:
1. A SQLAlchemy engine, or any object with a `raw_connection()` method
2. A plain callable returning a DBAPI connection
3. Connection settings (SupportOptions, a dict, or the name of a section
   on a libb config module). These get a single-use `NullPool` engine that
   is disposed as soon as the caller is done with it.

The module also carries the auto-commit switches for the raw driver
connections it hands out (psycopg and sqlite3).
"""
import logging
import sqlite3
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import sqlalchemy as sa
from dbsupport.exceptions import ConfigurationError
from dbsupport.options import SupportOptions
from sqlalchemy.pool import NullPool

from libb import load_options

__all__ = [
    'connection_factory',
    'disable_auto_commit',
    'enable_auto_commit',
    'engine_from_options',
    'get_driver_connection',
    'load_support_options',
    'resolve_connection_factory',
]

logger = logging.getLogger(__name__)

SETTINGS_TYPES = (SupportOptions, dict, str)


def load_support_options(options: SupportOptions | dict[str, Any] | str,
                         config: Any | None = None, **kw: Any) -> SupportOptions:
    """Load SupportOptions from an instance, a dict, or a config section name.

    Args:
        options: SupportOptions object, dictionary of options, or the name of
                 an options section on `config`
        config: Configuration object (for loading from config modules)
        **kw: Additional keyword arguments to override options
    """
    if isinstance(options, SupportOptions):
        return options
    if isinstance(options, str) and config is None:
        raise ConfigurationError(f'Config section {options!r} given without a config object')
    options_func = load_options(cls=SupportOptions)(lambda o, c: o)
    return options_func(options, config, **kw)


def engine_from_options(options: SupportOptions) -> sa.Engine:
    """Build an unpooled engine for one native update.

    Each `raw_connection()` opens a new driver connection and closing it
    really closes it, so nothing is left behind once the engine is disposed.
    """
    if options.drivername == 'sqlite':
        url = sa.URL.create('sqlite', database=options.database)
    else:
        url = sa.URL.create(
            'postgresql+psycopg',
            username=options.username,
            password=options.password,
            host=options.hostname,
            port=options.port,
            database=options.database,
            query={'connect_timeout': str(options.timeout)} if options.timeout else {},
        )
    return sa.create_engine(url, poolclass=NullPool)


def resolve_connection_factory(provider: Any) -> Callable[[], Any]:
    """Turn an engine or callable provider into a zero-argument connection factory.

    Raises
        ConfigurationError: If the provider cannot hand out connections
    """
    if callable(getattr(provider, 'raw_connection', None)):
        return provider.raw_connection

    if callable(provider):
        return provider

    raise ConfigurationError(f'Cannot obtain connections from {type(provider).__name__}')


@contextmanager
def connection_factory(provider: Any, config: Any | None = None,
                       **kw: Any) -> Iterator[tuple[Callable[[], Any], SupportOptions | None]]:
    """Yield (factory, options) for a provider.

    `options` is None unless the provider was given as settings. An engine
    built from settings is disposed when the block exits.
    """
    if not isinstance(provider, SETTINGS_TYPES):
        yield resolve_connection_factory(provider), None
        return

    options = load_support_options(provider, config, **kw)
    engine = engine_from_options(options)
    logger.debug(f'Created single-use engine for {options.drivername}')
    try:
        yield engine.raw_connection, options
    finally:
        engine.dispose()
        logger.debug(f'Disposed single-use engine for {options.drivername}')


def get_driver_connection(connection: Any) -> Any:
    """Unwrap a SQLAlchemy pool proxy to the raw driver connection."""
    return getattr(connection, 'driver_connection', None) or connection


def enable_auto_commit(connection: Any) -> None:
    """Enable auto-commit mode on a psycopg or sqlite3 connection.
    """
    raw_conn = get_driver_connection(connection)

    if isinstance(raw_conn, sqlite3.Connection):
        raw_conn.isolation_level = None
        return

    if hasattr(raw_conn, 'autocommit'):
        raw_conn.autocommit = True
        return

    if hasattr(raw_conn, 'isolation_level'):
        raw_conn.isolation_level = None


def disable_auto_commit(connection: Any) -> None:
    """Disable auto-commit mode on a psycopg or sqlite3 connection.
    """
    raw_conn = get_driver_connection(connection)

    if isinstance(raw_conn, sqlite3.Connection):
        raw_conn.isolation_level = 'DEFERRED'
        return

    if hasattr(raw_conn, 'autocommit'):
        raw_conn.autocommit = False
        return

    if hasattr(raw_conn, 'isolation_level'):
        raw_conn.isolation_level = 'DEFERRED'
