"""
Native updates: raw statements run directly against the backing store.

Native updates bypass any ORM session, so a session that already holds
the touched rows will not see the change. Bracket the test body instead
of mixing the two:

    run_native_update(engine, lambda cur: cur.execute('insert into ...'))
    try:
        ...
    finally:
        run_native_update(engine, lambda cur: cur.execute('delete from ...'))
"""
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from dbsupport.connection import connection_factory, disable_auto_commit
from dbsupport.connection import enable_auto_commit, get_driver_connection
from dbsupport.exceptions import ConnectionFailure

__all__ = [
    'native_update',
    'run_native_update',
]

logger = logging.getLogger(__name__)


@contextmanager
def native_update(provider: Any, autocommit: bool | None = None,
                  config: Any | None = None, **kw: Any) -> Iterator[Any]:
    """Open one connection and one cursor, yield the cursor, then release both.

    The cursor is closed before the connection, on every exit path. Errors
    from acquisition, from the block, or from release propagate unchanged;
    there is no retry and no rollback.

    Args:
        provider: Engine, callable, or connection settings (see
                  `dbsupport.connection`)
        autocommit: Commit each statement as it runs. None defers to the
                    provider's settings, defaulting to True. When False, the
                    batch is committed once if the block completes.
        config: Config module holding the section named by a `str` provider
        **kw: Overrides applied to settings loaded from `config`

    Examples
        with native_update(engine) as cur:
            cur.execute('delete from widgets')

        with native_update('sqlite', config=config) as cur:
            cur.execute('delete from widgets')
    """
    with connection_factory(provider, config, **kw) as (connect, options):
        if autocommit is None:
            autocommit = options.autocommit if options is not None else True

        connection = None
        cursor = None
        try:
            connection = connect()
            if connection is None:
                raise ConnectionFailure('Connection provider returned no connection')
            if autocommit:
                enable_auto_commit(connection)
            cursor = connection.cursor()
            logger.debug(f'Native update started (autocommit={autocommit})')

            yield cursor

            if not autocommit:
                connection.commit()
        finally:
            try:
                if cursor is not None:
                    cursor.close()
            finally:
                if connection is not None:
                    _release_connection(connection, autocommit)


def _release_connection(connection: Any, autocommit: bool) -> None:
    """Close the connection, handing it back out of auto-commit first.

    A caller's pooled engine would otherwise get the connection back in
    auto-commit mode. A closed driver connection is closed without touching
    its mode.
    """
    try:
        if autocommit and not getattr(get_driver_connection(connection), 'closed', False):
            disable_auto_commit(connection)
    finally:
        connection.close()
        logger.debug('Native update connection released')


def run_native_update(provider: Any, consumer: Callable[[Any], Any],
                      autocommit: bool | None = None,
                      config: Any | None = None, **kw: Any) -> None:
    """Run `consumer` once against a fresh cursor from `provider`.

    The consumer's return value is ignored. The cursor and connection are
    always released, even if the consumer raises.

    Args:
        provider: See `native_update`
        consumer: Callable receiving the live DBAPI cursor
        autocommit: See `native_update`
        config: See `native_update`
        **kw: See `native_update`
    """
    with native_update(provider, autocommit, config, **kw) as cursor:
        consumer(cursor)
