"""
Recording DBAPI doubles for native update tests.

The connection and cursor append every lifecycle call to a shared event
list so tests can assert on ordering (cursor closed before connection).

Usage:
    def test_release(recording_connection):
        conn = recording_connection()
        run_native_update(lambda: conn, lambda cur: cur.execute('select 1'))
        assert conn.events[-2:] == ['cursor.close', 'connection.close']
"""
import pytest


class RecordingCursor:

    def __init__(self, events, execute_error=None, close_error=None):
        self.events = events
        self.executed = []
        self.closed = False
        self._execute_error = execute_error
        self._close_error = close_error

    def execute(self, sql, *args):
        self.events.append('cursor.execute')
        self.executed.append(sql)
        if self._execute_error is not None:
            raise self._execute_error

    def close(self):
        self.events.append('cursor.close')
        self.closed = True
        if self._close_error is not None:
            raise self._close_error


class RecordingConnection:
    """Mimics a psycopg connection: exposes a settable `autocommit`."""

    def __init__(self, cursor_error=None, execute_error=None,
                 cursor_close_error=None):
        self.events = []
        self.autocommit = False
        self.autocommit_history = []
        self.cursors = []
        self.closed = False
        self._cursor_error = cursor_error
        self._execute_error = execute_error
        self._cursor_close_error = cursor_close_error

    def __setattr__(self, name, value):
        if name == 'autocommit' and hasattr(self, 'autocommit_history'):
            self.autocommit_history.append(value)
        super().__setattr__(name, value)

    def cursor(self):
        self.events.append('connection.cursor')
        if self._cursor_error is not None:
            raise self._cursor_error
        cursor = RecordingCursor(self.events, self._execute_error,
                                 self._cursor_close_error)
        self.cursors.append(cursor)
        return cursor

    def commit(self):
        self.events.append('connection.commit')

    def rollback(self):
        self.events.append('connection.rollback')

    def close(self):
        self.events.append('connection.close')
        self.closed = True


@pytest.fixture
def recording_connection():
    """
    Fixture that provides a factory for RecordingConnection objects.

    Example usage:
        def test_something(recording_connection):
            conn = recording_connection(execute_error=sqlite3.IntegrityError('x'))
    """
    def factory(**kwargs):
        return RecordingConnection(**kwargs)

    return factory
