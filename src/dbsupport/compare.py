"""
Accessor-based comparison of an expected and an actual object.

Properties are the results of an object's zero-argument accessor methods,
those named `get...` or `is...` (`get_name`, `getName`, `is_valid`,
`isValid`). A type can instead describe itself by defining
`snapshot_properties()`, returning a mapping of property name to value;
when present it replaces method introspection.

The comparison is shallow: property values are compared with `==`, and
array values (numpy arrays, `array.array`) element-wise. Nested objects
are not decomposed into their own accessors.
"""
import array
import inspect
import logging
import re
from collections.abc import Iterable
from functools import cached_property
from typing import Any

import numpy as np
from dbsupport.exceptions import ContentMismatch

__all__ = [
    'ACCESSOR_PATTERN',
    'SNAPSHOT_METHOD',
    'assert_same_contents',
    'extract_properties',
]

logger = logging.getLogger(__name__)

ACCESSOR_PATTERN = re.compile(r'(get|is)[_A-Z0-9]')
SNAPSHOT_METHOD = 'snapshot_properties'
ARRAY_TYPES = (np.ndarray, array.array)


def extract_properties(obj: Any, skip: Iterable[str] = ()) -> dict[str, Any]:
    """Map each accessor name of `obj` to the value it returns.

    Accessors are enumerated from the runtime type on every call. Names in
    `skip` are neither invoked nor recorded. An accessor that raises aborts
    the extraction with its own exception.

    Args:
        obj: Any object
        skip: Property names to leave out; a single str is one name

    Returns
        dict mapping accessor name to returned value (which may be None)
    """
    skip = frozenset([skip] if isinstance(skip, str) else skip)
    cls = type(obj)

    if callable(getattr(cls, SNAPSHOT_METHOD, None)):
        snapshot = getattr(obj, SNAPSHOT_METHOD)()
        props = {name: value for name, value in snapshot.items() if name not in skip}
    else:
        props = {}
        for name in dir(cls):
            if name in skip or not ACCESSOR_PATTERN.match(name):
                continue
            if not _is_method(inspect.getattr_static(cls, name)):
                continue
            method = getattr(obj, name)
            if _takes_no_arguments(method):
                props[name] = method()

    logger.debug(f'Extracted {len(props)} properties from {cls.__qualname__}')
    return props


def _is_method(attr: Any) -> bool:
    if isinstance(attr, (property, cached_property)):
        return False
    return isinstance(attr, (staticmethod, classmethod)) or inspect.isroutine(attr)


def _takes_no_arguments(method: Any) -> bool:
    try:
        signature = inspect.signature(method)
    except (TypeError, ValueError):
        return False
    return not signature.parameters


def assert_same_contents(expected: Any, actual: Any, *skip_properties: str) -> None:
    """Assert that `actual` exposes the same property values as `expected`.

    Both objects must have exactly the same type and the same number of
    properties once `skip_properties` are removed. Each property of
    `expected` is then checked against `actual`:

    - None on both sides is equal
    - array values are compared element-wise, lengths included
    - anything else is compared with `==`

    Raises
        ContentMismatch: On the first failing check, naming the property
    """
    skip = set(skip_properties)

    if actual is None:
        raise ContentMismatch(
            f'Expected a {type(expected).__qualname__} but actual is None')
    if type(expected) is not type(actual):
        raise ContentMismatch(
            f'Type mismatch: expected {type(expected).__qualname__} '
            f'but actual is {type(actual).__qualname__}')

    expected_properties = extract_properties(expected, skip)
    actual_properties = extract_properties(actual, skip)

    if len(expected_properties) != len(actual_properties):
        raise ContentMismatch(
            f'Property count mismatch: expected {len(expected_properties)} '
            f'but actual has {len(actual_properties)}')

    for name, expected_value in expected_properties.items():
        if name in skip:
            continue
        _assert_property_equal(name, expected_value, actual_properties.get(name))


def _assert_property_equal(name: str, expected_value: Any, actual_value: Any) -> None:
    if actual_value is None:
        if expected_value is not None:
            raise ContentMismatch(
                f'Value for {name} was None but expected {expected_value!r}')
        return

    if isinstance(actual_value, ARRAY_TYPES):
        _assert_array_equal(name, expected_value, actual_value)
        return

    if isinstance(expected_value, ARRAY_TYPES) or not _values_equal(expected_value, actual_value):
        raise ContentMismatch(
            f'{name} does not match: expected {expected_value!r} but got {actual_value!r}')


def _values_equal(expected_value: Any, actual_value: Any) -> bool:
    """`==` that tolerates values whose comparison is element-wise.

    Containers holding numpy arrays make `==` ambiguous; those are compared
    item by item, and arrays met on the way with `np.array_equal`.
    """
    try:
        return bool(expected_value == actual_value)
    except (ValueError, TypeError):
        pass

    if isinstance(expected_value, (list, tuple)) and type(expected_value) is type(actual_value):
        return len(expected_value) == len(actual_value) and all(
            _values_equal(e, a) for e, a in zip(expected_value, actual_value))
    if isinstance(expected_value, dict) and isinstance(actual_value, dict):
        return expected_value.keys() == actual_value.keys() and all(
            _values_equal(value, actual_value[key]) for key, value in expected_value.items())
    try:
        return bool(np.array_equal(expected_value, actual_value))
    except (ValueError, TypeError):
        return False


def _assert_array_equal(name: str, expected_value: Any, actual_value: Any) -> None:
    if expected_value is None:
        raise ContentMismatch(
            f'{name} does not match: expected None but got {actual_value!r}')

    expected_array = np.asarray(expected_value)
    actual_array = np.asarray(actual_value)
    if expected_array.shape != actual_array.shape:
        raise ContentMismatch(
            f'{name} does not match: expected shape {expected_array.shape} '
            f'but got {actual_array.shape}')

    try:
        np.testing.assert_array_equal(actual_array, expected_array,
                                      err_msg=f'{name} does not match')
    except AssertionError as exc:
        raise ContentMismatch(str(exc)) from exc
