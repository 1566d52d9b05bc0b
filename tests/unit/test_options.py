"""
Test SupportOptions loading and validation.
"""
import pytest
from dbsupport.connection import load_support_options
from dbsupport.exceptions import ConfigurationError
from dbsupport.options import SupportOptions


@pytest.mark.parametrize(('settings', 'missing'), [
    ({'drivername': 'sqlite'}, 'database'),
    ({'drivername': 'postgresql', 'hostname': 'dbhost', 'database': 'catalog',
      'username': 'user', 'password': 'secret'}, 'port'),
    ({'drivername': 'postgresql', 'database': 'catalog'},
     'hostname, username, password, port'),
    ])
def test_missing_settings_are_listed(settings, missing):
    with pytest.raises(ValueError, match=f'settings missing: {missing}$'):
        SupportOptions(**settings)


def test_unknown_driver():
    with pytest.raises(ValueError, match='drivername must be one of'):
        SupportOptions(drivername='oracle', database='catalog')


def test_autocommit_defaults_on():
    assert SupportOptions(drivername='sqlite', database='catalog.db').autocommit is True


def test_load_from_dict():
    options = load_support_options({'drivername': 'sqlite', 'database': 'catalog.db',
                                    'autocommit': False})

    assert isinstance(options, SupportOptions)
    assert options.database == 'catalog.db'
    assert options.autocommit is False


def test_load_from_config_section():
    import config

    options = load_support_options('sqlite', config=config)

    assert options.drivername == 'sqlite'
    assert options.database == config.sqlite.database


def test_section_name_needs_config():
    with pytest.raises(ConfigurationError, match="'sqlite'"):
        load_support_options('sqlite')


def test_instance_passes_through():
    options = SupportOptions(drivername='sqlite', database='catalog.db')
    assert load_support_options(options) is options


if __name__ == '__main__':
    __import__('pytest').main([__file__])
