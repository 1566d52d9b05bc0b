from dataclasses import dataclass

from libb import ConfigOptions

__all__ = [
    'REQUIRED_OPTIONS',
    'SupportOptions',
]

REQUIRED_OPTIONS = {
    'postgresql': ('hostname', 'username', 'password', 'database', 'port'),
    'sqlite': ('database',),
    }


@dataclass
class SupportOptions(ConfigOptions):
    """Where a native update should connect when no engine is at hand.

    `autocommit` commits each statement as it runs. With it off, the
    statement batch is committed once, after the consumer returns.
    """
    drivername: str = 'postgresql'
    hostname: str = None
    username: str = None
    password: str = None
    database: str = None
    port: int = 0
    timeout: int = 0
    autocommit: bool = True

    def __post_init__(self):
        if self.drivername not in REQUIRED_OPTIONS:
            raise ValueError(f'drivername must be one of: {list(REQUIRED_OPTIONS)}')
        missing = [name for name in REQUIRED_OPTIONS[self.drivername] if not getattr(self, name)]
        if missing:
            raise ValueError(f'{self.drivername} settings missing: {", ".join(missing)}')
