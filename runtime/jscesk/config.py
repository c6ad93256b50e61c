"""
Machine configuration and logging setup.
"""

from dataclasses import dataclass
import logging
import os


TRUE_STRINGS = ('1', 'true', 'yes', 'on')


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in TRUE_STRINGS


@dataclass
class MachineConfig:
    """Knobs for a single machine session"""
    debug: bool = False
    # Number/String ToBoolean read zero, NaN and "" as true in one variant of
    # the coercion table; off means conventional truthiness.
    inverted_truthiness: bool = False
    dump_statements: bool = False

    @classmethod
    def from_env(cls) -> "MachineConfig":
        """Build a config from JSCESK_* environment variables."""
        debug = _env_flag("JSCESK_DEBUG")
        return cls(
            debug=debug,
            inverted_truthiness=_env_flag("JSCESK_INVERTED_TRUTHINESS"),
            dump_statements=debug,
        )


def configure_logging(debug: bool = False):
    """Install a root handler for the jscesk loggers."""
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(level=level, format="%(name)s: %(message)s")
    logging.getLogger("jscesk").setLevel(level)


__all__ = ['MachineConfig', 'configure_logging']
