"""Custom bladecalc exceptions"""

from bladecalc.config import CURRENT_VERSION
from bladecalc.log import log


class BladeCalcError(Exception):
    """Any error in bladecalc"""

    def __init__(self, message: str = None):
        """Log just the error message and then raise the Exception."""
        super().__init__(message)
        log.error("%s (bladecalc version %s)", message, CURRENT_VERSION)


class BladeCalcValueError(BladeCalcError, ValueError):
    """Error with value."""


class BladeCalcKeyError(BladeCalcError, KeyError):
    """Could not find a key in a bladecalc table."""
