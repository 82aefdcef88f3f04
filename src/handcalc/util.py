from enum import IntEnum
from functools import wraps
from threading import Lock


class ErrorCode(IntEnum):
    '''
    Codes returned by engine operations.

    NO_ERROR is falsy, everything else is a failure.
    '''
    NO_ERROR = 0
    TOO_FEW_OPERANDS = -1
    UNKNOWN_OPERATOR = -2
    DIVIDE_BY_ZERO = -3
    # set_error(NO_ERROR) is refused; use clear_error()
    CANNOT_CLEAR_TO_NO_ERROR = -4
    NO_MATCHING_PAREN = -5
    # Reserved. Nothing produces it yet.
    OVERFLOW = -6


class CalcError(Exception):
    '''
    Raised inside the engine; never escapes it.
    '''
    def __init__(self, code, *args):
        super().__init__(ErrorCode(code), *args)
        self.code = ErrorCode(code)


def error_codes(f):
    '''
    Decorator that converts raised CalcErrors to returned ErrorCodes.

    A wrapped function returning None is a success.
    '''
    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            result = f(*args, **kwargs)
        except CalcError as e:
            return e.code
        return ErrorCode.NO_ERROR if result is None else result
    return wrapper


class Serialized:
    '''
    Proxy running every method call of the wrapped engine under one lock.

    The engine itself does no locking; share it between threads only
    through this.
    '''
    def __init__(self, wrapped):
        self._wrapped = wrapped
        self._lock = Lock()

    def __getattr__(self, name):
        attr = getattr(self._wrapped, name)
        if not callable(attr):
            return attr

        @wraps(attr)
        def locked(*args, **kwargs):
            with self._lock:
                return attr(*args, **kwargs)
        return locked
