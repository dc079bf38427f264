"""Structured logging utilities for `logging`.

This module supports different structured-logging formats (JSON and
text) and a decorator for logging function calls. Records are written
to the ``seismic_sources`` logger so applications decide where (and
whether) they go.

Examples
--------

>>> @log_call()
>>> def foo(a, b):
>>>     return a + b
>>> foo(1, 2)
2024-09-18 22:00:51.498268+00:00	INFO	called	function='foo'	id='...'	args={'a': 1, 'b': 2}
2024-09-18 22:00:51.498301+00:00	INFO	completed	function='foo'	id='...'	result=3
3
>>> log('built depth model', LoggingFormat.TEXT, logging.DEBUG, size=13)
"""

import enum
import functools
import inspect
import json
import logging
import os
import threading
import traceback
import uuid
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any, Callable, Optional

logger = logging.getLogger("seismic_sources")


class LoggingFormat(enum.Enum):
    """Enumeration of possible logging format outputs."""

    JSON = enum.auto()
    """Output log in JSON structured-logging format."""
    TEXT = enum.auto()
    """Output log in Heroku-style key=value structured-logging format."""


class LogEncoder(json.JSONEncoder):
    """Custom JSON encoder for logging arbitrary values."""

    def default(self, obj: Any) -> Any:
        """Encode the JSON representation of obj.

        The encoder will default to repr(obj) if the base encoder
        fails.

        Parameters
        ----------
        obj : Any
            Object to encode.

        Returns
        -------
        Any
            The encoded JSON object.
        """
        try:
            return super().default(obj)
        except TypeError:
            return repr(obj)


def log(
    message: str,
    format: Optional[LoggingFormat] = None,
    level: int = logging.INFO,
    /,
    **kwargs: Any,
) -> None:
    """Log a message in a structured logging format.

    Parameters
    ----------
    message : str
        The message to log.
    format : Optional[LoggingFormat]
        The logging format to use, defaulting to the value of the
        environment variable LOG_FORMAT or `LoggingFormat.TEXT` if the
        environment variable is not present.
    level : int
        The level of the log. For example, the default is `logging.INFO`.
    kwargs : Any
        Keyword arguments to log in a structured logging format.
    """
    if not logger.isEnabledFor(level):
        return
    now = str(datetime.now(timezone.utc))
    level_name = logging.getLevelName(level)
    format = format or LoggingFormat[os.environ.get("LOG_FORMAT", "TEXT").upper()]

    match format:
        case LoggingFormat.JSON:
            logger.log(
                level,
                json.dumps(
                    kwargs
                    | {
                        "message": message,
                        "level": level_name,
                        "time": now,
                        "thread": threading.current_thread().name,
                    },
                    cls=LogEncoder,
                ),
            )
        case LoggingFormat.TEXT:
            structured_log_data = "\t".join(
                f"{key}={value!r}" for key, value in kwargs.items()
            )
            logger.log(level, f"{now}\t{level_name}\t{message}\t{structured_log_data}")


def log_call(
    action_name: Optional[str] = None,
    exclude_args: Optional[Iterable[str]] = None,
    include_result: bool = True,
) -> Callable:
    """Wrap a function with logging calls of the arguments and success status.

    Parameters
    ----------
    action_name : Optional[str]
        An alternative identifier for the function in the log output.
        If None, will use `f.__name__` as the identifier.
    exclude_args : Optional[Iterable[str]]
        Arguments to exclude from log reports.
    include_result : bool
        If True, log the result of function call.

    Returns
    -------
    Callable
        A decorator that logs its wrapped function's arguments every
        time the function is called, and logs once it has completed
        (with its return value if `include_result` is True).
    """
    excluded = set(exclude_args or ())

    def decorator(f: Callable) -> Callable:
        signature = inspect.signature(f)

        @functools.wraps(f)
        def wrapper(*args, **kwargs):
            function_id = str(uuid.uuid4())
            unified_arguments = {
                parameter: arg
                for parameter, arg in zip(signature.parameters, args)
                if parameter not in excluded
            } | {key: value for key, value in kwargs.items() if key not in excluded}
            name = action_name or f.__name__
            log("called", function=name, id=function_id, args=unified_arguments)
            try:
                result = f(*args, **kwargs)
            except Exception:
                log(
                    "failed",
                    None,
                    logging.ERROR,
                    function=name,
                    id=function_id,
                    error=traceback.format_exc(),
                )
                raise
            if include_result:
                log("completed", function=name, id=function_id, result=result)
            else:
                log("completed", function=name, id=function_id)
            return result

        return wrapper

    return decorator
