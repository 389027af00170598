"""Component-aware logging helpers.

``SmartLogger`` tags every entry with its component plus whatever operation
context is active on the current thread. ``log_operation`` opens such a
context and ``log_execution`` wraps a function with start/complete/error
entries.

Example:
    logger = SmartLogger("search")

    with log_operation("salesforce", "sosl_search", search_term=term):
        logger.info("sosl_query_built", query=sosl)   # carries correlation_id
"""

import functools
import inspect
import threading
import time
import uuid
from contextlib import contextmanager
from typing import Callable, Optional

from .multi_file_logger import get_multi_file_logger

_context = threading.local()

# First match wins, so more specific module paths come first
_MODULE_COMPONENTS = (
    ('platform.salesforce.metadata', 'metadata'),
    ('platform.salesforce', 'search'),
    ('tools.salesforce', 'salesforce'),
    ('utils.config', 'config'),
)


def _component_for_module(module_name: str) -> str:
    for fragment, component in _MODULE_COMPONENTS:
        if fragment in module_name:
            return component
    return 'system'


def _caller_component(depth: int) -> str:
    """Component of the module ``depth`` frames above the function calling this."""
    frame = inspect.currentframe()
    try:
        for _ in range(depth + 1):
            frame = frame.f_back
        return _component_for_module(frame.f_globals.get('__name__', ''))
    finally:
        del frame


class SmartLogger:
    """Logger bound to one component.

    When no component is given it is derived from the calling module.
    """

    def __init__(self, component: Optional[str] = None):
        self._component = component or _caller_component(1)

    @property
    def component(self) -> str:
        return self._component

    def _log(self, level: str, message: str, **kwargs):
        kwargs.setdefault('component', self._component)

        correlation_id = getattr(_context, 'correlation_id', None)
        if correlation_id:
            kwargs['correlation_id'] = correlation_id
        for key, value in getattr(_context, 'fields', {}).items():
            kwargs.setdefault(key, value)

        # Looked up per call so reset_multi_file_logger() takes effect
        getattr(get_multi_file_logger(), level)(message, **kwargs)

    def debug(self, message: str, **kwargs):
        self._log('debug', message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log('info', message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log('warning', message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log('error', message, **kwargs)

    def isEnabledFor(self, level: int) -> bool:
        return get_multi_file_logger().isEnabledFor(level)


def log_execution(func: Optional[Callable] = None, *, component: Optional[str] = None,
                  operation: Optional[str] = None, include_args: bool = True,
                  include_result: bool = True):
    """Log the start, completion and failure of every call.

    Works bare (``@log_execution``) or with options
    (``@log_execution(component="metadata", include_result=False)``).
    Exceptions are logged and re-raised.
    """
    def decorator(fn: Callable) -> Callable:
        op_name = operation or fn.__name__
        fn_component = component or _component_for_module(fn.__module__)

        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            fn_logger = SmartLogger(fn_component)
            context = {
                'operation': op_name,
                'function': fn.__name__,
                'execution_id': uuid.uuid4().hex[:8],
            }

            start_fields = dict(context)
            if include_args:
                # Bound instance is not worth logging
                call_args = args[1:] if args and hasattr(args[0], fn.__name__) else args
                if call_args:
                    start_fields['args'] = call_args
                if kwargs:
                    start_fields['kwargs'] = kwargs
            fn_logger.info(f"function_start_{op_name}", **start_fields)

            started = time.time()
            try:
                result = fn(*args, **kwargs)
            except Exception as e:
                fn_logger.error(f"function_error_{op_name}",
                                duration_seconds=round(time.time() - started, 3),
                                success=False,
                                error=str(e),
                                error_type=type(e).__name__,
                                **context)
                raise

            done_fields = dict(context, duration_seconds=round(time.time() - started, 3), success=True)
            if include_result:
                done_fields['result_preview'] = str(result)[:500]
            fn_logger.info(f"function_complete_{op_name}", **done_fields)
            return result

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator


@contextmanager
def log_operation(component: Optional[str] = None, operation: str = "operation",
                  correlation_id: Optional[str] = None, **fields):
    """Attach a correlation id and ``fields`` to every entry logged in the block.

    Yields the correlation id. Nested blocks extend the outer fields, and the
    outer context is restored on exit.
    """
    # Two frames up: contextlib's __enter__, then the with-statement
    op_logger = SmartLogger(component or _caller_component(2))
    correlation_id = correlation_id or uuid.uuid4().hex[:8]

    saved_id = getattr(_context, 'correlation_id', None)
    saved_fields = getattr(_context, 'fields', {})
    _context.correlation_id = correlation_id
    _context.fields = {**saved_fields, 'operation': operation, **fields}

    started = time.time()
    op_logger.info(f"operation_start_{operation}")
    try:
        yield correlation_id
    except Exception as e:
        op_logger.error(f"operation_error_{operation}",
                        duration_seconds=round(time.time() - started, 3),
                        success=False,
                        error=str(e),
                        error_type=type(e).__name__)
        raise
    else:
        op_logger.info(f"operation_complete_{operation}",
                       duration_seconds=round(time.time() - started, 3),
                       success=True)
    finally:
        _context.correlation_id = saved_id
        _context.fields = saved_fields


def get_smart_logger(component: Optional[str] = None) -> SmartLogger:
    """SmartLogger for ``component``, or for the calling module."""
    return SmartLogger(component or _caller_component(1))
