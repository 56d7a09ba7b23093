"""Decorator for automatically logging MCP tool calls."""

import asyncio
import inspect
import json
import time
from functools import wraps
from typing import Any, Callable, Dict, Optional

from fastmcp import Context

from .utils import mcp_logger

MAX_LOGGED_OUTPUT = 10_000  # bytes of JSON


def _context_ids(ctx: Optional[Context]) -> Dict[str, Any]:
    if ctx is None:
        return {"session_id": None, "request_id": None}
    try:
        return {"session_id": ctx.session_id, "request_id": ctx.request_id}
    except (AttributeError, RuntimeError):
        # Context used outside an active request
        return {"session_id": None, "request_id": None}


def _input_params(func: Callable, args, kwargs) -> Dict[str, Any]:
    """Map call arguments to parameter names, leaving out the Context."""
    param_names = list(inspect.signature(func).parameters.keys())
    params = {}
    for i, arg in enumerate(args):
        if i < len(param_names) and not isinstance(arg, Context):
            params[param_names[i]] = arg
    for key, value in kwargs.items():
        if key != "ctx" and not isinstance(value, Context):
            params[key] = value
    return params


def _output_for_log(result: Any) -> Any:
    """Truncate large outputs."""
    if isinstance(result, (dict, list)):
        result_json = json.dumps(result, default=str)
        if len(result_json) > MAX_LOGGED_OUTPUT:
            if isinstance(result, dict):
                return {
                    "_truncated": True,
                    "_size": len(result_json),
                    **{k: v for k, v in list(result.items())[:5]},
                }
            return {"_truncated": True, "_size": len(result_json), "_length": len(result)}
    return result


def log_tool_calls(func: Callable) -> Callable:
    """
    Decorator that logs MCP tool calls with input, output, timing and errors.

    Works for sync and async tools. Exceptions are logged and re-raised.
    """

    def _find_ctx(args, kwargs) -> Optional[Context]:
        for arg in args:
            if isinstance(arg, Context):
                return arg
        return kwargs.get("ctx")

    def _log_start(tool_name, extra):
        mcp_logger.info(f"Tool {tool_name} started", extra=extra)

    def _log_success(tool_name, extra, start_time, result):
        mcp_logger.info(
            f"Tool {tool_name} completed successfully",
            extra={
                **extra,
                "output_data": _output_for_log(result),
                "execution_time_ms": int((time.time() - start_time) * 1000),
                "success": True,
            },
        )

    def _log_error(tool_name, extra, start_time, error):
        mcp_logger.error(
            f"Tool {tool_name} failed with error: {error}",
            extra={
                **extra,
                "execution_time_ms": int((time.time() - start_time) * 1000),
                "success": False,
                "error": str(error),
            },
        )

    if asyncio.iscoroutinefunction(func):

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = time.time()
            tool_name = func.__name__
            extra = {
                **_context_ids(_find_ctx(args, kwargs)),
                "tool_name": tool_name,
                "input_params": _input_params(func, args, kwargs),
            }
            _log_start(tool_name, extra)
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _log_error(tool_name, extra, start_time, e)
                raise
            _log_success(tool_name, extra, start_time, result)
            return result

        return async_wrapper

    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        tool_name = func.__name__
        extra = {
            **_context_ids(_find_ctx(args, kwargs)),
            "tool_name": tool_name,
            "input_params": _input_params(func, args, kwargs),
        }
        _log_start(tool_name, extra)
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            _log_error(tool_name, extra, start_time, e)
            raise
        _log_success(tool_name, extra, start_time, result)
        return result

    return wrapper
