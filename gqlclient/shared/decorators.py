from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from loguru import logger

from gqlclient.domain.errors import GraphQLClientError

P = ParamSpec("P")
R = TypeVar("R")


def log_errors(func: Callable[P, R]) -> Callable[P, R]:
    """Log any exception escaping the decorated callable, then re-raise it.

    Client errors (encoding, transport, decoding, configuration) are logged as
    a single line with the qualified function name and exception type.
    Anything else is unexpected and is logged with its traceback.

    Usage::

        @log_errors
        def run(self, request: Request, target=None) -> GraphQLResponse: ...
    """

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except GraphQLClientError as exc:
            logger.error(f"[{func.__qualname__}] {type(exc).__name__}: {exc}")
            raise
        except Exception as exc:
            logger.opt(exception=exc).error(
                f"[{func.__qualname__}] unexpected {type(exc).__name__}: {exc}"
            )
            raise

    return wrapper
