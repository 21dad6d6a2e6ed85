"""
Helper Utilities.

Provides exception chaining, dotted-path class loading for pluggable
components, and validation of write-target index names and query parsing.
"""

import importlib
import json
import string
from typing import Any, Dict, Optional, Type, TypeVar
from urllib.parse import unquote_plus

from .errors import ConfigurationError

T = TypeVar("T")

# Characters the store rejects in index names
_UNSUPPORTED_INDEX_NAME_CHARS = set('\\/*?"<>| ,#:')
_UNSUPPORTED_INDEX_NAME_PREFIXES = ("-", "_", "+")
_UPPERCASE_CHARS = set(string.ascii_uppercase)


def _make_exception(msg: str, exc_msg: Optional[BaseException] = None) -> str:
    """
    Builds an error message chaining an inner exception's message.
    Useful for adding context to low-level transport errors.

    Args:
        msg (str): The high-level error message.
        exc_msg (Optional[BaseException]): The original exception.

    Returns:
        str: A message combining both.
    """
    if exc_msg is None:
        return msg
    return f"{msg}\nInner err: {exc_msg}"


def _load_class(dotted_path: str, expected_base: Type[T]) -> Type[T]:
    """
    Imports `package.module.ClassName` and checks it derives from `expected_base`.

    Raises:
        ConfigurationError: If the path cannot be imported or the class has the
            wrong type.
    """
    module_name, _, class_name = dotted_path.rpartition(".")
    if not module_name or not class_name:
        raise ConfigurationError(f"'{dotted_path}' is not a dotted class path")
    try:
        module = importlib.import_module(module_name)
        cls = getattr(module, class_name)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(_make_exception(f"Cannot load class '{dotted_path}'", e)) from e
    if not isinstance(cls, type) or not issubclass(cls, expected_base):
        raise ConfigurationError(
            f"Class '{dotted_path}' is not a subclass of '{expected_base.__name__}'"
        )
    return cls


def _validate_index_name(name: Optional[str]):
    """
    Checks `name` is usable as a concrete write target.

    Read resources may be patterns or comma-separated lists and are not
    validated here.
    """
    if not name:
        raise ConfigurationError("Empty index name")
    if name in (".", ".."):
        raise ConfigurationError(f"Index name cannot be '{name}'")
    if name.startswith(_UNSUPPORTED_INDEX_NAME_PREFIXES):
        raise ConfigurationError(
            f"Index name '{name}' must not begin with any of {list(_UNSUPPORTED_INDEX_NAME_PREFIXES)}"
        )
    unsupported_chars = [ch for ch in name if ch in _UNSUPPORTED_INDEX_NAME_CHARS]
    if unsupported_chars:
        raise ConfigurationError(
            f"Index name contains invalid characters: {unsupported_chars}"
        )
    if any(ch in _UPPERCASE_CHARS for ch in name):
        raise ConfigurationError(f"Index name '{name}' must be lowercase")


def _parse_query(query: Optional[str]) -> Dict[str, Any]:
    """
    Turns the configured `opensearch.query` into a search body.

    Accepts a JSON body (`{"query": ...}` or a bare query object), a URI
    query (`?q=field:value`), or plain query-string text. An unset query
    matches all documents.

    Raises:
        ConfigurationError: If the value looks like JSON but does not parse.
    """
    if query is None or not query.strip():
        return {"query": {"match_all": {}}}
    text = query.strip()
    if text.startswith("{"):
        try:
            body = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigurationError(_make_exception(f"Invalid query '{text}'", e)) from e
        if not isinstance(body, dict):
            raise ConfigurationError(f"Query must be a JSON object, got '{text}'")
        return body if "query" in body else {"query": body}
    if text.startswith("?q="):
        text = unquote_plus(text[3:])
    return {"query": {"query_string": {"query": text}}}
