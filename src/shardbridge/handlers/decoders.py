"""
Document Decoders.

A decoder turns one search hit into the value handed to the host. The
[`ScrollReader`][shardbridge.handlers.ScrollReader] is generic over its
decoder; the concrete strategy is picked from the settings:

* `opensearch.ser.reader.value.class`: a dotted path to a
  [`ValueDecoder`][shardbridge.handlers.ValueDecoder] subclass;
* `opensearch.output.json = true`: [`RawJsonDecoder`][shardbridge.handlers.RawJsonDecoder];
* otherwise: [`MapDecoder`][shardbridge.handlers.MapDecoder].
"""

import json
from abc import ABC, abstractmethod
from fnmatch import fnmatchcase
from typing import Any, Dict, List, Set

from ..cfg import Settings
from ..enum import FieldPresenceValidation
from ..errors import DecodeError
from ..helpers import _load_class
from ..logging_config import get_logger

# Set the hierarchical logger
logger = get_logger(__name__)

_METADATA_KEYS = ("_index", "_id", "_routing", "_score")


class ValueDecoder(ABC):
    """
    Base class for hit decoders.

    Subclasses are instantiated once per reader with the reader's resolved
    settings.
    """

    def __init__(self, settings: Settings):
        self._settings = settings

    def _source(self, hit: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(hit, dict):
            raise DecodeError(f"Search hit is not an object: '{hit!r}'")
        source = hit.get("_source", {})
        if not isinstance(source, dict):
            raise DecodeError(
                f"Document '{hit.get('_id')}' has a non-object source: '{source!r}'"
            )
        return source

    @abstractmethod
    def decode(self, hit: Dict[str, Any]) -> Any:
        """
        Decodes one search hit.

        Raises:
            DecodeError: If the hit cannot be turned into a value.
        """
        pass


class RawJsonDecoder(ValueDecoder):
    """Returns the document source as compact JSON text."""

    def decode(self, hit: Dict[str, Any]) -> Any:
        source = self._source(hit)
        try:
            return json.dumps(source, separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Cannot encode document '{hit.get('_id')}': '{e}'") from e


class MapDecoder(ValueDecoder):
    """
    Returns the document source as a dictionary.

    Applies, in order: field include/exclude filtering, empty-string to `None`
    conversion, field presence validation, and the optional metadata field.
    """

    def __init__(self, settings: Settings):
        super().__init__(settings)
        self._include: List[str] = settings.read_field_include
        self._exclude: List[str] = settings.read_field_exclude
        self._empty_as_null: bool = settings.read_field_empty_as_null
        self._presence: FieldPresenceValidation = settings.read_field_presence_validation
        self._metadata: bool = settings.read_metadata
        self._metadata_field: str = settings.read_metadata_field
        self._metadata_version: bool = settings.read_metadata_version
        self._warned_missing: Set[str] = set()
        """Fields already reported as missing, to warn once per reader"""

    def decode(self, hit: Dict[str, Any]) -> Any:
        source = self._source(hit)
        if self._include or self._exclude:
            value = _filter_fields(source, self._include, self._exclude, "")
        else:
            value = dict(source)

        if self._empty_as_null:
            value = _empty_as_null(value)

        if self._presence != FieldPresenceValidation.Ignore:
            self._validate_presence(hit.get("_id"), source)

        if self._metadata:
            metadata = {key: hit[key] for key in _METADATA_KEYS if key in hit}
            if self._metadata_version and "_version" in hit:
                metadata["_version"] = hit["_version"]
            value[self._metadata_field] = metadata
        return value

    def _validate_presence(self, doc_id: Any, source: Dict[str, Any]) -> None:
        for field in self._include:
            if any(ch in field for ch in "*?["):
                continue
            if _has_path(source, field):
                continue
            if self._presence == FieldPresenceValidation.Strict:
                raise DecodeError(f"Field '{field}' missing from document '{doc_id}'")
            if field not in self._warned_missing:
                self._warned_missing.add(field)
                logger.warning(
                    f"Field '{field}' not found in document '{doc_id}'; "
                    "further occurrences will not be reported"
                )


def _matches(path: str, patterns: List[str]) -> bool:
    """True if `path` is matched by, or nested under, one of the patterns."""
    return any(fnmatchcase(path, p) or path.startswith(p + ".") for p in patterns)


def _is_ancestor(path: str, patterns: List[str]) -> bool:
    return any(p.startswith(path + ".") for p in patterns)


def _filter_fields(
    doc: Dict[str, Any], include: List[str], exclude: List[str], prefix: str
) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for key, value in doc.items():
        path = f"{prefix}{key}"
        if _matches(path, exclude):
            continue
        if not include or _matches(path, include):
            if isinstance(value, dict) and exclude:
                value = _filter_fields(value, [], exclude, path + ".")
            result[key] = value
        elif isinstance(value, dict) and _is_ancestor(path, include):
            nested = _filter_fields(value, include, exclude, path + ".")
            if nested:
                result[key] = nested
    return result


def _empty_as_null(value: Any) -> Any:
    if isinstance(value, str):
        return None if value == "" else value
    if isinstance(value, dict):
        return {k: _empty_as_null(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_empty_as_null(v) for v in value]
    return value


def _has_path(doc: Dict[str, Any], path: str) -> bool:
    if path in doc:
        return True
    node: Any = doc
    for part in path.split("."):
        if not isinstance(node, dict) or part not in node:
            return False
        node = node[part]
    return True


def resolve_decoder(settings: Settings) -> ValueDecoder:
    """Instantiates the decoder selected by `settings`."""
    class_path = settings.serializer_value_reader_class
    if class_path:
        return _load_class(class_path, ValueDecoder)(settings)
    if settings.output_as_json:
        return RawJsonDecoder(settings)
    return MapDecoder(settings)
