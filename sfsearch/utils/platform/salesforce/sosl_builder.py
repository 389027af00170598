"""SOSL search builder: per-object options, query composition, result partitioning.

One builder instance holds the state of a single search session. It is not
safe to share between threads.

Example:
    builder = SOSLQueryBuilder(sf)
    builder.set_search_scope(SearchScope.NAME_FIELDS)
    builder.set_search_objects(["Account", "Contact"])
    builder.set_fields_for_object("Account", ["Name", "BillingCity"])
    builder.set_limit_for_object("Account", 25)
    if builder.find("Acme"):
        accounts = builder.get_results_for_object("Account")
    else:
        print(builder.get_error())
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple, Union

from simple_salesforce import Salesforce
from simple_salesforce.exceptions import SalesforceError

from ...config.constants import ID_FIELD
from ...logging.framework import SmartLogger
from .exceptions import (
    InvalidArgumentError,
    NotConfiguredError,
    SearchExecutionFailed,
    UnknownObjectError,
)
from .soql_helpers import quote_search_term, unique_fields

logger = SmartLogger("search")

Record = Mapping[str, Any]


class SearchScope(Enum):
    """Field categories a SOSL search looks in."""
    ALL_FIELDS = "ALL_FIELDS"
    NAME_FIELDS = "NAME_FIELDS"
    EMAIL_FIELDS = "EMAIL_FIELDS"
    PHONE_FIELDS = "PHONE_FIELDS"
    SIDEBAR_FIELDS = "SIDEBAR_FIELDS"

    @property
    def token(self) -> str:
        """Query-language form, e.g. ``NAME FIELDS``."""
        return self.value.replace("_", " ")

    @classmethod
    def coerce(cls, value: Union['SearchScope', str]) -> 'SearchScope':
        """Accept a member, its name, or its token (any case)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().upper().replace(" ", "_")
            for member in cls:
                if member.value == normalized:
                    return member
        raise InvalidArgumentError(
            f"Unknown search scope {value!r}. Expected one of: "
            f"{', '.join(member.value for member in cls)}"
        )


@dataclass
class ObjectSearchOptions:
    """Fields, filter and limit for one object type in the RETURNING clause."""
    fields: List[str] = field(default_factory=lambda: [ID_FIELD])
    condition: Optional[str] = None
    limit: Optional[int] = None

    def clause(self, object_name: str) -> str:
        """Render ``Name (f1, f2 WHERE ... LIMIT n)``, omitting empty parts."""
        parts = [", ".join(self.fields)]
        if self.condition:
            parts.append(f"WHERE {self.condition}")
        if self.limit is not None:
            parts.append(f"LIMIT {self.limit}")
        return f"{object_name} ({' '.join(parts)})"


class SOSLQueryBuilder:
    """Builds and runs one multi-object SOSL search at a time.

    Configuration mistakes raise immediately. A search that Salesforce
    rejects does not raise: ``find`` returns ``False`` and the message is
    available from ``get_error()``.
    """

    def __init__(self, sf: Salesforce):
        self.sf = sf
        self._scope: Optional[SearchScope] = None
        self._objects: Dict[str, ObjectSearchOptions] = {}
        self._results: Dict[str, Tuple[Record, ...]] = {}
        self._failure: Optional[SearchExecutionFailed] = None

    # -- configuration -----------------------------------------------------

    def set_search_scope(self, scope: Union[SearchScope, str]) -> 'SOSLQueryBuilder':
        """Set the field scope for the next search."""
        self._scope = SearchScope.coerce(scope)
        return self

    def set_search_objects(self, names: Iterable[str]) -> 'SOSLQueryBuilder':
        """Replace the registered object types, resetting all per-object options."""
        if isinstance(names, str):
            raise InvalidArgumentError("Object names must be a list of strings, not a single string")

        objects: Dict[str, ObjectSearchOptions] = {}
        for name in names:
            if not isinstance(name, str) or not name.strip():
                raise InvalidArgumentError(f"Invalid object name: {name!r}")
            objects[name] = ObjectSearchOptions()

        if not objects:
            raise InvalidArgumentError("At least one object type is required")

        self._objects = objects
        return self

    def set_fields_for_object(self, name: str, fields: Iterable[str]) -> 'SOSLQueryBuilder':
        """Return ``Id`` plus ``fields`` for ``name``; repeated names are dropped."""
        options = self._options_for(name)
        if isinstance(fields, str):
            raise InvalidArgumentError("Fields must be a list of strings, not a single string")
        fields = list(fields)
        for field_name in fields:
            if not isinstance(field_name, str) or not field_name.strip():
                raise InvalidArgumentError(f"Invalid field name for {name}: {field_name!r}")
        options.fields = [ID_FIELD, *unique_fields(fields, exclude=(ID_FIELD,))]
        return self

    def set_condition_for_object(self, name: str, condition: Optional[str]) -> 'SOSLQueryBuilder':
        """Set the WHERE fragment for ``name``.

        The text is used verbatim; it is not escaped or validated.
        """
        options = self._options_for(name)
        options.condition = condition if condition and condition.strip() else None
        return self

    def set_limit_for_object(self, name: str, limit: int) -> 'SOSLQueryBuilder':
        """Cap the number of records returned for ``name``."""
        options = self._options_for(name)
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise InvalidArgumentError(f"Limit for {name} must be a positive integer, got {limit!r}")
        options.limit = limit
        return self

    def get_search_objects(self) -> Set[str]:
        """Names of the registered object types."""
        return set(self._objects)

    def get_search_scope(self) -> Optional[SearchScope]:
        """Scope for the next search, or None if not set yet."""
        return self._scope

    def get_options(self, name: str) -> ObjectSearchOptions:
        """Copy of the options registered for ``name``."""
        options = self._options_for(name)
        return ObjectSearchOptions(list(options.fields), options.condition, options.limit)

    def _options_for(self, name: str) -> ObjectSearchOptions:
        try:
            return self._objects[name]
        except KeyError:
            raise UnknownObjectError(name) from None

    # -- composition -------------------------------------------------------

    def build(self, term: str) -> str:
        """Compose the SOSL query for ``term`` without running it."""
        if self._scope is None:
            raise NotConfiguredError("Search scope must be set before searching")
        if not self._objects:
            raise NotConfiguredError("At least one object type must be registered before searching")
        if not isinstance(term, str) or not term.strip():
            raise InvalidArgumentError("Search term must be a non-empty string")

        returning = ", ".join(options.clause(name) for name, options in self._objects.items())
        return f"FIND {quote_search_term(term)} IN {self._scope.token} RETURNING {returning}"

    # -- execution ---------------------------------------------------------

    def find(self, term: str) -> bool:
        """Run the search once and store the records grouped by object type.

        Returns:
            True on success. False when Salesforce rejected the query; the
            previous results are kept and ``get_error()`` explains why.
        """
        sosl = self.build(term)
        logger.info("sosl_query_built",
                    operation="find",
                    scope=self._scope.value,
                    object_types=list(self._objects),
                    query=sosl)

        try:
            response = self.sf.search(sosl)
        except SalesforceError as e:
            message, error_code = _describe_failure(e)
            self._failure = SearchExecutionFailed(message, error_code=error_code, query=sosl)
            logger.warning("sosl_search_failed",
                           operation="find",
                           error=message,
                           error_code=error_code,
                           error_type=type(e).__name__)
            return False

        self._results = self._partition(_records_from(response))
        self._failure = None
        logger.info("sosl_search_complete",
                    operation="find",
                    total_results=self.total_results,
                    results_by_type={name: len(rows) for name, rows in self._results.items()})
        return True

    @staticmethod
    def _partition(records: Iterable[Record]) -> Dict[str, Tuple[Record, ...]]:
        grouped: Dict[str, List[Record]] = {}
        for record in records:
            object_type = _record_type(record)
            if object_type is None:
                logger.warning("sosl_record_without_type",
                               operation="find",
                               record_id=record.get(ID_FIELD) if isinstance(record, Mapping) else None)
                continue
            grouped.setdefault(object_type, []).append(record)
        return {name: tuple(rows) for name, rows in grouped.items() if rows}

    # -- results -----------------------------------------------------------

    def get_results_for_object(self, name: str) -> Tuple[Record, ...]:
        """Records of type ``name`` from the last successful search."""
        return self._results.get(name, ())

    def get_results(self) -> Mapping[str, Tuple[Record, ...]]:
        """Read-only snapshot of the last successful search."""
        return MappingProxyType(dict(self._results))

    @property
    def total_results(self) -> int:
        return sum(len(rows) for rows in self._results.values())

    def get_error(self) -> Optional[str]:
        return self._failure.message if self._failure else None

    def get_failure(self) -> Optional[SearchExecutionFailed]:
        return self._failure


def _records_from(response: Any) -> List[Record]:
    """Flatten a search response into records.

    Salesforce answers ``{"searchRecords": [...]}``; an empty body comes back
    as None. Nested lists are treated as per-object record groups.
    """
    if not response:
        return []
    if isinstance(response, Mapping):
        response = response.get("searchRecords") or []

    records: List[Record] = []
    for item in response:
        if isinstance(item, (list, tuple)):
            records.extend(item)
        else:
            records.append(item)
    return records


def _record_type(record: Any) -> Optional[str]:
    if not isinstance(record, Mapping):
        return None
    attributes = record.get("attributes")
    if isinstance(attributes, Mapping):
        return attributes.get("type")
    return None


def _describe_failure(error: SalesforceError) -> Tuple[str, Optional[str]]:
    """Pull the API message and error code out of a Salesforce error."""
    content = getattr(error, "content", None)
    if isinstance(content, list) and content and isinstance(content[0], Mapping):
        content = content[0]
    if isinstance(content, Mapping):
        message = content.get("message") or str(error)
        return message, content.get("errorCode")
    if isinstance(content, str) and content:
        return content, None
    return str(error), None
