"""Fluent SOQL builder used by the metadata lookups.

Every literal goes through ``format_soql_value``, so values are always
escaped. Cross-object text search goes through the SOSL builder instead.

Example:
    query = (SOQLQueryBuilder()
             .select('Id', 'Name')
             .from_object('Account')
             .where('Industry', 'Energy')
             .where('AnnualRevenue', SOQLOperator.GREATER_THAN, 1000000)
             .limit(10)
             .build())
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from .soql_helpers import format_soql_value


class SOQLOperator(Enum):
    EQUALS = "="
    NOT_EQUALS = "!="
    LIKE = "LIKE"
    NOT_LIKE = "NOT LIKE"
    IN = "IN"
    NOT_IN = "NOT IN"
    GREATER_THAN = ">"
    LESS_THAN = "<"
    GREATER_OR_EQUAL = ">="
    LESS_OR_EQUAL = "<="

    @property
    def takes_list(self) -> bool:
        return self in (SOQLOperator.IN, SOQLOperator.NOT_IN)


@dataclass
class SOQLCondition:
    """``field <operator> value`` with the value escaped on render."""
    field: str
    operator: SOQLOperator
    value: Any

    def to_query_string(self) -> str:
        if self.operator.takes_list:
            values = self.value if isinstance(self.value, (list, tuple)) else [self.value]
            rendered = f"({', '.join(format_soql_value(v) for v in values)})"
        else:
            rendered = format_soql_value(self.value)
        return f"{self.field} {self.operator.value} {rendered}"


class SOQLQueryBuilder:
    """Chainable SELECT builder; top-level conditions are ANDed."""

    def __init__(self):
        self._fields: List[str] = []
        self._object: Optional[str] = None
        self._conditions: List[SOQLCondition] = []
        self._limit: Optional[int] = None

    def select(self, *fields: str) -> 'SOQLQueryBuilder':
        self._fields.extend(fields)
        return self

    def from_object(self, object_name: str) -> 'SOQLQueryBuilder':
        self._object = object_name
        return self

    def where(self, field: str, operator: Any, value: Any = None) -> 'SOQLQueryBuilder':
        """Add a condition; ``where('Name', 'Acme')`` means equals."""
        if not isinstance(operator, SOQLOperator):
            operator, value = SOQLOperator.EQUALS, operator
        self._conditions.append(SOQLCondition(field, operator, value))
        return self

    def limit(self, count: int) -> 'SOQLQueryBuilder':
        self._limit = count
        return self

    def build(self) -> str:
        if not self._object:
            raise ValueError("FROM object is required")

        parts = [f"SELECT {', '.join(self._fields) or 'Id'}", f"FROM {self._object}"]
        if self._conditions:
            parts.append("WHERE " + " AND ".join(c.to_query_string() for c in self._conditions))
        if self._limit:
            parts.append(f"LIMIT {self._limit}")
        return " ".join(parts)

    def __str__(self) -> str:
        return self.build()
