"""Organization, user and object metadata accessors.

``OrgMetadataService`` is constructed explicitly around a Salesforce
connection. Lookups are cached per instance; create a new service to see
changes made in the org.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from simple_salesforce import Salesforce

from ...config.constants import CURRENT_USER_RESOURCE
from ...logging.framework import SmartLogger, log_execution
from .exceptions import InvalidArgumentError
from .soql_builder import SOQLQueryBuilder
from .soql_helpers import validate_namespace, validate_object_name

logger = SmartLogger("metadata")

_ORGANIZATION_FIELDS = ('Id', 'Name', 'OrganizationType', 'IsSandbox', 'InstanceName', 'NamespacePrefix')


@dataclass(frozen=True)
class OrgInfo:
    id: str
    name: str
    organization_type: Optional[str]
    is_sandbox: bool
    instance_name: Optional[str]
    namespace_prefix: Optional[str]


@dataclass(frozen=True)
class UserInfo:
    id: str
    name: Optional[str]
    username: Optional[str]
    email: Optional[str]


@dataclass(frozen=True)
class FieldInfo:
    """One field from an object describe."""
    name: str
    label: str
    type: str
    nillable: bool
    required: bool

    @classmethod
    def from_describe(cls, raw: Mapping[str, Any]) -> 'FieldInfo':
        nillable = bool(raw.get('nillable', True))
        # Required on insert: must be supplied and Salesforce won't fill it in
        required = bool(raw.get('createable', False)) and not nillable and not raw.get('defaultedOnCreate', False)
        return cls(
            name=raw['name'],
            label=raw.get('label', raw['name']),
            type=raw.get('type', 'string'),
            nillable=nillable,
            required=required,
        )


class OrgMetadataService:
    """Read-only accessors over org, user and describe metadata."""

    def __init__(self, sf: Salesforce):
        self.sf = sf
        self._org: Optional[OrgInfo] = None
        self._user: Optional[UserInfo] = None
        self._fields: Dict[str, List[FieldInfo]] = {}
        self._packages: Dict[str, bool] = {}

    def organization(self) -> OrgInfo:
        if self._org is None:
            query = (SOQLQueryBuilder()
                     .select(*_ORGANIZATION_FIELDS)
                     .from_object('Organization')
                     .limit(1)
                     .build())
            records = self.sf.query(query).get('records', [])
            if not records:
                raise InvalidArgumentError("Organization record is not visible to the current user")
            row = records[0]
            self._org = OrgInfo(
                id=row['Id'],
                name=row['Name'],
                organization_type=row.get('OrganizationType'),
                is_sandbox=bool(row.get('IsSandbox')),
                instance_name=row.get('InstanceName'),
                namespace_prefix=row.get('NamespacePrefix'),
            )
            logger.info("organization_loaded", org_id=self._org.id, is_sandbox=self._org.is_sandbox)
        return self._org

    @property
    def org_id(self) -> str:
        return self.organization().id

    @property
    def org_name(self) -> str:
        return self.organization().name

    @property
    def is_sandbox(self) -> bool:
        return self.organization().is_sandbox

    def current_user(self) -> UserInfo:
        """The user the connection is authenticated as."""
        if self._user is None:
            payload = self.sf.restful(CURRENT_USER_RESOURCE)
            self._user = UserInfo(
                id=payload['id'],
                name=payload.get('name'),
                username=payload.get('username'),
                email=payload.get('email'),
            )
        return self._user

    @log_execution(component="metadata", include_result=False)
    def describe_fields(self, object_name: str) -> List[FieldInfo]:
        if not validate_object_name(object_name):
            raise InvalidArgumentError(f"Invalid object name: {object_name!r}")

        if object_name not in self._fields:
            describe = getattr(self.sf, object_name).describe()
            self._fields[object_name] = [FieldInfo.from_describe(raw) for raw in describe.get('fields', [])]
        return list(self._fields[object_name])

    def field_names(self, object_name: str) -> List[str]:
        return [info.name for info in self.describe_fields(object_name)]

    def required_fields(self, object_name: str) -> List[str]:
        """Fields that must be supplied when creating a record."""
        return [info.name for info in self.describe_fields(object_name) if info.required]

    def is_package_installed(self, namespace: str) -> bool:
        """Whether a managed package with ``namespace`` is licensed in this org."""
        if not validate_namespace(namespace):
            raise InvalidArgumentError(f"Invalid namespace prefix: {namespace!r}")

        key = namespace.lower()
        if key not in self._packages:
            query = (SOQLQueryBuilder()
                     .select('Id')
                     .from_object('PackageLicense')
                     .where('NamespacePrefix', namespace)
                     .limit(1)
                     .build())
            result = self.sf.query(query)
            self._packages[key] = bool(result.get('totalSize', 0) or result.get('records'))
            logger.info("package_check",
                        namespace=namespace,
                        installed=self._packages[key])
        return self._packages[key]
