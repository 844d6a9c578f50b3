"""Resource and operation descriptors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from .naming import to_compliant_name


@dataclass(frozen=True)
class HeaderParameter:
    name: str
    exposed_name: Optional[str] = None
    required: bool = False

    @property
    def config_key(self) -> str:
        """Provider configuration property holding the header value."""
        return self.exposed_name or to_compliant_name(self.name)


@dataclass(frozen=True)
class OperationDescriptor:
    header_parameters: Tuple[HeaderParameter, ...] = ()
    security_schemes: Tuple[str, ...] = ()
    responses: Mapping[int, str] = field(default_factory=dict)

    def expects_status(self, status_code: int) -> bool:
        if not self.responses:
            return True
        return status_code in self.responses


@dataclass(frozen=True)
class ResourceOperations:
    post: Optional[OperationDescriptor] = None
    get: Optional[OperationDescriptor] = None
    put: Optional[OperationDescriptor] = None
    delete: Optional[OperationDescriptor] = None


_EMPTY_OPERATION = OperationDescriptor()


@dataclass(frozen=True)
class ResourceDescriptor:
    name: str
    path: str
    root_operations: ResourceOperations = field(default_factory=ResourceOperations)
    instance_operations: ResourceOperations = field(default_factory=ResourceOperations)
    host: Optional[str] = None

    def operation_for(self, method: str, instance: bool) -> OperationDescriptor:
        operations = self.instance_operations if instance else self.root_operations
        operation = getattr(operations, method.lower(), None)
        return operation or _EMPTY_OPERATION
