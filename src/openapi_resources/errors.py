"""Errors raised while modelling resources and calling their APIs."""

from __future__ import annotations

from typing import Optional, Sequence


def _format_ids(ids: Sequence[str]) -> str:
    return "[" + " ".join(ids) + "]"


class ResourceClientError(Exception):
    pass


# Schema model


class SchemaError(ResourceClientError):
    pass


class InvalidPropertyError(SchemaError):
    pass


class PropertyNotFoundError(SchemaError):
    def __init__(self, name: str, kind: str = "name") -> None:
        self.name = name
        super().__init__(
            f"property with {kind} '{name}' not existing in resource schema definition"
        )


class UnsupportedTypeError(SchemaError):
    def __init__(self, property_name: str, property_type: object) -> None:
        self.property_name = property_name
        self.property_type = property_type
        super().__init__(
            f"non supported type '{property_type}' for property '{property_name}'"
        )


class CyclicSchemaError(SchemaError):
    def __init__(self, path: Sequence[str]) -> None:
        self.path = list(path)
        super().__init__(
            "schema definition references itself through '%s'" % ".".join(self.path)
        )


class NoIdentifierFoundError(SchemaError):
    def __init__(self) -> None:
        super().__init__("could not find any identifier property in the resource schema definition")


class NoStatusFoundError(SchemaError):
    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(
            message or "could not find any status property in the resource schema definition"
        )


# URL resolution


class URLResolutionError(ResourceClientError):
    pass


class MissingBackendConfigError(URLResolutionError):
    def __init__(self, host: str, path: str) -> None:
        self.host = host
        self.path = path
        super().__init__(
            f"host and path are mandatory attributes to get the resource URL - host['{host}'], path['{path}']"
        )


class TooManyParentIDsError(URLResolutionError):
    def __init__(self, path: str, parent_ids: Sequence[str]) -> None:
        self.path = path
        self.parent_ids = list(parent_ids)
        super().__init__(
            f"could not resolve sub-resource path correctly '{path}' with the given ids - "
            f"more ids than path params: {_format_ids(self.parent_ids)}"
        )


class MissingParentIDsError(URLResolutionError):
    def __init__(self, path: str, parent_ids: Sequence[str]) -> None:
        self.path = path
        self.parent_ids = list(parent_ids)
        super().__init__(
            f"could not resolve sub-resource path correctly '{path}' with the given ids - "
            f"missing ids to resolve the path params properly: {_format_ids(self.parent_ids)}"
        )


class UnsupportedCharacterError(URLResolutionError):
    def __init__(self, message: str, values: Sequence[str], path: Optional[str] = None) -> None:
        self.path = path
        self.values = list(values)
        super().__init__(message)

    @classmethod
    def for_parent_ids(cls, path: str, parent_ids: Sequence[str]) -> "UnsupportedCharacterError":
        return cls(
            f"could not resolve sub-resource path correctly '{path}' due to parent IDs "
            f"({_format_ids(parent_ids)}) containing not supported characters (forward slashes)",
            parent_ids,
            path=path,
        )

    @classmethod
    def for_instance_id(cls, instance_id: str) -> "UnsupportedCharacterError":
        return cls(
            f"instance ID ({instance_id}) contains not supported characters (forward slashes)",
            [instance_id],
        )


class MissingInstanceIDError(URLResolutionError):
    def __init__(self) -> None:
        super().__init__(
            "could not build the resource instance URL: required instance id value is missing"
        )


class BackendConfigurationError(ResourceClientError):
    pass


# Request construction


class AuthenticationError(ResourceClientError):
    pass


class RequestError(ResourceClientError):
    pass


class UnsupportedMethodError(RequestError):
    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"method '{method}' not supported")


class MissingRequiredHeaderError(RequestError):
    def __init__(self, header: str, config_key: str) -> None:
        self.header = header
        self.config_key = config_key
        super().__init__(
            f"required header '{header}' is missing the value. Please make sure the property "
            f"'{config_key}' is configured with a value in the provider configuration"
        )


class AuthenticationFailedError(RequestError):
    pass


class RequestConfigurationError(RequestError):
    """A request could not be built; ``cause`` holds the underlying error."""

    def __init__(self, method: str, url: str, cause: Exception) -> None:
        self.method = method
        self.url = url
        self.cause = cause
        super().__init__(f"failed to configure the API request for {method} {url}: {cause}")


class TelemetryConfigurationError(ResourceClientError):
    pass
