"""Resource URL resolution.

Resource paths may contain path parameters for parent resources, e.g.
``/v1/cdns/{cdn_id}/firewalls``. Only single-brace tokens are parameters;
``{{token}}`` is kept as literal text. An empty path segment (``//``) also
counts as a parameter so malformed paths cannot be resolved silently.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, List, Optional, Sequence

from .errors import (
    MissingBackendConfigError,
    MissingInstanceIDError,
    MissingParentIDsError,
    TooManyParentIDsError,
    UnsupportedCharacterError,
)

if TYPE_CHECKING:
    from .backend import BackendConfiguration
    from .resources import ResourceDescriptor


_PATH_PARAMETER = re.compile(r"(?<!\{)\{[^{}/]*\}(?!\})|//")
_EMPTY_SEGMENT = "//"


def path_parameters(path: str) -> List[str]:
    """Return the path parameters of ``path`` in the order they appear."""
    return [match.group(0) for match in _PATH_PARAMETER.finditer(path)]


def resolve_resource_path(path: str, parent_ids: Sequence[str]) -> str:
    matches = list(_PATH_PARAMETER.finditer(path))
    if not matches:
        # Nothing to resolve, parent ids do not apply to this path.
        return path
    if len(parent_ids) > len(matches):
        raise TooManyParentIDsError(path, parent_ids)
    if len(parent_ids) < len(matches):
        raise MissingParentIDsError(path, parent_ids)
    if any("/" in parent_id for parent_id in parent_ids):
        raise UnsupportedCharacterError.for_parent_ids(path, parent_ids)

    pieces: List[str] = []
    last = 0
    for match, parent_id in zip(matches, parent_ids):
        pieces.append(path[last : match.start()])
        if match.group(0) == _EMPTY_SEGMENT:
            pieces.append(f"/{parent_id}/")
        else:
            pieces.append(parent_id)
        last = match.end()
    pieces.append(path[last:])
    return "".join(pieces)


def resolve_resource_url(
    resource: "ResourceDescriptor",
    backend: "BackendConfiguration",
    parent_ids: Sequence[str] = (),
    instance_id: Optional[str] = None,
    region: Optional[str] = None,
) -> str:
    """Build the collection URL of ``resource``, or its instance URL when
    ``instance_id`` is given.

    ``region`` is the provider supplied region, used when the backend is
    multi-region; the backend default region applies otherwise. Backend
    configuration failures propagate unchanged.
    """
    if instance_id is not None and instance_id == "":
        raise MissingInstanceIDError()

    scheme = backend.scheme()
    host = _resolve_host(resource, backend, region)
    base_path = backend.base_path()
    if not host or not resource.path:
        raise MissingBackendConfigError(host, resource.path)

    resource_path = resolve_resource_path(resource.path, list(parent_ids))
    if not resource_path.startswith("/"):
        resource_path = "/" + resource_path
    url = f"{scheme}://{host}{_normalize_base_path(base_path)}{resource_path}"
    if instance_id is None:
        return url

    if "/" in instance_id:
        raise UnsupportedCharacterError.for_instance_id(instance_id)
    if url.endswith("/"):
        url = url[:-1]
    return f"{url}/{instance_id}"


def _resolve_host(
    resource: "ResourceDescriptor", backend: "BackendConfiguration", region: Optional[str]
) -> str:
    if resource.host:
        return resource.host
    if backend.is_multi_region():
        selected = region or backend.default_region()
        return backend.host_for_region(selected)
    return backend.host()


def _normalize_base_path(base_path: str) -> str:
    stripped = (base_path or "").strip("/")
    if not stripped:
        return ""
    return "/" + stripped
