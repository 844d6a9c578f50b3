from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import List, Optional, Tuple

import pytest

from openapi_resources.backend import StaticBackendConfiguration
from openapi_resources.errors import (
    BackendConfigurationError,
    MissingBackendConfigError,
    MissingInstanceIDError,
    MissingParentIDsError,
    TooManyParentIDsError,
    UnsupportedCharacterError,
)
from openapi_resources.resources import ResourceDescriptor
from openapi_resources.urls import path_parameters, resolve_resource_path, resolve_resource_url


@dataclass
class StubBackend:
    host_name: str = "wwww.host.com"
    base: str = ""
    scheme_value: str = "http"
    regions_value: List[str] = field(default_factory=list)
    scheme_error: Optional[Exception] = None
    multi_region_error: Optional[Exception] = None

    def scheme(self) -> str:
        if self.scheme_error:
            raise self.scheme_error
        return self.scheme_value

    def host(self) -> str:
        return self.host_name

    def is_multi_region(self) -> bool:
        if self.multi_region_error:
            raise self.multi_region_error
        return "${region}" in self.host_name

    def regions(self) -> List[str]:
        return list(self.regions_value)

    def default_region(self) -> str:
        return self.regions_value[0]

    def host_for_region(self, region: str) -> str:
        return self.host_name.replace("${region}", region)

    def base_path(self) -> str:
        return self.base


def _resource(path: str, host: Optional[str] = None) -> ResourceDescriptor:
    return ResourceDescriptor(name="cdn", path=path, host=host)


@pytest.mark.parametrize(
    "path, parent_ids, expected",
    [
        ("/v1/cdns", [], "/v1/cdns"),
        ("/v1/cdns/{id}/firewall", ["parentID"], "/v1/cdns/parentID/firewall"),
        ("/v1/cdns/{id}/firewall/", ["parentID"], "/v1/cdns/parentID/firewall/"),
        ("/v1/cdns/{cdn_id}/v2/firewalls/{fw_id}/rules", ["cdnID", "fwID"], "/v1/cdns/cdnID/v2/firewalls/fwID/rules"),
        ("/v1/cdns/{cdn_id}/firewalls/{fw_id}/rules", ["cdnID", "fwID"], "/v1/cdns/cdnID/firewalls/fwID/rules"),
        ("/v1/cdns//firewalls", ["cdnID"], "/v1/cdns/cdnID/firewalls"),
        ("/v1/cdns/{{parent_id}}/firewalls", ["parentID"], "/v1/cdns/{{parent_id}}/firewalls"),
        ("/v1/cdns", ["ignored"], "/v1/cdns"),
    ],
)
def test_resolve_resource_path(path: str, parent_ids: List[str], expected: str) -> None:
    assert resolve_resource_path(path, parent_ids) == expected


def test_path_parameters_skip_double_braces() -> None:
    assert path_parameters("/v1/{a}/b/{{c}}/d/{e}") == ["{a}", "{e}"]


def test_too_many_parent_ids() -> None:
    with pytest.raises(TooManyParentIDsError) as exc:
        resolve_resource_path("/v1/cdns/{id}/firewall", ["cdnID", "fwID"])
    assert (
        str(exc.value)
        == "could not resolve sub-resource path correctly '/v1/cdns/{id}/firewall' with the given ids - "
        "more ids than path params: [cdnID fwID]"
    )


def test_missing_parent_ids() -> None:
    with pytest.raises(MissingParentIDsError) as exc:
        resolve_resource_path("/v1/cdns/{cdn_id}/firewalls/{fw_id}/rules", ["cdnID"])
    assert (
        str(exc.value)
        == "could not resolve sub-resource path correctly '/v1/cdns/{cdn_id}/firewalls/{fw_id}/rules' "
        "with the given ids - missing ids to resolve the path params properly: [cdnID]"
    )


def test_missing_parent_ids_for_empty_segment() -> None:
    with pytest.raises(MissingParentIDsError):
        resolve_resource_path("/v1/cdns//firewalls", [])


def test_parent_ids_with_slash() -> None:
    with pytest.raises(UnsupportedCharacterError) as exc:
        resolve_resource_path("/v1/cdns/{id}/firewall", ["cdn/ID"])
    assert (
        str(exc.value)
        == "could not resolve sub-resource path correctly '/v1/cdns/{id}/firewall' due to parent IDs "
        "([cdn/ID]) containing not supported characters (forward slashes)"
    )


def test_collection_url() -> None:
    url = resolve_resource_url(_resource("/v1/cdns"), StubBackend())
    assert url == "http://wwww.host.com/v1/cdns"


def test_sub_resource_collection_url() -> None:
    url = resolve_resource_url(
        _resource("/v1/cdns/{cdn_id}/firewalls"), StubBackend(), parent_ids=["parentID"]
    )
    assert url == "http://wwww.host.com/v1/cdns/parentID/firewalls"


def test_instance_url() -> None:
    url = resolve_resource_url(_resource("/v1/cdns"), StubBackend(), instance_id="1234")
    assert url == "http://wwww.host.com/v1/cdns/1234"


def test_instance_url_with_trailing_slash_path() -> None:
    url = resolve_resource_url(_resource("/v1/cdns/"), StubBackend(), instance_id="1234")
    assert url == "http://wwww.host.com/v1/cdns/1234"


def test_sub_resource_instance_url() -> None:
    url = resolve_resource_url(
        _resource("/v1/cdns/{cdn_id}/v1/firewalls"),
        StubBackend(),
        parent_ids=["parentID"],
        instance_id="instanceID",
    )
    assert url == "http://wwww.host.com/v1/cdns/parentID/v1/firewalls/instanceID"


def test_url_is_stable_across_calls() -> None:
    resource = _resource("/v1/cdns/{cdn_id}/firewalls")
    backend = StubBackend()
    first = resolve_resource_url(resource, backend, parent_ids=["a"], instance_id="b")
    second = resolve_resource_url(resource, backend, parent_ids=["a"], instance_id="b")
    assert first == second == "http://wwww.host.com/v1/cdns/a/firewalls/b"


@pytest.mark.parametrize(
    "base_path, path, expected",
    [
        ("/api", "/v1/cdns", "http://wwww.host.com/api/v1/cdns"),
        ("/api/", "/v1/cdns", "http://wwww.host.com/api/v1/cdns"),
        ("api", "/v1/cdns", "http://wwww.host.com/api/v1/cdns"),
        ("/", "/v1/cdns", "http://wwww.host.com/v1/cdns"),
        ("", "v1/cdns", "http://wwww.host.com/v1/cdns"),
    ],
)
def test_base_path_normalisation(base_path: str, path: str, expected: str) -> None:
    url = resolve_resource_url(_resource(path), StubBackend(base=base_path))
    assert url == expected


def test_https_scheme() -> None:
    url = resolve_resource_url(_resource("/v1/cdns"), StubBackend(scheme_value="https"))
    assert url == "https://wwww.host.com/v1/cdns"


def test_resource_host_override() -> None:
    url = resolve_resource_url(_resource("/v1/cdns", host="other.host.com"), StubBackend())
    assert url == "http://other.host.com/v1/cdns"


def test_multi_region_uses_provider_region() -> None:
    backend = StubBackend(host_name="api.${region}.host.com", regions_value=["rst1", "dub1"])
    url = resolve_resource_url(_resource("/v1/cdns"), backend, region="dub1")
    assert url == "http://api.dub1.host.com/v1/cdns"


def test_multi_region_defaults_to_first_region() -> None:
    backend = StubBackend(host_name="api.${region}.host.com", regions_value=["rst1", "dub1"])
    url = resolve_resource_url(_resource("/v1/cdns"), backend)
    assert url == "http://api.rst1.host.com/v1/cdns"


def test_missing_host() -> None:
    with pytest.raises(MissingBackendConfigError) as exc:
        resolve_resource_url(_resource("/v1/cdns"), StubBackend(host_name=""))
    assert (
        str(exc.value)
        == "host and path are mandatory attributes to get the resource URL - host[''], path['/v1/cdns']"
    )


def test_missing_path() -> None:
    with pytest.raises(MissingBackendConfigError):
        resolve_resource_url(_resource(""), StubBackend())


def test_empty_instance_id() -> None:
    with pytest.raises(MissingInstanceIDError) as exc:
        resolve_resource_url(_resource("/v1/cdns"), StubBackend(), instance_id="")
    assert "required instance id value is missing" in str(exc.value)


def test_empty_instance_id_is_checked_before_backend() -> None:
    backend = StubBackend(scheme_error=BackendConfigurationError("boom"))
    with pytest.raises(MissingInstanceIDError):
        resolve_resource_url(_resource("/v1/cdns"), backend, instance_id="")


def test_instance_id_with_slash() -> None:
    with pytest.raises(UnsupportedCharacterError) as exc:
        resolve_resource_url(_resource("/v1/cdns"), StubBackend(), instance_id="12/34")
    assert (
        str(exc.value)
        == "instance ID (12/34) contains not supported characters (forward slashes)"
    )


def test_backend_errors_propagate() -> None:
    error = BackendConfigurationError("scheme lookup failed")
    with pytest.raises(BackendConfigurationError) as exc:
        resolve_resource_url(_resource("/v1/cdns"), StubBackend(scheme_error=error))
    assert exc.value is error

    error = BackendConfigurationError("region lookup failed")
    with pytest.raises(BackendConfigurationError) as exc:
        resolve_resource_url(_resource("/v1/cdns"), StubBackend(multi_region_error=error))
    assert exc.value is error


def test_url_errors_from_parent_ids_propagate() -> None:
    with pytest.raises(TooManyParentIDsError):
        resolve_resource_url(
            _resource("/v1/cdns/{id}/firewall"), StubBackend(), parent_ids=["a", "b"]
        )


def test_with_spec_backend_configuration() -> None:
    backend = StaticBackendConfiguration(
        host_name="api.${region}.example.com",
        base_path_value="/api/",
        schemes=("http", "https"),
        region_names=("us-west1", "us-east1"),
    )
    url = resolve_resource_url(
        _resource("/v1/cdns/{cdn_id}/firewalls"),
        backend,
        parent_ids=["42"],
        instance_id="fw1",
        region="us-east1",
    )
    assert url == "https://api.us-east1.example.com/api/v1/cdns/42/firewalls/fw1"


def test_parent_id_round_trip() -> None:
    parent_ids: Tuple[str, ...] = ("cdn1", "fw2")
    path = "/v1/cdns/{cdn_id}/firewalls/{fw_id}/rules"
    resolved = resolve_resource_path(path, parent_ids)
    segments = resolved.strip("/").split("/")
    assert [segments[2], segments[4]] == list(parent_ids)


def test_resource_descriptor_carries_only_routing_data() -> None:
    resource = ResourceDescriptor(name="cdn", path="/v1/cdns")
    assert [item.name for item in fields(resource)] == [
        "name",
        "path",
        "root_operations",
        "instance_operations",
        "host",
    ]
