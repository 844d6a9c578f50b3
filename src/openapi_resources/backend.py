"""Backend configuration: where the described API is served from."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Protocol, Sequence, Tuple

from .errors import BackendConfigurationError

if TYPE_CHECKING:
    from .config import Settings


REGION_PLACEHOLDER = "${region}"


class BackendConfiguration(Protocol):
    def scheme(self) -> str: ...

    def host(self) -> str: ...

    def is_multi_region(self) -> bool: ...

    def regions(self) -> List[str]: ...

    def default_region(self) -> str: ...

    def host_for_region(self, region: str) -> str: ...

    def base_path(self) -> str: ...


@dataclass(frozen=True)
class StaticBackendConfiguration:
    """Backend configuration taken from the API description.

    A host containing ``${region}`` makes the backend multi-region; the
    placeholder is replaced by one of ``regions`` when building URLs.
    """

    host_name: str
    base_path_value: str = ""
    schemes: Tuple[str, ...] = ()
    region_names: Tuple[str, ...] = ()

    @classmethod
    def from_settings(cls, settings: "Settings") -> "StaticBackendConfiguration":
        return cls(
            host_name=settings.backend_host,
            base_path_value=settings.backend_base_path,
            schemes=tuple(settings.backend_scheme_list()),
            region_names=tuple(settings.backend_region_list()),
        )

    def scheme(self) -> str:
        schemes = [scheme.lower() for scheme in self.schemes]
        if not schemes:
            return "http"
        for preferred in ("https", "http"):
            if preferred in schemes:
                return preferred
        raise BackendConfigurationError(
            f"backend schemes {list(self.schemes)} do not contain any of the supported ones [https http]"
        )

    def host(self) -> str:
        return self.host_name

    def is_multi_region(self) -> bool:
        if REGION_PLACEHOLDER not in self.host_name:
            return False
        if not self.region_names:
            raise BackendConfigurationError(
                f"multi-region host '{self.host_name}' is missing the list of regions"
            )
        return True

    def regions(self) -> List[str]:
        return list(self.region_names)

    def default_region(self) -> str:
        if not self.region_names:
            raise BackendConfigurationError("backend configuration does not declare any region")
        return self.region_names[0]

    def host_for_region(self, region: str) -> str:
        if region not in self.region_names:
            raise BackendConfigurationError(
                f"region '{region}' not matching allowed ones {_format(self.region_names)}"
            )
        return self.host_name.replace(REGION_PLACEHOLDER, region)

    def base_path(self) -> str:
        return self.base_path_value


def _format(values: Sequence[str]) -> str:
    return "[" + " ".join(values) + "]"
