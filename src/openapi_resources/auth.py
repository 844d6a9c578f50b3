"""Authentication of API requests from declared security schemes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Protocol, Sequence

import httpx

from .config import ProviderConfiguration
from .errors import AuthenticationError
from .naming import to_compliant_name


logger = logging.getLogger(__name__)


@dataclass
class AuthContext:
    headers: Dict[str, str] = field(default_factory=dict)
    # Empty when the request URL is left untouched.
    url: str = ""


class Authenticator(Protocol):
    async def prepare_auth(self, url: str, security_schemes: Sequence[str]) -> AuthContext: ...


@dataclass(frozen=True)
class SecurityScheme:
    name: str
    type: str
    parameter_name: str = "Authorization"
    location: str = "header"
    config_key: Optional[str] = None

    @property
    def credential_key(self) -> str:
        return self.config_key or to_compliant_name(self.name)


class SecuritySchemeAuthenticator:
    """Builds auth headers (or query parameters) for the schemes an operation
    declares, taking credentials from the provider configuration.

    Supported scheme types are ``api_key`` (header or query) and ``bearer``.
    """

    def __init__(
        self,
        schemes: Mapping[str, SecurityScheme],
        provider_configuration: ProviderConfiguration,
    ) -> None:
        self.schemes = dict(schemes)
        self.provider_configuration = provider_configuration

    async def prepare_auth(self, url: str, security_schemes: Sequence[str]) -> AuthContext:
        context = AuthContext()
        query: Dict[str, str] = {}

        for scheme_name in security_schemes:
            scheme = self.schemes.get(scheme_name)
            if scheme is None:
                raise AuthenticationError(f"security scheme '{scheme_name}' is not defined")
            credential = self.provider_configuration.value(scheme.credential_key)
            if credential is None:
                raise AuthenticationError(
                    f"security scheme '{scheme_name}' is missing the value. Please make sure the "
                    f"property '{scheme.credential_key}' is configured with a value in the provider configuration"
                )

            if scheme.type == "api_key":
                if scheme.location == "query":
                    query[scheme.parameter_name] = credential
                else:
                    context.headers[scheme.parameter_name] = credential
            elif scheme.type == "bearer":
                context.headers["Authorization"] = f"Bearer {credential}"
            else:
                raise AuthenticationError(
                    f"security scheme '{scheme_name}' has non supported type '{scheme.type}'"
                )
            logger.debug("Applied security scheme=%s type=%s", scheme_name, scheme.type)

        if query:
            context.url = str(httpx.URL(url).copy_merge_params(query))
        return context
