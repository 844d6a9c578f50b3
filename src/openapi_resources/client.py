"""Generic CRUD client for resources described by an API description."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import httpx

from .auth import Authenticator, SecurityScheme, SecuritySchemeAuthenticator
from .backend import BackendConfiguration, StaticBackendConfiguration
from .config import DEFAULT_USER_AGENT, ProviderConfiguration, Settings
from .errors import (
    AuthenticationFailedError,
    MissingRequiredHeaderError,
    RequestConfigurationError,
    UnsupportedMethodError,
)
from .logging import redact_headers, redact_payload
from .resources import HeaderParameter, OperationDescriptor, ResourceDescriptor
from .telemetry import TelemetryHandler, TelemetryResourceOperation
from .transport import HttpxTransport, Transport
from .urls import resolve_resource_url

logger = logging.getLogger(__name__)


USER_AGENT_HEADER = "User-Agent"
SUPPORTED_METHODS = ("POST", "PUT", "GET", "DELETE")

ResponsePayload = Union[Dict[str, Any], List[Any]]


class ProviderClient:
    """
    Performs create, list, read, update and delete calls for a resource.

    Verbs map to operations as follows:
    - post (create) and list target the collection URL
    - get (read), put (update) and delete target the instance URL

    Each call resolves the URL first; URL errors are raised as they are. Header
    and auth failures are raised as ``RequestConfigurationError`` carrying the
    verb and URL; transport errors pass through unchanged.

    When a telemetry handler is configured every verb submits a resource
    counter before the request; telemetry failures are logged and ignored.
    """

    def __init__(
        self,
        backend: BackendConfiguration,
        transport: Transport,
        authenticator: Authenticator,
        provider_configuration: Optional[ProviderConfiguration] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        telemetry_handler: Optional[TelemetryHandler] = None,
    ) -> None:
        self.backend = backend
        self.transport = transport
        self.authenticator = authenticator
        self.provider_configuration = provider_configuration or ProviderConfiguration()
        self.user_agent = user_agent
        self._telemetry_handler = telemetry_handler

    @property
    def telemetry_handler(self) -> Optional[TelemetryHandler]:
        return self._telemetry_handler

    async def post(
        self,
        resource: ResourceDescriptor,
        request_payload: Any,
        response_payload: Optional[ResponsePayload] = None,
        parent_ids: Sequence[str] = (),
    ) -> httpx.Response:
        await self._submit_telemetry(resource, TelemetryResourceOperation.CREATE)
        url = self._resource_url(resource, parent_ids)
        operation = resource.operation_for("post", instance=False)
        return await self.perform_request("POST", url, operation, request_payload, response_payload)

    async def list(
        self,
        resource: ResourceDescriptor,
        response_payload: Optional[ResponsePayload] = None,
        parent_ids: Sequence[str] = (),
    ) -> httpx.Response:
        await self._submit_telemetry(resource, TelemetryResourceOperation.READ)
        url = self._resource_url(resource, parent_ids)
        operation = resource.operation_for("get", instance=False)
        return await self.perform_request("GET", url, operation, None, response_payload)

    async def get(
        self,
        resource: ResourceDescriptor,
        instance_id: str,
        response_payload: Optional[ResponsePayload] = None,
        parent_ids: Sequence[str] = (),
    ) -> httpx.Response:
        await self._submit_telemetry(resource, TelemetryResourceOperation.READ)
        url = self._resource_url(resource, parent_ids, instance_id)
        operation = resource.operation_for("get", instance=True)
        return await self.perform_request("GET", url, operation, None, response_payload)

    async def put(
        self,
        resource: ResourceDescriptor,
        instance_id: str,
        request_payload: Any,
        response_payload: Optional[ResponsePayload] = None,
        parent_ids: Sequence[str] = (),
    ) -> httpx.Response:
        await self._submit_telemetry(resource, TelemetryResourceOperation.UPDATE)
        url = self._resource_url(resource, parent_ids, instance_id)
        operation = resource.operation_for("put", instance=True)
        return await self.perform_request("PUT", url, operation, request_payload, response_payload)

    async def delete(
        self,
        resource: ResourceDescriptor,
        instance_id: str,
        parent_ids: Sequence[str] = (),
    ) -> httpx.Response:
        await self._submit_telemetry(resource, TelemetryResourceOperation.DELETE)
        url = self._resource_url(resource, parent_ids, instance_id)
        operation = resource.operation_for("delete", instance=True)
        return await self.perform_request("DELETE", url, operation, None, None)

    async def perform_request(
        self,
        method: str,
        url: str,
        operation: OperationDescriptor,
        request_payload: Any = None,
        response_payload: Optional[ResponsePayload] = None,
    ) -> httpx.Response:
        if method not in SUPPORTED_METHODS:
            raise UnsupportedMethodError(method)

        try:
            headers = httpx.Headers()
            self._append_operation_headers(operation.header_parameters, headers)
            request_url = await self._append_auth_headers(url, operation, headers)
            self._append_user_agent_header(headers)
        except (MissingRequiredHeaderError, AuthenticationFailedError) as exc:
            raise RequestConfigurationError(method, url, exc) from exc

        logger.debug(
            "Sending %s %s headers=%s payload=%s",
            method,
            request_url,
            redact_headers(headers),
            redact_payload(request_payload),
        )
        response = await self.transport.invoke(method, request_url, headers, request_payload)
        if not operation.expects_status(response.status_code):
            logger.warning(
                "Unexpected response status for %s %s: %s", method, request_url, response.status_code
            )

        if response_payload is not None and response.content:
            _decode_into(response_payload, response.json())
        return response

    def _resource_url(
        self,
        resource: ResourceDescriptor,
        parent_ids: Sequence[str],
        instance_id: Optional[str] = None,
    ) -> str:
        return resolve_resource_url(
            resource,
            self.backend,
            parent_ids=parent_ids,
            instance_id=instance_id,
            region=self.provider_configuration.region,
        )

    async def _submit_telemetry(
        self, resource: ResourceDescriptor, operation: TelemetryResourceOperation
    ) -> None:
        if self._telemetry_handler is None:
            return
        try:
            await self._telemetry_handler.submit_resource_execution_metrics(resource.name, operation)
        except Exception as exc:
            logger.warning(
                "Telemetry submission failed for %s %s: %s", resource.name, operation.value, exc
            )

    def _append_operation_headers(
        self, header_parameters: Sequence[HeaderParameter], headers: httpx.Headers
    ) -> None:
        """Declared operation headers; values come from the provider configuration."""
        for header in header_parameters:
            value = self.provider_configuration.value(header.config_key)
            if value is None:
                if header.required:
                    raise MissingRequiredHeaderError(header.name, header.config_key)
                continue
            headers[header.name] = value

    async def _append_auth_headers(
        self, url: str, operation: OperationDescriptor, headers: httpx.Headers
    ) -> str:
        """Auth headers never replace a declared header. Returns the URL to call,
        which the authenticator may override."""
        try:
            context = await self.authenticator.prepare_auth(url, operation.security_schemes)
        except Exception as exc:
            raise AuthenticationFailedError(str(exc)) from exc

        for key, value in context.headers.items():
            if key in headers:
                logger.warning(
                    "Auth header %s conflicts with a declared operation header; keeping the declared value",
                    key,
                )
                continue
            headers[key] = value
        return context.url or url

    def _append_user_agent_header(self, headers: httpx.Headers) -> None:
        """Always set last so the client identity cannot be overridden."""
        headers[USER_AGENT_HEADER] = self.user_agent


def _decode_into(target: ResponsePayload, body: Any) -> None:
    if isinstance(target, dict) and isinstance(body, dict):
        target.update(body)
    elif isinstance(target, list) and isinstance(body, list):
        target.extend(body)
    else:
        raise ValueError(
            f"response body of type {type(body).__name__} cannot be decoded into {type(target).__name__}"
        )


def build_client(
    settings: Settings,
    security_schemes: Optional[Mapping[str, SecurityScheme]] = None,
    telemetry_handler: Optional[TelemetryHandler] = None,
) -> ProviderClient:
    provider_configuration = ProviderConfiguration.from_settings(settings)
    return ProviderClient(
        backend=StaticBackendConfiguration.from_settings(settings),
        transport=HttpxTransport(
            timeout_seconds=settings.client_timeout_seconds,
            verify_ssl=settings.client_verify_ssl,
        ),
        authenticator=SecuritySchemeAuthenticator(security_schemes or {}, provider_configuration),
        provider_configuration=provider_configuration,
        user_agent=settings.client_user_agent,
        telemetry_handler=telemetry_handler,
    )
