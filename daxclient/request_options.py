"""Per-request options and validation of unsupported request settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence

from daxclient.errors import ServiceError
from daxclient.retryer import DaxRetryer

ERR_CODE_INVALID_PARAMETER = "InvalidParameter"

_FORBIDDEN_HANDLER_PHASES = (
    "validate",
    "sign",
    "validate_response",
    "unmarshal",
    "unmarshal_meta",
    "unmarshal_error",
    "retry",
    "after_retry",
    "complete",
)
_DAX_HANDLER_PHASES = ("build", "send")

_UNSUPPORTED_IF_SET = (
    ("credentials_chain_verbose_errors", "CredentialsChainVerboseErrors"),
    ("endpoint_resolver", "EndpointResolver"),
    ("enforce_should_retry_check", "EnforceShouldRetryCheck"),
    ("disable_ssl", "DisableSSL"),
    ("http_client", "HTTPClient"),
    ("retryer", "Retryer"),
)
_UNSUPPORTED_IF_TRUE = (
    ("disable_param_validation", "DisableParamValidation"),
    ("disable_compute_checksums", "DisableComputeChecksums"),
)
_UNSUPPORTED_IF_SET_LATE = (
    ("use_dual_stack", "UseDualStack"),
    ("disable_rest_protocol_uri_cleaning", "DisableRestProtocolURICleaning"),
)
_CLIENT_ONLY = (
    ("credentials", "Credentials"),
    ("endpoint", "Endpoint"),
    ("region", "Region"),
)


def _invalid(message: str) -> ServiceError:
    return ServiceError(ERR_CODE_INVALID_PARAMETER, message)


@dataclass
class ClientConfig:
    """Configuration of a client or a single request; None means not set."""

    log_level: Optional[int] = None
    logger: Any = None
    max_retries: Optional[int] = None
    sleep_delay: Optional[Callable[[float], None]] = None
    credentials_chain_verbose_errors: Optional[bool] = None
    endpoint_resolver: Any = None
    enforce_should_retry_check: Optional[bool] = None
    disable_ssl: Optional[bool] = None
    http_client: Any = None
    retryer: Any = None
    disable_param_validation: Optional[bool] = None
    disable_compute_checksums: Optional[bool] = None
    use_dual_stack: Optional[bool] = None
    disable_rest_protocol_uri_cleaning: Optional[bool] = None
    credentials: Any = None
    endpoint: Optional[str] = None
    region: Optional[str] = None


@dataclass
class RequestSettings:
    """The settings of one outgoing request: config, handlers and retry state."""

    config: ClientConfig = field(default_factory=ClientConfig)
    handlers: dict[str, list[Callable[..., Any]]] = field(default_factory=dict)
    retry_delay: float = 0.0
    retryable: Optional[bool] = None
    signed_header_vals: dict[str, Any] = field(default_factory=dict)
    context: Any = None


@dataclass
class RequestOptions:
    """Options that govern logging, retries and context for one request."""

    log_level: int = 0
    logger: Any = None
    retry_delay: float = 0.0
    retryer: DaxRetryer = field(default_factory=DaxRetryer)
    max_retries: int = 0
    sleep_delay_fn: Optional[Callable[[float], None]] = None
    context: Any = None

    def apply_to(self, settings: Optional[RequestSettings]) -> None:
        """Copy these options onto a request's settings."""
        if settings is None:
            return
        settings.config.log_level = self.log_level
        settings.config.logger = self.logger
        settings.retry_delay = self.retry_delay
        settings.config.max_retries = self.max_retries
        settings.config.sleep_delay = self.sleep_delay_fn
        if self.context is not None:
            settings.context = self.context

    def merge_from_options(
        self, context: Any, *args: Callable[[RequestSettings], None]
    ) -> None:
        """Apply option callables to fresh settings and merge the result in."""
        if args:
            settings = RequestSettings()
            for option in args:
                option(settings)
            self.merge_from_request(settings, True)
        if context is not None:
            self.context = context

    def merge_from_request(self, settings: Optional[RequestSettings], validate: bool) -> None:
        """Take over whatever the request's settings define, validating them first if asked."""
        if settings is None:
            return
        if validate:
            validate_request(settings)
        config = settings.config
        if config.log_level is not None:
            self.log_level = config.log_level
        if config.logger is not None:
            self.logger = config.logger
        if settings.retry_delay >= 0:
            self.retry_delay = settings.retry_delay
        if config.max_retries is not None:
            self.max_retries = config.max_retries
        if config.sleep_delay is not None:
            self.sleep_delay_fn = config.sleep_delay
        if settings.context is not None:
            self.context = settings.context


def validate_request(settings: Optional[RequestSettings]) -> None:
    """Raise ServiceError if the request uses a setting the client cannot honour."""
    if settings is None:
        return
    validate_handlers(settings.handlers, True)
    if settings.retryable is not None:
        raise _invalid("unsupported config: Retryable")
    if settings.signed_header_vals:
        raise _invalid("custom signed headers not supported")
    validate_config(settings.config, True)


def validate_handlers(
    handlers: Mapping[str, Sequence[Callable[..., Any]]], expect_dax_handlers: bool
) -> None:
    """Reject custom handlers; at most one build and one send handler may be present."""
    if any(handlers.get(phase) for phase in _FORBIDDEN_HANDLER_PHASES):
        raise _invalid("custom handlers not supported")
    allowed = 1 if expect_dax_handlers else 0
    if any(len(handlers.get(phase, ())) > allowed for phase in _DAX_HANDLER_PHASES):
        raise _invalid("custom build or send handlers not supported")


def validate_config(config: ClientConfig, is_request_config: bool) -> None:
    """Raise ServiceError for config options that are not supported."""
    for attr, label in _UNSUPPORTED_IF_SET:
        if getattr(config, attr) is not None:
            raise _invalid(f"unsupported config: {label}")
    for attr, label in _UNSUPPORTED_IF_TRUE:
        if getattr(config, attr):
            raise _invalid(f"unsupported config: {label}")
    for attr, label in _UNSUPPORTED_IF_SET_LATE:
        if getattr(config, attr) is not None:
            raise _invalid(f"unsupported config: {label}")
    if is_request_config:
        for attr, label in _CLIENT_ONLY:
            if getattr(config, attr) is not None:
                raise _invalid(
                    f"unsupported config: {label} per request. Set {label} at client init"
                )


__all__ = [
    "ClientConfig",
    "RequestOptions",
    "RequestSettings",
    "validate_config",
    "validate_handlers",
    "validate_request",
]