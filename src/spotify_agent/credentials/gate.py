"""Credential checks run before any tool executes.

The checks run in a fixed order (service key, OAuth-derived tokens, named
variables) and stop at the first failure. Which tokens and variables are
required comes from the target agent's ``AgentInfo``.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from spotify_agent.core.outcome import ApiFailure, FailureKind
from spotify_agent.credentials.validation import mask_secret, secrets_match
from spotify_agent.utils.constants import (
    API_KEY_HEADER,
    OAUTH_HEADER_PREFIX,
    VARIABLE_HEADER_PREFIX,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CredentialBundle:
    """Per-request credentials handed to a tool."""

    oauth_tokens: Mapping[str, str] = field(default_factory=dict)
    variables: Mapping[str, str] = field(default_factory=dict)

    def __repr__(self) -> str:
        tokens = {k: mask_secret(v) for k, v in self.oauth_tokens.items()}
        variables = {k: mask_secret(v) for k, v in self.variables.items()}
        return f"CredentialBundle(oauth_tokens={tokens}, variables={variables})"


@dataclass(frozen=True)
class GateResult:
    """Result of running the gate: a bundle, or the failure to return."""

    bundle: CredentialBundle | None = None
    failure: ApiFailure | None = None

    @property
    def success(self) -> bool:
        return self.failure is None


def _missing(message: str) -> ApiFailure:
    return ApiFailure(code=401, message=message, kind=FailureKind.MISSING_CREDENTIAL)


def _extract_named(
    headers: Mapping[str, str], prefix: str, names: Iterable[str]
) -> tuple[dict[str, str], list[str]]:
    values: dict[str, str] = {}
    missing: list[str] = []
    for name in names:
        value = headers.get(f"{prefix}{name}".lower())
        if value:
            values[name] = value
        else:
            missing.append(name)
    return values, missing


class CredentialGate:
    """Validates request headers against an agent's declared requirements."""

    def __init__(self, service_api_key: str | None):
        self.service_api_key = service_api_key

    def check_api_key(self, headers: Mapping[str, str]) -> ApiFailure | None:
        supplied = headers.get(API_KEY_HEADER)
        if not supplied:
            return _missing("Missing API key")
        if not secrets_match(supplied, self.service_api_key):
            logger.warning(f"Rejected service key {mask_secret(supplied)}")
            return _missing("Invalid API key")
        return None

    def check_oauth_tokens(
        self, headers: Mapping[str, str], names: Iterable[str]
    ) -> tuple[dict[str, str], ApiFailure | None]:
        tokens, missing = _extract_named(headers, OAUTH_HEADER_PREFIX, names)
        if missing:
            return tokens, _missing(f"Missing OAuth tokens: {', '.join(missing)}")
        return tokens, None

    def check_variables(
        self, headers: Mapping[str, str], names: Iterable[str]
    ) -> tuple[dict[str, str], ApiFailure | None]:
        variables, missing = _extract_named(headers, VARIABLE_HEADER_PREFIX, names)
        if missing:
            return variables, _missing(f"Missing variables: {', '.join(missing)}")
        return variables, None

    def validate(
        self,
        headers: Mapping[str, str],
        required_oauth_tokens: Iterable[str] = (),
        required_variables: Iterable[str] = (),
    ) -> GateResult:
        """Run all checks in order, short-circuiting on the first failure.

        Args:
            headers: Request headers; lookups use lower-case names, so pass
                a case-insensitive mapping or lower-cased keys
            required_oauth_tokens: Token names the agent declares
            required_variables: Variable names the agent declares
        """
        failure = self.check_api_key(headers)
        if failure:
            return GateResult(failure=failure)

        oauth_tokens: dict[str, str] = {}
        required_oauth_tokens = list(required_oauth_tokens)
        if required_oauth_tokens:
            oauth_tokens, failure = self.check_oauth_tokens(
                headers, required_oauth_tokens
            )
            if failure:
                return GateResult(failure=failure)

        variables: dict[str, str] = {}
        required_variables = list(required_variables)
        if required_variables:
            variables, failure = self.check_variables(headers, required_variables)
            if failure:
                return GateResult(failure=failure)

        return GateResult(
            bundle=CredentialBundle(oauth_tokens=oauth_tokens, variables=variables)
        )
