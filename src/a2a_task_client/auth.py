"""Authentication configuration for A2A agents.

Only static credentials are supported:
- API keys (sent in a configurable header, ``X-API-Key`` by default)
- Bearer tokens (sent as ``Authorization: Bearer <token>``)

Exactly one auth header is sent per request. When both are configured the
API key wins, unless the config is built with ``prefer="bearer"``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

AuthPreference = Literal["api_key", "bearer"]


@dataclass(frozen=True)
class BearerTokenCredentials:
    """Bearer token credentials.

    Attributes:
        token: The bearer token string.
        token_type: Token type prefix (default: "Bearer").
    """

    token: str
    token_type: str = "Bearer"


@dataclass(frozen=True)
class APIKeyCredentials:
    """API Key credentials.

    Attributes:
        key: The API key value.
        header_name: HTTP header name for the key (default: "X-API-Key").
    """

    key: str
    header_name: str = "X-API-Key"


class A2AAuthConfig:
    """Credentials injected into every JSON-RPC request.

    Example:
        ```python
        auth = A2AAuthConfig().add_api_key("secret")
        engine = A2ATaskEngine(A2ATransport())
        task = await engine.send_task(
            RequestContext("https://agent.example.com", auth=auth),
            [TextPart(text="hello")],
        )
        ```
    """

    def __init__(self, *, prefer: AuthPreference = "api_key") -> None:
        """Initialize empty auth configuration.

        Args:
            prefer: Which credential to send when both are configured.
        """
        if prefer not in ("api_key", "bearer"):
            raise ValueError(
                f"Unsupported auth preference: {prefer!r}. "
                "Supported: 'api_key', 'bearer'"
            )
        self.prefer = prefer
        self.api_key: APIKeyCredentials | None = None
        self.bearer_token: BearerTokenCredentials | None = None

    @classmethod
    def from_secrets(
        cls,
        *,
        api_key: str | None = None,
        bearer_token: str | None = None,
        prefer: AuthPreference = "api_key",
    ) -> A2AAuthConfig:
        """Build a config from a credential record.

        Empty strings are treated as "not configured".
        """
        config = cls(prefer=prefer)
        if api_key:
            config.add_api_key(api_key)
        if bearer_token:
            config.add_bearer_token(bearer_token)
        return config

    def add_api_key(
        self,
        key: str,
        header_name: str = "X-API-Key",
    ) -> A2AAuthConfig:
        """Add API key credentials.

        Args:
            key: The API key value.
            header_name: HTTP header name (default: "X-API-Key").

        Returns:
            Self for method chaining.
        """
        self.api_key = APIKeyCredentials(key=key, header_name=header_name)
        return self

    def add_bearer_token(
        self,
        token: str,
        token_type: str = "Bearer",
    ) -> A2AAuthConfig:
        """Add a bearer token.

        Args:
            token: The bearer token string.
            token_type: Token type prefix (default: "Bearer").

        Returns:
            Self for method chaining.
        """
        self.bearer_token = BearerTokenCredentials(token=token, token_type=token_type)
        return self

    def build_headers(self) -> dict[str, str]:
        """Build the auth header for the configured credentials.

        Returns:
            A dict with at most one header.
        """
        api_key = self.api_key if self.api_key and self.api_key.key else None
        bearer = (
            self.bearer_token
            if self.bearer_token and self.bearer_token.token
            else None
        )

        if bearer and (self.prefer == "bearer" or api_key is None):
            return {"Authorization": f"{bearer.token_type} {bearer.token}"}
        if api_key:
            return {api_key.header_name: api_key.key}
        return {}
