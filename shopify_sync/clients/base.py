"""Base GraphQL client with transport retries and error classification."""

from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional
import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log
)
import logging


logger = logging.getLogger(__name__)

THROTTLED = "THROTTLED"


class APIError(Exception):
    """Base API error."""
    
    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


class AuthenticationError(APIError):
    """Authentication failed."""
    pass


class GraphQLError(APIError):
    """Top-level GraphQL errors returned with a response."""
    
    def __init__(self, errors: List[Dict[str, Any]], code: Optional[str] = None):
        messages = "; ".join(str(e.get("message", e)) for e in errors) or "Unknown GraphQL error"
        super().__init__(f"GraphQL error: {messages}", code=code)
        self.errors = errors


class ThrottledError(GraphQLError):
    """Request rejected by the API cost limiter."""
    
    def __init__(self, errors: List[Dict[str, Any]], retry_after_ms: Optional[int] = None):
        super().__init__(errors, code=THROTTLED)
        self.retry_after_ms = retry_after_ms


def _error_code(error: Dict[str, Any]) -> Optional[str]:
    extensions = error.get("extensions") or {}
    return extensions.get("code")


def _positive_int(value: Any) -> Optional[int]:
    """Parse a positive integer hint, ignoring garbage."""
    if value is None:
        return None
    try:
        retry_after = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None
    return retry_after if retry_after > 0 else None


def classify_graphql_errors(errors: List[Dict[str, Any]]) -> GraphQLError:
    """Map a GraphQL ``errors`` list to the matching exception."""
    for error in errors:
        if _error_code(error) == THROTTLED:
            extensions = error.get("extensions") or {}
            return ThrottledError(errors, _positive_int(extensions.get("retryAfter")))
    
    code = next((_error_code(e) for e in errors if _error_code(e)), None)
    return GraphQLError(errors, code=code)


class BaseClient(ABC):
    """Base GraphQL-over-HTTP client."""
    
    def __init__(self, access_token: str, timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.access_token = access_token
        
        # Create HTTP client with reasonable defaults
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
            transport=transport
        )
    
    async def __aenter__(self):
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.client.aclose()
    
    @property
    @abstractmethod
    def endpoint(self) -> str:
        """GraphQL endpoint URL."""
        pass
    
    @abstractmethod
    def _get_headers(self) -> Dict[str, str]:
        """Get headers for API requests."""
        pass
    
    def _handle_response_errors(self, response: httpx.Response) -> None:
        """Handle HTTP-level errors before looking at the GraphQL payload."""
        if response.status_code in (401, 403):
            raise AuthenticationError(
                f"Authentication failed ({response.status_code}) - check the access token",
                code=str(response.status_code)
            )
        elif response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            retry_after_ms = None
            if retry_after:
                seconds = _positive_int(retry_after)
                retry_after_ms = seconds * 1000 if seconds else None
            raise ThrottledError([{"message": "Too many requests"}], retry_after_ms)
        elif response.status_code >= 500:
            raise APIError(f"Server error: {response.status_code} - {response.text}", code=str(response.status_code))
        elif not response.is_success:
            raise APIError(f"API error: {response.status_code} - {response.text}", code=str(response.status_code))
    
    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    )
    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        return await self.client.post(self.endpoint, headers=self._get_headers(), json=payload)
    
    async def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run a GraphQL document and return its ``data`` object.
        
        Raises ThrottledError for rate-limit rejections, GraphQLError for any
        other top-level errors and APIError for transport failures.
        """
        payload = {"query": query, "variables": variables or {}}
        
        try:
            response = await self._post(payload)
        except httpx.TimeoutException as e:
            raise APIError(f"Request timed out: {e}") from e
        except httpx.HTTPError as e:
            raise APIError(f"Connection failed: {e}") from e
        
        self._handle_response_errors(response)
        
        try:
            body = response.json()
        except ValueError as e:
            raise APIError(f"Non-JSON response ({response.status_code}): {response.text[:300]}") from e
        
        if body.get("errors"):
            raise classify_graphql_errors(body["errors"])
        
        logger.debug("GraphQL cost: %s", (body.get("extensions") or {}).get("cost"))
        return body.get("data") or {}
