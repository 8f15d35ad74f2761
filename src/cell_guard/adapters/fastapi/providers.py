"""FastAPI adapter – rule providers for Starlette requests."""
from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING

from cell_guard.application.rate_limit import Policy, Rule
from cell_guard.kernel.errors import RuleProvisionError

if TYPE_CHECKING:
    from starlette.requests import Request


class HeaderRuleProvider:
    """Key requests by a header value (API key, tenant, user id).

    When the header is missing the request is rejected with
    :class:`RuleProvisionError` if *required*, otherwise it goes through
    unruled.
    """

    def __init__(
        self,
        header: str,
        policy: Policy,
        *,
        resource: str | None = None,
        required: bool = True,
    ) -> None:
        self._header = header.lower()
        self._policy = policy
        self._resource = resource
        self._required = required

    def provide(self, request: "Request") -> Rule | None:
        value = request.headers.get(self._header, "").strip()
        if not value:
            if self._required:
                raise RuleProvisionError(
                    f"cannot define key, since '{self._header}' header is missing"
                )
            return None
        return Rule(key=value, policy=self._policy, resource=self._resource)


class ClientIPRuleProvider:
    """Key requests by the peer address."""

    def __init__(self, policy: Policy, *, resource: str | None = None) -> None:
        self._policy = policy
        self._resource = resource

    def provide(self, request: "Request") -> Rule | None:
        client = request.client
        if client is None or not client.host:
            raise RuleProvisionError("cannot define key, since the client address is unknown")
        return Rule(key=client.host, policy=self._policy, resource=self._resource)


@dataclasses.dataclass(frozen=True)
class Route:
    """``method`` + ``path_prefix`` → policy, with an optional resource label."""
    method: str
    path_prefix: str
    policy: Policy
    resource: str | None = None

    def matches(self, method: str, path: str) -> bool:
        return (self.method == "*" or self.method.upper() == method.upper()) and path.startswith(
            self.path_prefix
        )


class RouteRuleProvider:
    """Pick a policy per route, keyed by a header.

    Routes are checked in order; the first match wins.  Requests that match
    no route use *default_policy*, or go through unruled when it is ``None``::

        RouteRuleProvider(
            "x-api-key",
            routes=[Route("POST", "/articles", STRICT, resource="articles::write")],
            default_policy=BASIC,
        )
    """

    def __init__(
        self,
        header: str,
        routes: list[Route],
        default_policy: Policy | None = None,
    ) -> None:
        self._header = header.lower()
        self._routes = list(routes)
        self._default = default_policy

    def provide(self, request: "Request") -> Rule | None:
        method, path = request.method, request.url.path
        route = next((r for r in self._routes if r.matches(method, path)), None)
        if route is None and self._default is None:
            return None

        key = request.headers.get(self._header, "").strip()
        if not key:
            raise RuleProvisionError(
                f"cannot define key, since '{self._header}' header is missing"
            )
        if route is None:
            return Rule(key=key, policy=self._default)  # type: ignore[arg-type]
        return Rule(key=key, policy=route.policy, resource=route.resource)


__all__ = ["ClientIPRuleProvider", "HeaderRuleProvider", "Route", "RouteRuleProvider"]
