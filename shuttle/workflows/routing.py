"""Classify-then-dispatch routing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..context import ModelContext
from ..errors import RouteNotFoundError
from ..types import CallOptions, Executable
from .base import Workflow
from .handlers import as_handler, invoke

logger = logging.getLogger(__name__)

DEFAULT_ROUTER_PROMPT = "Classify the user's request into exactly one of the available routes."


@dataclass
class Route:
    name: str
    description: str
    handler: Executable


class RoutingWorkflow(Workflow):
    """One router call picks a route by exact name; unknown names fall to the default."""

    def __init__(
        self,
        context: ModelContext,
        router_prompt: str = DEFAULT_ROUTER_PROMPT,
        router_options: CallOptions | None = None,
    ) -> None:
        super().__init__(context)
        self.router_prompt = router_prompt
        self.router_options = router_options or context.options.merged(temperature=0.0)
        self._routes: dict[str, Route] = {}
        self._default: Executable | None = None

    def add_route(self, name: str, description: str, handler: Any) -> Route:
        route = Route(name, description, as_handler(handler))
        self._routes[name] = route
        return route

    def set_default_route(self, handler: Any) -> None:
        self._default = as_handler(handler)

    @property
    def routes(self) -> list[Route]:
        return list(self._routes.values())

    def routes_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "route": {
                    "type": "string",
                    "enum": list(self._routes),
                    "description": "Name of the route that should handle the input",
                }
            },
            "required": ["route"],
        }

    def _router_system_prompt(self) -> str:
        lines = [f"- {r.name}: {r.description}" for r in self._routes.values()]
        return (
            f"{self.router_prompt}\n\nAvailable routes:\n"
            + "\n".join(lines)
            + "\n\nRespond with only the route name."
        )

    async def run(self, input: str) -> dict[str, Any]:
        response = await self._context.complete(
            input, system_prompt=self._router_system_prompt(), options=self.router_options
        )
        classification = response.content.strip()
        route = self._routes.get(classification)
        if route is not None:
            name, handler = route.name, route.handler
        elif self._default is not None:
            logger.warning("Router answered %r, using the default route", classification)
            name, handler = "default", self._default
        else:
            raise RouteNotFoundError(classification)

        self.log_step(f"Routing to {name}", {"classification": classification})
        info = {"route": name, "classification": classification}
        output = await invoke(handler, input, info)
        result = dict(output) if isinstance(output, dict) else {"answer": output}
        result.setdefault("route", name)
        result.setdefault("classification", classification)
        return result
