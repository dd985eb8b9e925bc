"""Route and RouteMatch frozen dataclasses."""

from dataclasses import dataclass

from sparrow._internal.types import Handler


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route pattern.

    Literal:  ``users``  (is_param=False)
    Param:    ``:id``    (is_param=True, param_name="id")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None


@dataclass(frozen=True, slots=True)
class Route:
    """A registered (method, pattern) pair bound to a handler."""

    method: str
    path: str
    handler: Handler
    segments: tuple[PathSegment, ...]


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    params: dict[str, str]

    @property
    def handler(self) -> Handler:
        return self.route.handler
