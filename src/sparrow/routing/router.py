"""Route table with exact-first, then parameterised, path matching.

Routes are stored per HTTP method, keyed by their exact pattern string.
Lookup tries the exact string first, then scans parameterised patterns
in registration order; the first structurally compatible pattern wins.
"""

from sparrow._internal.types import Handler
from sparrow.routing.route import PathSegment, Route, RouteMatch

SUPPORTED_METHODS: tuple[str, ...] = ("GET", "POST")


def split_path(path: str) -> list[str]:
    """Split a path on ``/`` with no normalisation.

    The leading slash yields an empty first segment and a trailing slash
    yields an empty last one, so ``/users`` and ``/users/`` differ::

        "/"          -> ["", ""]
        "/users/42"  -> ["", "users", "42"]
        "/users/"    -> ["", "users", ""]
    """
    return path.split("/")


def parse_path(path: str) -> tuple[PathSegment, ...]:
    """Parse a route pattern into segments.

    Examples::

        "/users"     -> (PathSegment(""), PathSegment("users"))
        "/users/:id" -> (PathSegment(""), PathSegment("users"),
                         PathSegment(":id", is_param=True, param_name="id"))

    No syntax validation is done. A malformed pattern simply never matches.
    """
    segments: list[PathSegment] = []
    for part in split_path(path):
        if part.startswith(":"):
            segments.append(PathSegment(value=part, is_param=True, param_name=part[1:]))
        else:
            segments.append(PathSegment(value=part))
    return tuple(segments)


class Router:
    """Route table and path matcher.

    Usage::

        router = Router()
        router.add("GET", "/users/:id", show_user)
        match = router.match("GET", "/users/42")
        match.params  # {"id": "42"}
    """

    __slots__ = ("_routes",)

    def __init__(self) -> None:
        # Insertion-ordered: scan order for parameterised matching
        self._routes: dict[str, dict[str, Route]] = {m: {} for m in SUPPORTED_METHODS}

    def add(self, method: str, path: str, handler: Handler) -> Route:
        """Register *handler* for (method, path), replacing any previous one.

        Overwriting keeps the pattern's original position in scan order.
        Raises ``ValueError`` for a method the router does not support.
        """
        method = method.upper()
        if method not in self._routes:
            msg = f"Unsupported method {method!r}. Supported: {', '.join(SUPPORTED_METHODS)}"
            raise ValueError(msg)
        route = Route(method=method, path=path, handler=handler, segments=parse_path(path))
        self._routes[method][path] = route
        return route

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes, grouped by method in registration order."""
        return [route for bucket in self._routes.values() for route in bucket.values()]

    def match(self, method: str, path: str) -> RouteMatch | None:
        """Find the route for *method* and *path*.

        Returns ``None`` when nothing matches, including for methods the
        router does not support. Never raises.
        """
        bucket = self._routes.get(method)
        if not bucket:
            return None

        # 1. Exact pattern string wins over any parameterised pattern
        exact = bucket.get(path)
        if exact is not None:
            return RouteMatch(route=exact, params={})

        # 2. First structurally compatible pattern in registration order
        parts = split_path(path)
        for route in bucket.values():
            params = _match_segments(route.segments, parts)
            if params is not None:
                return RouteMatch(route=route, params=params)

        return None


def _match_segments(
    segments: tuple[PathSegment, ...],
    parts: list[str],
) -> dict[str, str] | None:
    """Walk pattern and path segments pairwise, binding ``:name`` values."""
    if len(segments) != len(parts):
        return None

    params: dict[str, str] = {}
    for segment, part in zip(segments, parts, strict=True):
        if segment.is_param:
            params[segment.param_name or ""] = part
        elif segment.value != part:
            return None
    return params
