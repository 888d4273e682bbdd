"""Compiled router with trie-based path matching.

Routes are registered during setup and compiled into an immutable
lookup structure when the app freezes. Only static segments are
supported; every API path is fixed.
"""

from termfolio.errors import MethodNotAllowed, NotFound
from termfolio.routing.route import Route, RouteMatch


def split_path(path: str) -> list[str]:
    """Split a path into its non-empty segments.

    Examples::

        "/"                 -> []
        "/api/visitors"     -> ["api", "visitors"]
        "/api//guestbook/"  -> ["api", "guestbook"]
    """
    return [part for part in path.strip("/").split("/") if part]


class _TrieNode:
    """A node in the route trie. Mutable during compilation only."""

    __slots__ = ("children", "routes_by_method")

    def __init__(self) -> None:
        self.children: dict[str, _TrieNode] = {}
        self.routes_by_method: dict[str, Route] = {}


class Router:
    """Compiled router with trie-based path matching.

    Usage::

        router = Router()
        router.add(Route("/api/visitors", handler, frozenset({"GET"})))
        router.compile()
        match = router.match("GET", "/api/visitors")
    """

    __slots__ = ("_compiled", "_root")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        node = self._root
        for part in split_path(route.path):
            node = node.children.setdefault(part, _TrieNode())

        for method in route.methods:
            node.routes_by_method[method] = route
        # HEAD is served wherever GET is.
        if "GET" in route.methods:
            node.routes_by_method.setdefault("HEAD", route)

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes, each once."""
        seen: set[int] = set()
        result: list[Route] = []
        stack = [self._root]
        while stack:
            node = stack.pop()
            for route in node.routes_by_method.values():
                if id(route) not in seen:
                    seen.add(id(route))
                    result.append(route)
            stack.extend(node.children.values())
        return result

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method against compiled routes.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        node = self._root
        for part in split_path(path):
            child = node.children.get(part)
            if child is None:
                raise NotFound()
            node = child

        if method in node.routes_by_method:
            return RouteMatch(route=node.routes_by_method[method])

        if node.routes_by_method:
            raise MethodNotAllowed(frozenset(node.routes_by_method))

        raise NotFound()
