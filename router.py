'''Ordered (predicate, handler) dispatch.

Rules are tried top to bottom and the first match wins, so ``GET /`` and
``POST /`` reach different handlers purely by position.
'''
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from flask import Request, Response

import handlers
from handlers import Services

Predicate = Callable[[str, str], bool]
Handler = Callable[[Request, Services], Response]


@dataclass(frozen=True)
class Route:
    name: str
    predicate: Predicate
    handler: Handler

    def matches(self, path: str, method: str) -> bool:
        return self.predicate(path, method.upper())


class Router:

    def __init__(self, routes: Iterable[Route]) -> None:
        self._routes : tuple[Route, ...] = tuple(routes)

    @property
    def routes(self) -> tuple[Route, ...]:
        return self._routes

    def match(self, path: str, method: str) -> Optional[Route]:
        for route in self._routes:
            if route.matches(path, method):
                return route
        return None

    def dispatch(self, request: Request, services: Services) -> Response:
        route : Optional[Route] = self.match(request.path, request.method)
        if route is None:
            return handlers.not_found()
        return route.handler(request, services)


def default_routes() -> list[Route]:
    return [
        Route('greet', lambda path, method: path == '/' and method == 'GET', handlers.greet),
        Route('echo', lambda path, method: path == '/', handlers.echo),
        Route('create_post', lambda path, method: path == '/posts' and method == 'POST', handlers.create_post),
        Route(
            'find_post',
            lambda path, method: path.startswith(handlers.POSTS_PREFIX) and method == 'GET',
            handlers.find_post,
        ),
    ]
