'''Named text templates rendered with Jinja2.

Templates are registered once while the app is built and the renderer is
then frozen, so every request thread shares the same read-only mapping
without locking.
'''
from typing import Any, Mapping

from jinja2 import DictLoader, Environment, StrictUndefined, TemplateSyntaxError, UndefinedError

from errors import TemplateFailure

HELLO_TEMPLATE : str = 'Hello, {{name}}!'
POST_TEMPLATE : str = 'id: {{id}}\ntitle: {{title}}\ncontent:\n{{content}}'

BUILTIN_TEMPLATES : dict[str, str] = {
    'hello': HELLO_TEMPLATE,
    'post': POST_TEMPLATE,
}


class TemplateRenderer:

    def __init__(self) -> None:
        self._templates : dict[str, str] = {}
        self._frozen : bool = False
        self._env = Environment(
            loader=DictLoader(self._templates),
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
        )

    @property
    def names(self) -> frozenset[str]:
        return frozenset(self._templates)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, name: str, body: str) -> None:
        if self._frozen:
            raise TemplateFailure(f'cannot register {name!r}: templates are frozen')
        if name in self._templates:
            raise TemplateFailure(f'template {name!r} is already registered')
        if body.count('{{') != body.count('}}'):
            raise TemplateFailure(f'template {name!r} has unbalanced markers')
        try:
            self._env.parse(body)
        except TemplateSyntaxError as exc:
            raise TemplateFailure(f'template {name!r} is malformed: {exc.message}') from exc
        self._templates[name] = body

    def freeze(self) -> None:
        self._frozen = True

    def render(self, name: str, bindings: Mapping[str, Any]) -> str:
        '''Substitute ``bindings`` into the template registered as ``name``.'''
        if name not in self._templates:
            raise TemplateFailure(f'no template registered as {name!r}')
        try:
            return self._env.get_template(name).render(**bindings)
        except UndefinedError as exc:
            raise TemplateFailure(f'missing binding in {name!r}: {exc.message}') from exc


def default_renderer() -> TemplateRenderer:
    renderer = TemplateRenderer()
    for name, body in BUILTIN_TEMPLATES.items():
        renderer.register(name, body)
    renderer.freeze()
    return renderer
