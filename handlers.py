import uuid
from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qsl

from flask import Request, Response

from errors import BadRequest
from models import Post
from store import PostStore
from templating import TemplateRenderer

ECHO_BODY : str = 'Hello, world!!'
NAME_FIELD_PREFIX : str = 'name='
POSTS_PREFIX : str = '/posts/'


@dataclass(frozen=True)
class Services:
    '''Shared collaborators handed to every handler invocation.'''
    renderer: TemplateRenderer
    store: PostStore


def text_response(body: str, status: int = 200) -> Response:
    return Response(body, status=status, mimetype='text/plain')


def not_found() -> Response:
    return Response(b'', status=404)


def read_text_body(request: Request) -> str:
    try:
        return request.get_data().decode('utf-8')
    except UnicodeDecodeError as exc:
        raise BadRequest('request body is not valid UTF-8') from exc


def greet(request: Request, services: Services) -> Response:
    body : str = read_text_body(request)
    if not body.startswith(NAME_FIELD_PREFIX):
        raise BadRequest(f'expected a body of the form {NAME_FIELD_PREFIX}<value>')
    name : str = body[len(NAME_FIELD_PREFIX):]
    return text_response(services.renderer.render('hello', {'name': name}))


def echo(request: Request, services: Services) -> Response:
    return text_response(ECHO_BODY)


def parse_new_post(body: str) -> tuple[str, str]:
    '''Decode ``title`` and ``content`` from a form-encoded body.

    The body is parsed whatever the Content-Type header says.
    '''
    try:
        fields : dict[str, str] = dict(parse_qsl(body, keep_blank_values=True, errors='strict'))
    except ValueError as exc:
        # UnicodeDecodeError from a percent-escape that is not UTF-8
        raise BadRequest('request body is not valid form data') from exc
    missing : list[str] = [key for key in ('title', 'content') if key not in fields]
    if missing:
        raise BadRequest(f'missing field(s): {", ".join(missing)}')
    if not fields['title']:
        raise BadRequest('title must not be empty')
    return fields['title'], fields['content']


def create_post(request: Request, services: Services) -> Response:
    title, content = parse_new_post(read_text_body(request))
    post_id : str = services.store.insert(title, content)
    return text_response(post_id)


def parse_post_id(path: str) -> uuid.UUID:
    candidate : str = path[len(POSTS_PREFIX):]
    try:
        return uuid.UUID(candidate)
    except ValueError as exc:
        raise BadRequest(f'{candidate!r} is not a valid post id') from exc


def find_post(request: Request, services: Services) -> Response:
    post_id : uuid.UUID = parse_post_id(request.path)
    post : Optional[Post] = services.store.find_by_id(post_id)
    if post is None:
        return not_found()
    rendered : str = services.renderer.render(
        'post', {'id': post.id, 'title': post.title, 'content': post.content}
    )
    return text_response(rendered)
