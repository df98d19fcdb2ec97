import os, re, uuid
from typing import Optional, Union, Any
from flask import Flask, g, request, Response
from dotenv import load_dotenv
import structlog
from werkzeug.exceptions import HTTPException
from werkzeug.routing import Rule

import logs
from errors import BadRequest, PostboardError, StoreFailure, TemplateFailure
from models import db
from router import Router, default_routes
from handlers import Services
from store import PostStore
from templating import TemplateRenderer, default_renderer

logger = structlog.get_logger()

REQUEST_ID_HEADER : str = 'X-Request-ID'
VALID_REQUEST_ID = re.compile(r'^[a-zA-Z0-9_.\-]{1,128}$')


def request_id_from(raw: Optional[str]) -> str:
    if raw and VALID_REQUEST_ID.match(raw):
        return raw
    return f'req_{uuid.uuid4().hex}'


def create_app(database_url: Optional[str] = None, renderer: Optional[TemplateRenderer] = None) -> Flask:
    '''Build the posts service.

    Template registration errors raise TemplateFailure out of this function,
    so a process never starts with an unusable template set.
    '''
    load_dotenv()
    app : Flask = Flask(__name__)
    app.config['SQLALCHEMY_DATABASE_URI'] = database_url or os.getenv('DATABASE_URL', 'sqlite:///posts.db')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    db.init_app(app)

    store : PostStore = PostStore(db)
    with app.app_context():
        store.create_schema()

    if renderer is None:
        renderer = default_renderer()
    renderer.freeze()

    services : Services = Services(renderer=renderer, store=store)
    router : Router = Router(default_routes())
    app.extensions['postboard'] = services
    app.extensions['postboard.router'] = router

    @app.before_request
    def bind_request_id() -> None:
        g.request_id = request_id_from(request.headers.get(REQUEST_ID_HEADER))
        logs.reset_context(request_id=g.request_id, method=request.method, path=request.path)

    @app.after_request
    def tag_response(response: Response) -> Response:
        response.headers[REQUEST_ID_HEADER] = g.get('request_id', '')
        logger.info('request_completed', status=response.status_code)
        return response

    def dispatch(path: str) -> Union[Response, Any]:
        return router.dispatch(request, services)

    # rules without a method list match every method, the router decides
    app.url_map.add(Rule('/', defaults={'path': ''}, endpoint='dispatch'))
    app.url_map.add(Rule('/<path:path>', endpoint='dispatch'))
    app.view_functions['dispatch'] = dispatch

    @app.errorhandler(BadRequest)
    def bad_request(error: BadRequest) -> Response:
        logger.warning('bad_request', error=str(error))
        return Response(str(error), status=error.status_code, mimetype='text/plain')

    @app.errorhandler(StoreFailure)
    @app.errorhandler(TemplateFailure)
    def server_failure(error: PostboardError) -> Response:
        logger.exception('request_failed', kind=type(error).__name__, error=str(error))
        return Response('Internal Server Error', status=error.status_code, mimetype='text/plain')

    @app.errorhandler(Exception)
    def unexpected(error: Exception) -> Union[Response, Any]:
        if isinstance(error, HTTPException):
            return error
        logger.exception('unhandled_exception', error=str(error))
        return Response('Internal Server Error', status=500, mimetype='text/plain')

    return app


if __name__ == '__main__':
    load_dotenv()
    logs.configure('postboard')
    host : str = os.getenv('HOST', '127.0.0.1')
    port : int = int(os.getenv('PORT', '3000'))
    app : Flask = create_app()
    logger.info('server_starting', host=host, port=port)
    app.run(host=host, port=port, threaded=True)
