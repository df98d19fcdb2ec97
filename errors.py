'''Error kinds raised by the store, the renderer and the handlers.'''


class PostboardError(Exception):
    status_code : int = 500


class BadRequest(PostboardError):
    '''Malformed body, missing field or unparsable identifier.'''
    status_code = 400


class StoreFailure(PostboardError):
    '''The storage engine rejected an insert or a lookup.'''
    status_code = 500


class TemplateFailure(PostboardError):
    '''A template could not be registered or rendered.'''
    status_code = 500
