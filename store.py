import threading
import uuid
from typing import Optional, Union

import structlog
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.exc import SQLAlchemyError

from errors import StoreFailure
from models import Post

logger = structlog.get_logger()


class PostStore:
    '''The posts table behind a single exclusive lock.

    Only one operation touches the database at a time. The lock covers the
    query and the capture of its result, and the session is closed before
    the lock is released so the next holder starts on a clean connection.
    Must be used inside an application context.
    '''

    def __init__(self, db: SQLAlchemy) -> None:
        self._db = db
        self._lock = threading.Lock()

    @property
    def lock(self) -> threading.Lock:
        return self._lock

    def create_schema(self) -> None:
        with self._lock:
            self._db.create_all()

    def insert(self, title: str, content: str) -> str:
        post_id : str = str(uuid.uuid4())
        session = self._db.session
        with self._lock:
            try:
                session.add(Post(id=post_id, title=title, content=content))
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                raise StoreFailure(f'could not insert post: {exc}') from exc
            finally:
                session.close()
        logger.debug('post_inserted', post_id=post_id)
        return post_id

    def find_by_id(self, post_id: Union[str, uuid.UUID]) -> Optional[Post]:
        '''Return the post with this id, or None when there is no such row.'''
        key : str = str(post_id)
        session = self._db.session
        with self._lock:
            try:
                post : Optional[Post] = session.get(Post, key)
            except SQLAlchemyError as exc:
                session.rollback()
                raise StoreFailure(f'could not look up post {key}: {exc}') from exc
            finally:
                # detaches the loaded row, its columns stay readable
                session.close()
        logger.debug('post_lookup', post_id=key, found=post is not None)
        return post
