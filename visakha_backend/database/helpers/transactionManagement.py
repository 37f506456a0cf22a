"""
Session-per-operation helper for service classes.

`@transactional` gives a service method a SQLAlchemy session through its
`session` keyword argument:

- outermost call: a session is opened from the owner's ``self.store``,
  committed when the method returns and rolled back if it raises;
- nested calls (one decorated method calling another) reuse the session of
  the outermost call, so the whole chain commits or rolls back together.

The active session lives in a context variable, which keeps concurrent
requests (threads or tasks) on separate sessions.
"""

import contextvars
from functools import wraps

db_session_context = contextvars.ContextVar("db_session_context", default=None)


def transactional(func):
    """
    Run a service method inside the current session, or a fresh one.

    The owner must expose ``store`` (a `StoreClient`) and the method must
    accept ``session`` as a keyword argument.

    Example
    -------
    >>> class TitleService:
    ...     def __init__(self, store):
    ...         self.store = store
    ...
    ...     @transactional
    ...     def rename(self, conversation_id, title, session=None):
    ...         ...
    """

    @wraps(func)
    def wrapper(self, *args, **kwargs):
        current = db_session_context.get()
        if current is not None:
            return func(self, *args, session=current, **kwargs)

        session = self.store.new_session()
        token = db_session_context.set(session)
        try:
            result = func(self, *args, session=session, **kwargs)
            session.flush()
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
            db_session_context.reset(token)
        return result

    return wrapper
