from functools import wraps
import logging
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity
from broresolve.constants.roles import Role
from broresolve.errors import PermissionDenied
from broresolve.services.policy import load_actor
from broresolve import get_db

logger = logging.getLogger(__name__)


def current_actor():
    """Resolve the bearer token into an Actor (raises for suspended accounts)."""
    verify_jwt_in_request()
    return load_actor(get_db(), int(get_jwt_identity()))


def require_actor(*roles: Role):
    """Inject `actor` into the view; optionally restrict to the given roles."""
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            actor = current_actor()
            if roles and actor.role not in roles:
                logger.warning('Denied %s for user=%s role=%s', fn.__name__, actor.id, actor.role.value)
                raise PermissionDenied('Missing permission')
            kwargs['actor'] = actor
            return fn(*args, **kwargs)
        return wrapper
    return outer
