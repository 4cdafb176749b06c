from codecraft.services.progress import save_progress, to_user_format
from codecraft.services.sessions import create_session, resolve_session, revoke_session

__all__ = ["save_progress", "to_user_format", "create_session", "resolve_session", "revoke_session"]
