from dependency_injector.wiring import Provide, inject
from fastapi import Depends, Request, Response

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.service.reservation.app.interface.i_session_identity import ISessionIdentity


@inject
def get_session_id(
    request: Request,
    response: Response,
    session_identity: ISessionIdentity = Depends(Provide[Container.session_identity]),
    config: Settings = Depends(Provide[Container.config_service]),
) -> str:
    """
    Resolve the caller's session id.

    The session credential is the signed token issued in the session cookie. Clients without a
    cookie jar may send that same credential in the session header, which then wins over the
    cookie. An unverifiable credential is ignored; without a valid one a new session is issued
    and set as cookie.
    """
    session_id = session_identity.verify(request.headers.get(config.SESSION_HEADER_NAME))
    if session_id:
        return session_id

    session_id = session_identity.verify(request.cookies.get(config.SESSION_COOKIE_NAME))
    if session_id:
        return session_id

    session_id, credential = session_identity.issue()
    response.set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=credential,
        max_age=config.SESSION_COOKIE_MAX_AGE,
        httponly=True,
        samesite='lax',
        secure=config.SESSION_COOKIE_SECURE,
    )
    return session_id
