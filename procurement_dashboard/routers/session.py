"""Session API routes. The external sign-in flow hands its token over here."""

import logging

from fastapi import APIRouter, Depends

from ..core.session import SessionContext, SessionInfo
from ..dependencies import get_session
from ..models.common import TokenRequest
from ..security import get_api_key

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/session",
    tags=["session"],
    dependencies=[Depends(get_api_key)],
)


@router.get("", response_model=SessionInfo)
async def get_session_info(session: SessionContext = Depends(get_session)):
    """Current credential state. The token itself is never returned."""
    return session.info()


@router.post("/begin", response_model=SessionInfo)
async def begin_sign_in(session: SessionContext = Depends(get_session)):
    """Mark a sign-in as in progress; reads fall back to seed data until a token arrives."""
    session.begin()
    return session.info()


@router.post("/token", response_model=SessionInfo)
async def set_token(request: TokenRequest, session: SessionContext = Depends(get_session)):
    session.activate(request.access_token, request.expires_in)
    return session.info()


@router.delete("", response_model=SessionInfo)
async def sign_out(session: SessionContext = Depends(get_session)):
    session.clear()
    logger.info("Session cleared")
    return session.info()
