from fastapi import APIRouter, Depends, HTTPException, status

from AIC.api.dependencies import get_session_service
from AIC.api.schemas import ActionRequest, ActionResponse, SessionResponse
from packages.aic_service.session_service import SessionNotFoundError, SessionService

router = APIRouter(prefix="/sessions", tags=["Session"])


def _not_found(e: SessionNotFoundError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"error_code": "SESSION_NOT_FOUND", "message": str(e)}
    )


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def create_session(service: SessionService = Depends(get_session_service)):
    """
    Open a new interview session in the start stage.
    """
    session_id, snapshot = service.create_session()
    return SessionResponse(session_id=session_id, state=snapshot)


@router.get("/{session_id}", response_model=SessionResponse)
def get_session(session_id: str, service: SessionService = Depends(get_session_service)):
    try:
        return SessionResponse(session_id=session_id, state=service.get_session(session_id))
    except SessionNotFoundError as e:
        raise _not_found(e)


@router.post("/{session_id}/actions", response_model=ActionResponse)
async def dispatch_action(
    session_id: str,
    request: ActionRequest,
    service: SessionService = Depends(get_session_service)
):
    """
    Apply one user action to the session.
    Refused actions are not errors: `accepted` is false and `notices` explains why.
    """
    try:
        result = await service.dispatch(session_id, request.action)
    except SessionNotFoundError as e:
        raise _not_found(e)

    return ActionResponse(
        session_id=session_id,
        accepted=result.accepted,
        state=result.snapshot,
        notices=result.notices,
    )


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_session(session_id: str, service: SessionService = Depends(get_session_service)):
    """
    Close the session and release its device stream.
    """
    try:
        await service.close_session(session_id)
    except SessionNotFoundError as e:
        raise _not_found(e)
