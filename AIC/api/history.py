from fastapi import APIRouter, Depends

from AIC.api.dependencies import get_session_service
from AIC.api.schemas import HistoryResponse
from packages.aic_service.session_service import SessionService

router = APIRouter(prefix="/history", tags=["History"])


@router.get("", response_model=HistoryResponse)
def list_history(service: SessionService = Depends(get_session_service)):
    """
    Completed interviews, most recent first.
    """
    items = service.list_history()
    return HistoryResponse(count=len(items), items=items)
