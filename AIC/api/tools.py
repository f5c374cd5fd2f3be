from fastapi import APIRouter, Depends, HTTPException, status

from AIC.api.dependencies import get_session_service
from AIC.api.schemas import QuestionGenerateRequest, ResumeGradeRequest
from packages.aic_core.dto import QuestionSetDTO, ResumeGradeResultDTO
from packages.aic_core.errors import CollaboratorError, InputValidationError
from packages.aic_core.logging import get_logger
from packages.aic_service.session_service import SessionService

router = APIRouter(tags=["Tools"])
logger = get_logger("aic.api.tools")


def _to_http(e) -> HTTPException:
    if isinstance(e, InputValidationError):
        code = status.HTTP_400_BAD_REQUEST
    else:
        code = status.HTTP_502_BAD_GATEWAY
    return HTTPException(status_code=code, detail={"error_code": e.code, "message": e.message})


@router.post("/questions", response_model=QuestionSetDTO)
async def generate_questions(
    request: QuestionGenerateRequest,
    service: SessionService = Depends(get_session_service)
):
    """
    Generate interview questions for a job description without opening a session.
    """
    try:
        return await service.generate_questions(request.job_description, request.count)
    except (InputValidationError, CollaboratorError) as e:
        logger.warning(f"Question generation request failed: [{e.code}] {e.message}")
        raise _to_http(e)


@router.post("/resume/grade", response_model=ResumeGradeResultDTO)
async def grade_resume(
    request: ResumeGradeRequest,
    service: SessionService = Depends(get_session_service)
):
    """
    ATS-style resume score (0-100) with a short report.
    """
    try:
        return await service.grade_resume(request.resume_text)
    except (InputValidationError, CollaboratorError) as e:
        logger.warning(f"Resume grading request failed: [{e.code}] {e.message}")
        raise _to_http(e)
