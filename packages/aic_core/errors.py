from typing import Optional, Dict, Any


class AICBaseError(Exception):
    """
    AIC 프로젝트의 최상위 예외 클래스.
    모든 커스텀 예외는 이 클래스를 상속받아야 합니다.

    Attributes:
        code (str): 에러 식별 코드 (예: 'CONF_ERROR')
        message (str): 사용자에게 보여줄 에러 메시지
        details (Optional[Dict[str, Any]]): 추가 디버깅 정보
    """
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(f"[{code}] {message}")


class ConfigurationError(AICBaseError):
    """환경 설정 로딩/검증 실패 시 발생하는 예외"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code="CONF_ERROR", message=message, details=details)


class InputValidationError(AICBaseError):
    """네트워크 호출 전에 거부되는 입력 오류 (빈 직무 설명, 빈 이력서 등)"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code="INPUT_INVALID", message=message, details=details)


class DeviceAccessError(AICBaseError):
    """카메라/마이크 접근 거부 또는 장치 없음. 면접은 계속 진행됩니다."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code="DEVICE_ACCESS", message=message, details=details)


class CollaboratorError(AICBaseError):
    """외부 협력자(LLM, STT) 호출 실패의 공통 부모 클래스"""
    default_code = "COLLABORATOR_FAILED"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code=self.default_code, message=message, details=details)


class QuestionGenerationError(CollaboratorError):
    default_code = "GENERATION_FAILED"


class TranscriptionError(CollaboratorError):
    default_code = "TRANSCRIPTION_FAILED"


class ScoringError(CollaboratorError):
    default_code = "SCORING_FAILED"


class ComparisonError(CollaboratorError):
    """Best-effort: 실패해도 메인 흐름을 막지 않습니다."""
    default_code = "COMPARISON_FAILED"


class ResumeGradingError(CollaboratorError):
    default_code = "RESUME_GRADING_FAILED"
