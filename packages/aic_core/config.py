from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from packages.aic_core.errors import ConfigurationError


class AICConfig(BaseSettings):
    """
    애플리케이션 전역 설정 클래스.
    .env 파일에서 환경 변수를 로드합니다.
    """
    PROJECT_NAME: str = "AIC Interview Coach"
    VERSION: str = "0.1.0"

    # Session
    QUESTION_COUNT: int = 5
    HISTORY_LIMIT: int = 5

    # History Store (single well-known key in a local JSON key-value file)
    HISTORY_FILE: str = "data/local_storage.json"
    HISTORY_KEY: str = "interviewHistory"

    # Providers
    PROVIDER_MODE: Literal["mock", "openai"] = "mock"
    MEDIA_BACKEND: Literal["mock", "pyaudio"] = "mock"
    OPENAI_API_KEY: Optional[str] = None
    LLM_MODEL: str = "gpt-4o"
    STT_MODEL: str = "whisper-1"
    MOCK_LATENCY_MS: int = 0

    # Audio capture (pyaudio backend)
    AUDIO_SAMPLE_RATE: int = 16000  # Whisper works well with 16k
    AUDIO_CHUNK_FRAMES: int = 1024
    CAMERA_INDEX: int = 0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"  # 정의되지 않은 환경변수는 무시
    )

    @classmethod
    def load(cls) -> "AICConfig":
        """
        설정을 로드하고 에러 발생 시 커스텀 예외로 래핑합니다.
        """
        try:
            return cls()
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {str(e)}") from e
