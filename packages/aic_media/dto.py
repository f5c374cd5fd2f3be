import base64

from pydantic import ConfigDict, Field

from packages.aic_core.dto import BaseDTO


class AudioPayload(BaseDTO):
    """
    Encoded audio assembled from the chunks of one recording.
    """
    model_config = ConfigDict(frozen=True)

    data: bytes = Field(default=b"", repr=False)
    mime_type: str = "audio/webm"

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_empty(self) -> bool:
        return self.size == 0

    def to_data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"
