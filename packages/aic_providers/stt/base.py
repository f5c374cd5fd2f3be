import base64
import binascii
import re
from abc import ABC, abstractmethod
from typing import Tuple

from packages.aic_core.dto import TranscriptionRequestDTO, TranscriptDTO
from packages.aic_core.errors import TranscriptionError

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)(;[^,;]*)*;base64,(?P<data>.*)$", re.DOTALL)


def decode_data_uri(data_uri: str) -> Tuple[str, bytes]:
    """
    Split 'data:<mimetype>;base64,<encoded_data>' into (mime_type, raw bytes).
    """
    match = _DATA_URI_RE.match(data_uri or "")
    if not match:
        raise TranscriptionError("Invalid audio data.")
    try:
        raw = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError) as e:
        raise TranscriptionError("Invalid audio data.") from e
    return match.group("mime"), raw


class ISTTProvider(ABC):
    @abstractmethod
    async def transcribe(self, request: TranscriptionRequestDTO) -> TranscriptDTO:
        """
        Audio is passed as a base64 data URI, returns TranscriptDTO.
        Async method for non-blocking I/O.
        """
        pass
