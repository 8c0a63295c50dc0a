"""Error taxonomy for the summarization pipeline.

Every error carries a Korean ``user_message`` shown to the end user and the
HTTP status the server answers with. The core never retries; callers map
these to messages and stop.
"""
from typing import Optional


class SummaryError(Exception):
    status_code = 500
    default_message = "알 수 없는 오류가 발생했습니다. 잠시 후 다시 시도해주세요."

    def __init__(self, detail: str = "", user_message: Optional[str] = None):
        super().__init__(detail or self.default_message)
        self.detail = detail
        self.user_message = user_message or self.default_message


class ConfigurationError(SummaryError):
    default_message = "서버 설정 오류: API 키가 설정되지 않았습니다."


class InvalidUrlError(SummaryError):
    status_code = 400
    default_message = (
        "올바른 YouTube URL이 아닙니다. YouTube 영상의 전체 URL을 입력해주세요.\n"
        "예시: https://www.youtube.com/watch?v=xxxx"
    )


class CaptionUnavailableError(SummaryError):
    status_code = 400
    DISABLED = "disabled"
    ABSENT = "absent"

    _messages = {
        DISABLED: "이 영상은 자막이 비활성화되어 있습니다. 다른 영상을 선택해주세요.",
        ABSENT: "이 영상에는 자막이 없습니다. 자막이 있는 다른 영상을 선택해주세요.",
    }

    def __init__(self, reason: str = ABSENT, detail: str = ""):
        if reason not in self._messages:
            raise ValueError(f"Unknown caption failure reason: {reason}")
        self.reason = reason
        super().__init__(detail or f"captions {reason}", self._messages[reason])


class SummarizationError(SummaryError):
    default_message = "요약 생성 중 오류가 발생했습니다. 다시 시도해주세요."


class MetadataNotFoundError(SummaryError):
    status_code = 404
    default_message = "영상 정보를 가져올 수 없습니다."


class TransportError(SummaryError):
    status_code = 502
    default_message = "외부 서비스와 통신하는 중 오류가 발생했습니다. 잠시 후 다시 시도해주세요."
    rate_limited_message = (
        "현재 너무 많은 요청이 들어와 API 할당량을 초과했습니다.\n"
        "잠시 후 (약 1분 뒤) 다시 시도해주세요."
    )

    def __init__(self, detail: str = "", rate_limited: bool = False):
        self.rate_limited = rate_limited
        super().__init__(detail, self.rate_limited_message if rate_limited else None)
        if rate_limited:
            self.status_code = 429


class SummarizerTransportError(SummarizationError, TransportError):
    """The model call itself failed; both a summarization and a transport failure."""

    def __init__(self, detail: str = "", rate_limited: bool = False):
        TransportError.__init__(self, detail, rate_limited=rate_limited)
