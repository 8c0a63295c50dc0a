from typing import List, Optional
import requests
from youtube_transcript_api import (
    YouTubeTranscriptApi,
    TranscriptsDisabled,
    NoTranscriptFound,
    VideoUnavailable,
    RequestBlocked,
    CouldNotRetrieveTranscript,
)
from yt_summary.core.video import CaptionSource
from yt_summary.errors import CaptionUnavailableError, MetadataNotFoundError, TransportError
from yt_summary.models.transcript import CaptionFragment, Transcript
from yt_summary.utils.logger import logger

class LibraryCaptionSource(CaptionSource):
    """Captions through youtube-transcript-api, Korean first."""
    name = "youtube-transcript-api"

    def __init__(self, languages: Optional[List[str]] = None, target_lang: str = "ko", api: Optional[YouTubeTranscriptApi] = None):
        self.languages = languages or ["ko", "en"]
        self.target_lang = target_lang
        self.api = api or YouTubeTranscriptApi()

    def fetch(self, video_id: str) -> Transcript:
        logger.info(f"Fetching captions for {video_id} via youtube-transcript-api...")
        try:
            transcript_list = self.api.list(video_id)
            try:
                transcript = transcript_list.find_transcript(self.languages)
            except NoTranscriptFound:
                transcript = next(iter(transcript_list), None)
                if transcript is None:
                    raise
                logger.info(f"No {self.languages} track, using {transcript.language_code}")
                if transcript.language_code != self.target_lang and transcript.is_translatable:
                    try:
                        transcript = transcript.translate(self.target_lang)
                    except CouldNotRetrieveTranscript as e:
                        logger.warning(f"Translation to {self.target_lang} unavailable: {e}")
            data = transcript.fetch()
        except TranscriptsDisabled as e:
            raise CaptionUnavailableError(CaptionUnavailableError.DISABLED, str(e)) from e
        except NoTranscriptFound as e:
            raise CaptionUnavailableError(CaptionUnavailableError.ABSENT, str(e)) from e
        except VideoUnavailable as e:
            raise MetadataNotFoundError(str(e)) from e
        except RequestBlocked as e:
            raise TransportError(str(e), rate_limited=True) from e
        except CouldNotRetrieveTranscript as e:
            raise TransportError(str(e)) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(str(e)) from e

        fragments = [
            CaptionFragment(text=" ".join(str(item.text).split()), offset=float(item.start), duration=float(item.duration))
            for item in data
        ]
        return Transcript(
            video_id=video_id,
            language=transcript.language_code,
            source="youtube_transcript_api",
            fragments=fragments
        )
