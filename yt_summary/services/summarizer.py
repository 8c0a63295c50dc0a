import os
import re
from typing import Optional
import openai
from jinja2 import Environment, FileSystemLoader
from openai import OpenAI
from yt_summary.config import Settings
from yt_summary.errors import ConfigurationError, SummarizationError, SummarizerTransportError
from yt_summary.models.summary import SummaryResult
from yt_summary.utils.logger import logger

PROMPTS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "prompts")

MAX_KEYWORDS = 5

# First match wins; each capture stops at the next marker.
_SUMMARY_RE = re.compile(r"\[요약\](.*?)(?=\[타임라인\])", re.DOTALL)
_TIMELINE_RE = re.compile(r"\[타임라인\](.*?)(?=\[키워드\])", re.DOTALL)
_KEYWORDS_RE = re.compile(r"\[키워드\](.*?)(?=\[요약\]|$)", re.DOTALL)
_KEYWORD_SPLIT_RE = re.compile(r"[,，]")

_LANGUAGE_NAMES = {"ko": "한국어", "en": "영어", "ja": "일본어"}

def parse_summary_response(text: str) -> SummaryResult:
    """Split a free-text model answer into summary, timeline and keywords.

    Raises SummarizationError when a section is missing or empty, or when no
    keyword survives filtering.
    """
    sections = {}
    for name, pattern in (("summary", _SUMMARY_RE), ("timeline", _TIMELINE_RE), ("keywords", _KEYWORDS_RE)):
        m = pattern.search(text or "")
        if not m or not m.group(1).strip():
            logger.error(f"Section '{name}' not found in model response")
            raise SummarizationError(f"missing section: {name}")
        sections[name] = m.group(1).strip()

    keywords = [k.strip() for k in _KEYWORD_SPLIT_RE.split(sections["keywords"])]
    keywords = [k for k in keywords if k][:MAX_KEYWORDS]
    if not keywords:
        logger.error("No keywords in model response")
        raise SummarizationError("no keywords")

    return SummaryResult(summary=sections["summary"], timeline=sections["timeline"], keywords=keywords)

class SummarizerService:
    def __init__(self, api_key: str, model: str, base_url: Optional[str] = None,
                 temperature: float = 0.7, language: str = "ko", client: Optional[OpenAI] = None):
        if not api_key and client is None:
            raise ConfigurationError("LLM_API_KEY is not set")
        self.model = model
        self.temperature = temperature
        self.language = language
        # Single call per request; retrying is left to the caller.
        self.client = client or OpenAI(api_key=api_key, base_url=base_url, max_retries=0)
        self.env = Environment(loader=FileSystemLoader(PROMPTS_DIR))
        self.template = self.env.get_template("summary.jinja2")

    @classmethod
    def from_settings(cls, settings: Settings) -> "SummarizerService":
        return cls(
            api_key=settings.LLM_API_KEY,
            model=settings.LLM_MODEL,
            base_url=settings.LLM_BASE_URL,
            temperature=settings.LLM_TEMPERATURE,
            language=settings.TARGET_LANG
        )

    def build_prompt(self, transcript_text: str) -> str:
        return self.template.render(
            transcript=transcript_text,
            language_name=_LANGUAGE_NAMES.get(self.language, self.language),
            min_minutes=3,
            max_minutes=5,
            keyword_count=3
        )

    def _call_llm(self, prompt: str) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature
            )
        except openai.RateLimitError as e:
            raise SummarizerTransportError(str(e), rate_limited=True) from e
        except openai.APIError as e:
            raise SummarizerTransportError(str(e)) from e
        return response.choices[0].message.content or ""

    def summarize(self, transcript_text: str) -> SummaryResult:
        logger.info(f"Summarizing transcript ({len(transcript_text)} chars) with {self.model}...")
        content = self._call_llm(self.build_prompt(transcript_text))
        logger.debug(f"Model response: {content}")
        return parse_summary_response(content)
