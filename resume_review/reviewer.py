"""LLM-backed resume reviewers.

Two providers are supported: the Hugging Face inference router, which speaks
the OpenAI chat-completions protocol, and a local Ollama server. Both are
built once at startup by ``build_reviewer`` and shared across requests.
"""
import logging
from typing import Optional

import openai
import requests
from openai import OpenAI

from .config import Settings
from .errors import ReviewFailed

logger = logging.getLogger(__name__)

MAX_REVIEW_TOKENS = 800

SYSTEM_PROMPT = (
    "You are an expert resume reviewer. Provide structured, professional, and "
    "constructive feedback. Format the response in clean, well-structured Markdown "
    "with clear section headings, bullet points, and bold highlights where needed."
)

REVIEW_TEMPLATE = """Please review this resume for:
1. Overall Impression
2. Strengths
3. Areas for Improvement
4. ATS Compatibility Score (0-100)
5. Suggested Action Items

Resume:
{resume_text}"""


def build_review_prompt(resume_text: str) -> str:
    return REVIEW_TEMPLATE.format(resume_text=resume_text)


class ResumeReviewer:
    """Base class: turn resume text into Markdown feedback."""

    name = "base"

    def review(self, resume_text: str) -> str:
        raise NotImplementedError


class HuggingFaceReviewer(ResumeReviewer):
    name = "huggingface"

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        base_url: str,
        timeout: float = 60.0,
    ):
        self.model = model
        if api_key:
            # no retries: one outbound call per request
            self._client = OpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)
        else:
            logger.warning("HF_API_KEY is not set; resume reviews will fail until it is configured")
            self._client = None

    def review(self, resume_text: str) -> str:
        if self._client is None:
            raise ReviewFailed("Server error while analyzing resume.", "HF_API_KEY is not configured")

        try:
            completion = self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_review_prompt(resume_text)},
                ],
                max_tokens=MAX_REVIEW_TOKENS,
            )
        except openai.OpenAIError as e:
            logger.error("Hugging Face request failed: %s", e)
            raise ReviewFailed("Server error while analyzing resume.", str(e)) from e

        content = None
        if completion.choices:
            content = completion.choices[0].message.content
        if not content:
            raise ReviewFailed("Server error while analyzing resume.", "No valid response from Hugging Face")
        return content


class OllamaReviewer(ResumeReviewer):
    name = "ollama"

    def __init__(self, url: str, model: str, timeout: float = 60.0):
        self.url = url
        self.model = model
        self.timeout = timeout

    def review(self, resume_text: str) -> str:
        payload = {
            "model": self.model,
            "system": SYSTEM_PROMPT,
            "prompt": build_review_prompt(resume_text),
            "stream": False,
            "options": {"num_predict": MAX_REVIEW_TOKENS},
        }
        try:
            response = requests.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            response_json = response.json()
        except requests.exceptions.RequestException as e:
            logger.error("Ollama request failed: %s", e)
            raise ReviewFailed("Server error while analyzing resume.", f"Request failed: {e}") from e
        except ValueError as e:
            raise ReviewFailed("Server error while analyzing resume.", f"JSON decoding failed: {e}") from e

        content = response_json.get("response") if isinstance(response_json, dict) else None
        if not content:
            raise ReviewFailed("Server error while analyzing resume.", "Invalid response format from Ollama.")
        return content


def build_reviewer(settings: Settings) -> ResumeReviewer:
    if settings.llm_provider == "ollama":
        logger.info("Using Ollama reviewer at %s (model %s)", settings.ollama_url, settings.ollama_model)
        return OllamaReviewer(settings.ollama_url, settings.ollama_model, timeout=settings.llm_timeout)
    if settings.llm_provider != "huggingface":
        raise ValueError(f"Unknown LLM_PROVIDER: {settings.llm_provider!r}")
    logger.info("Using Hugging Face reviewer (model %s)", settings.hf_model)
    return HuggingFaceReviewer(
        settings.hf_api_key,
        settings.hf_model,
        settings.hf_base_url,
        timeout=settings.llm_timeout,
    )
