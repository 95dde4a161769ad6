"""
litellm-backed summary providers.

Every backend speaks through `litellm.completion`; adapters differ only
in model prefix, credential and defaults.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import litellm

from journalfeed.config import ProviderConfig
from journalfeed.errors import ConfigurationError, MalformedResponseError, UpstreamError
from journalfeed.model.paper import Paper
from journalfeed.model.summary import STRUCTURED_FIELDS, SummaryDraft
from .base import SummaryProvider

logger = logging.getLogger(__name__)

MAX_ABSTRACT_CHARS = 8000

SYSTEM_PROMPT = """You are an expert academic assistant who summarizes research papers.
Read the paper metadata and respond ONLY with a JSON object, no markdown, no extra text.

Required JSON schema:
{
  "purpose": "what problem the paper addresses and why",
  "methodology": "how the authors approach it",
  "findings": "the main results",
  "implications": "why the results matter and for whom"
}

Each value is 1-3 sentences of plain text."""


class LiteLLMSummaryProvider(SummaryProvider):
    """Base adapter: subclasses set name, display_name and model_prefix."""

    model_prefix: str = ""

    def __init__(self, cfg: ProviderConfig):
        self.cfg = cfg

    @property
    def default_model(self) -> str:
        return self.cfg.model

    @property
    def models(self) -> List[str]:
        models = list(self.cfg.models)
        if self.cfg.model and self.cfg.model not in models:
            models.insert(0, self.cfg.model)
        return models

    @property
    def is_configured(self) -> bool:
        return bool(self.cfg.resolve_api_key())

    def generate(self, paper: Paper, model: Optional[str] = None) -> SummaryDraft:
        api_key = self.cfg.resolve_api_key()
        if not api_key:
            raise ConfigurationError(f"{self.display_name} API key is not configured")

        model_name = model or self.default_model
        logger.info(f"🤖 Summarizing paper={paper.id} with {self.name}/{model_name}")

        content = self._complete(api_key, model_name, build_user_prompt(paper))
        return normalize_response(content, model_name)

    def _complete(self, api_key: str, model_name: str, user_prompt: str) -> str:
        kwargs: Dict[str, Any] = {
            "model": f"{self.model_prefix}/{model_name}" if self.model_prefix else model_name,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": user_prompt},
            ],
            "api_key": api_key,
            "timeout": self.cfg.timeout_seconds,
            "num_retries": self.cfg.max_retries,
            "max_tokens": self.cfg.max_tokens,
        }
        if self.cfg.api_base:
            kwargs["api_base"] = self.cfg.api_base

        try:
            resp = litellm.completion(**kwargs)
        except Exception as e:  # litellm maps every backend error onto its own hierarchy
            logger.warning(f"❌ {self.name} call failed: {type(e).__name__}: {e}")
            raise UpstreamError(f"{self.display_name} request failed: {e}") from e

        try:
            return resp.choices[0].message.content or ""
        except (AttributeError, IndexError, KeyError, TypeError) as e:
            raise MalformedResponseError(f"Unexpected {self.display_name} response shape") from e


class ClaudeProvider(LiteLLMSummaryProvider):
    name = "claude"
    display_name = "Claude (Anthropic)"
    model_prefix = "anthropic"


class OpenAIProvider(LiteLLMSummaryProvider):
    name = "openai"
    display_name = "OpenAI"
    model_prefix = "openai"


class GeminiProvider(LiteLLMSummaryProvider):
    name = "gemini"
    display_name = "Gemini (Google)"
    model_prefix = "gemini"


# =========================================================
# Prompt + response normalization
# =========================================================

def build_user_prompt(paper: Paper) -> str:
    authors = ", ".join(paper.authors) if paper.authors else "Unknown"
    abstract = (paper.abstract or "Not available.")[:MAX_ABSTRACT_CHARS]
    return (
        f"Title: {paper.title}\n"
        f"Authors: {authors}\n"
        f"URL: {paper.url or 'Not available.'}\n"
        f"Abstract: {abstract}\n"
    )


def normalize_response(content: str, model_name: str) -> SummaryDraft:
    """
    Turn raw model output into a SummaryDraft.

    - JSON object with the four fields -> structured draft
    - prose (not JSON) -> free-text draft
    - empty output, or JSON lacking the fields -> MalformedResponseError
    """
    content = (content or "").strip()
    if not content:
        raise MalformedResponseError("Model returned an empty response")

    parsed = _parse_json_object(content)
    if parsed is None:
        return SummaryDraft(model=model_name, text=content)

    fields = {name: _as_text(parsed.get(name)) for name in STRUCTURED_FIELDS}
    if all(fields.values()):
        return SummaryDraft(model=model_name, **fields)

    for key in ("summary_text", "summary", "text"):
        text = _as_text(parsed.get(key))
        if text:
            return SummaryDraft(model=model_name, text=text)

    missing = sorted(name for name, value in fields.items() if not value)
    raise MalformedResponseError(f"Summary JSON is missing fields: {missing}")


def _as_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, list):
        items = [str(v).strip() for v in value if str(v).strip()]
        return "\n".join(items) or None
    return None


def _parse_json_object(content: str) -> Optional[Dict[str, Any]]:
    """Parse possibly noisy model output; None when it is not JSON."""
    candidates = [content]
    fenced = _extract_fenced_json(content)
    if fenced:
        candidates.insert(0, fenced)
    start = content.find("{")
    end = content.rfind("}")
    if start != -1 and end > start:
        candidates.append(content[start : end + 1])

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed
        raise MalformedResponseError("Expected a JSON object from the model")
    return None


def _extract_fenced_json(content: str) -> Optional[str]:
    lines = content.splitlines()
    start_idx = None
    for idx, line in enumerate(lines):
        if line.strip().startswith("```"):
            start_idx = idx + 1
            break
    if start_idx is None:
        return None
    for idx in range(start_idx, len(lines)):
        if lines[idx].strip().startswith("```"):
            snippet = "\n".join(lines[start_idx:idx]).strip()
            return snippet or None
    return None
