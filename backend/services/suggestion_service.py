from __future__ import annotations

import json
import logging
import re
from typing import Any, Protocol, Sequence

import httpx
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from core.config import settings
from lesson_schedule.constants import SUGGESTION_PERIODS
from lesson_schedule.directory import TeacherRef
from schemas.schedule import PeriodNumber


logger = logging.getLogger(__name__)


MAX_PROMPT_TEACHERS = 40
MAX_PROMPT_CLASSES = 15

_FENCE_RE = re.compile(r"```(?:json)?\n?|\n?```")


class SuggestionGenerationError(RuntimeError):
    """The suggestion generator failed; the schedule must be left untouched."""

    code = "SUGGESTION_FAILED"


class SuggestionCredentialsMissingError(SuggestionGenerationError):
    code = "API_KEY_MISSING"


class SuggestedSlot(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day: str
    period: PeriodNumber
    class_name: str = Field(alias="className")
    subject: str = ""
    teacher_name: str = Field(default="", alias="teacherName")


_SUGGESTIONS = TypeAdapter(list[SuggestedSlot])


class SuggestionGenerator(Protocol):
    def __call__(
        self,
        teachers: Sequence[TeacherRef],
        class_names: Sequence[str],
        days: Sequence[str],
    ) -> list[SuggestedSlot]: ...


RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "day": {"type": "STRING"},
            "period": {"type": "INTEGER"},
            "className": {"type": "STRING"},
            "subject": {"type": "STRING"},
            "teacherName": {"type": "STRING"},
        },
    },
}


def select_prompt_teachers(teachers: Sequence[TeacherRef], limit: int = MAX_PROMPT_TEACHERS) -> list[TeacherRef]:
    """Teachers with a load, heaviest first; keeps the request small enough to answer in time."""

    active = [t for t in teachers if t.teaching_hours > 0]
    active.sort(key=lambda t: t.teaching_hours, reverse=True)
    return active[:limit]


def build_prompt(
    teachers: Sequence[TeacherRef],
    class_names: Sequence[str],
    days: Sequence[str],
    *,
    school_name: str,
) -> str:
    teacher_data = [{"name": t.name, "subjects": list(t.subjects), "load": t.teaching_hours} for t in teachers]
    return "\n".join(
        [
            f"You are an experienced timetable planner for {school_name}.",
            "Build a weekly lesson roster as a JSON array.",
            "",
            f"Teachers and weekly teaching load: {json.dumps(teacher_data, ensure_ascii=False)}",
            f"Classes to schedule: {json.dumps(list(class_names), ensure_ascii=False)}",
            f"School days: {json.dumps(list(days), ensure_ascii=False)}",
            f"Periods per day: {json.dumps(list(SUGGESTION_PERIODS))}",
            "",
            "Rules:",
            "1. A teacher never teaches two classes at the same (day, period).",
            "2. Spread each teacher's hours over the week instead of stacking one day.",
            "3. A teacher only teaches subjects listed for them.",
            "4. Every item has day, period, className, subject and teacherName.",
            "",
            "Answer with the JSON array only.",
        ]
    )


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def parse_suggestions(text: str) -> list[SuggestedSlot]:
    text = strip_code_fences(text or "")
    if not text:
        return []
    try:
        return _SUGGESTIONS.validate_python(json.loads(text))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise SuggestionGenerationError("Suggestion response is not a valid schedule") from exc


def _response_text(payload: dict[str, Any]) -> str:
    candidates = payload.get("candidates") or []
    if not candidates:
        return ""
    parts = ((candidates[0] or {}).get("content") or {}).get("parts") or []
    # Thinking models may return thought parts before the answer.
    return "".join(str(p.get("text", "")) for p in parts if isinstance(p, dict) and not p.get("thought"))


class GeminiScheduleSuggester:
    """Asks the Gemini `generateContent` REST endpoint for a draft roster."""

    def __init__(
        self,
        *,
        api_key: str | None,
        model: str,
        base_url: str,
        timeout: float = 120.0,
        school_name: str = "",
        thinking_budget: int = 2048,
        client: httpx.Client | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.school_name = school_name
        self.thinking_budget = thinking_budget
        self._client = client

    @classmethod
    def from_settings(cls) -> "GeminiScheduleSuggester":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout=settings.suggestion_timeout_seconds,
            school_name=settings.school_name,
        )

    def _request_body(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
                "thinkingConfig": {"thinkingBudget": self.thinking_budget},
            },
        }

    def _post(self, client: httpx.Client, body: dict[str, Any]) -> dict[str, Any]:
        r = client.post(
            f"{self.base_url}/models/{self.model}:generateContent",
            json=body,
            headers={"x-goog-api-key": str(self.api_key)},
            timeout=self.timeout,
        )
        r.raise_for_status()
        return r.json()

    def __call__(
        self,
        teachers: Sequence[TeacherRef],
        class_names: Sequence[str],
        days: Sequence[str],
    ) -> list[SuggestedSlot]:
        if not self.api_key:
            raise SuggestionCredentialsMissingError("API_KEY_MISSING")

        prompt_teachers = select_prompt_teachers(teachers)
        prompt_classes = list(class_names)[:MAX_PROMPT_CLASSES]
        body = self._request_body(build_prompt(prompt_teachers, prompt_classes, days, school_name=self.school_name))

        logger.info(
            "Requesting schedule suggestion model=%s teachers=%d classes=%d days=%d",
            self.model,
            len(prompt_teachers),
            len(prompt_classes),
            len(days),
        )
        try:
            if self._client is not None:
                payload = self._post(self._client, body)
            else:
                with httpx.Client(follow_redirects=True) as client:
                    payload = self._post(client, body)
        except httpx.HTTPStatusError as exc:
            logger.warning("Suggestion request rejected: %s", exc.response.status_code)
            raise SuggestionGenerationError(f"Suggestion service returned {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.warning("Suggestion request failed: %s", exc)
            raise SuggestionGenerationError("Could not reach the suggestion service") from exc
        except ValueError as exc:
            raise SuggestionGenerationError("Suggestion service returned a non-JSON body") from exc

        suggestions = parse_suggestions(_response_text(payload))
        logger.info("Received %d suggested slots", len(suggestions))
        return suggestions
