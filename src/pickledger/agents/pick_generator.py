"""Turn the user's strategy into structured picks via the LLM."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from pickledger.agents.llm_client import chat_completion
from pickledger.errors import PickGenerationError

logger = logging.getLogger(__name__)

MAX_PICKS = 5
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")
# A quoted string is matched whole so that "//" inside a value survives.
_STRING_OR_COMMENT = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*')
_SPORT_ALIASES = {"atp": "Tennis", "wta": "Tennis", "tennis": "Tennis", "nhl": "NHL", "hockey": "NHL"}

SYSTEM_PROMPT = """You are a careful sports betting analyst covering NHL and Tennis.
Provide data-driven picks for today's slate and never promise outcomes.

User strategy: "{strategy}"
{schedule_context}

Rules:
- Prioritise teams listed as HOT from our own betting history and avoid COLD teams.
- Only use odds that appear in the supplied market data and quote them exactly.
- Tennis picks must name the specific player and include the venue in the event.
- Reasoning is a plain string of 2-3 sentences: key stat, form or H2H context, why it is value.

Respond with JSON only:
{{"picks": [{{"sport": "NHL" | "Tennis", "event": str, "prediction": str, "reasoning": str,
"confidence": 1-10, "scheduledTime": str, "edge": str, "odds": str}}]}}
Return up to {max_picks} unique picks sorted by confidence."""


class GeneratedPick(BaseModel):
    """One pick as proposed by the model, before sizing and storage."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    sport: str
    event: str
    prediction: str
    reasoning: str = ""
    confidence: int = 5
    odds: str | None = None
    edge: str | None = None
    scheduled_time: str | None = Field(
        default=None,
        validation_alias=AliasChoices("scheduledTime", "scheduled_time"),
    )

    @field_validator("sport", mode="before")
    @classmethod
    def _canonical_sport(cls, value: Any) -> str:
        text = str(value or "").strip()
        return _SPORT_ALIASES.get(text.lower(), text)

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: Any) -> int:
        try:
            number = int(round(float(value)))
        except (TypeError, ValueError):
            return 5
        return max(1, min(10, number))

    @field_validator("reasoning", mode="before")
    @classmethod
    def _flatten_reasoning(cls, value: Any) -> str:
        if isinstance(value, dict):
            return " ".join(str(part) for part in value.values())
        if isinstance(value, list):
            return " ".join(str(part) for part in value)
        return str(value or "")

    @field_validator("odds", "edge", "scheduled_time", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str | None:
        if value is None or value == "":
            return None
        return str(value)


def extract_json(content: str) -> Any:
    """Find the JSON payload in a chatty reply and strip ``//`` comments before parsing."""

    matches = [m for m in (_JSON_OBJECT.search(content), _JSON_ARRAY.search(content)) if m]
    candidate = min(matches, key=lambda m: m.start()).group(0) if matches else content
    scrubbed = _STRING_OR_COMMENT.sub(lambda m: m.group(1) or "", candidate)
    try:
        return json.loads(scrubbed)
    except json.JSONDecodeError as exc:
        raise PickGenerationError("AI returned unparseable content. Please try again.") from exc


def parse_generated_picks(content: str) -> List[GeneratedPick]:
    parsed = extract_json(content)
    if isinstance(parsed, list):
        records = parsed
    elif isinstance(parsed, dict):
        records = next(
            (parsed[key] for key in ("picks", "data", "predictions", "matches") if isinstance(parsed.get(key), list)),
            [],
        )
    else:
        records = []

    picks: List[GeneratedPick] = []
    for record in records:
        try:
            picks.append(GeneratedPick.model_validate(record))
        except ValidationError as exc:
            logger.warning("Dropping malformed pick %r: %s", record, exc.errors()[0].get("msg"))
    return picks


def build_messages(
    strategy: str,
    sport: str | None = None,
    context: str | None = None,
    schedule_context: str = "",
) -> List[Dict[str, str]]:
    system = SYSTEM_PROMPT.format(
        strategy=strategy,
        schedule_context=schedule_context,
        max_picks=MAX_PICKS,
    )
    user = (
        f"Generate picks for {sport or 'upcoming games'}.\n"
        f"Context: {context or 'Focus only on WTA, ATP and NHL.'}"
    )
    return [{"role": "system", "content": system}, {"role": "user", "content": user}]


def generate_picks(
    strategy: str,
    sport: str | None = None,
    context: str | None = None,
    schedule_context: str = "",
) -> List[GeneratedPick]:
    content = chat_completion(build_messages(strategy, sport, context, schedule_context))
    logger.debug("Raw AI content: %s", content)
    picks = parse_generated_picks(content)
    logger.info("AI proposed %s picks", len(picks))
    return picks[:MAX_PICKS]
