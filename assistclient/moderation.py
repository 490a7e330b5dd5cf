"""Content moderation requests and results."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping, Optional

from assistclient.transport import Transport

MODERATION_OMNI_LATEST = "omni-moderation-latest"
MODERATION_OMNI_20240926 = "omni-moderation-2024-09-26"
MODERATION_TEXT_STABLE = "text-moderation-stable"
MODERATION_TEXT_LATEST = "text-moderation-latest"
# Deprecated: use MODERATION_TEXT_STABLE or MODERATION_TEXT_LATEST.
MODERATION_TEXT_001 = "text-moderation-001"

VALID_MODERATION_MODELS = frozenset(
    {
        MODERATION_OMNI_LATEST,
        MODERATION_OMNI_20240926,
        MODERATION_TEXT_STABLE,
        MODERATION_TEXT_LATEST,
    }
)


class InvalidModerationModelError(ValueError):
    """The requested model cannot be used for moderation."""

    def __init__(self) -> None:
        super().__init__(
            "this model is not supported with moderation, "
            "please use text-moderation-stable or text-moderation-latest instead"
        )


def _flag(key: str) -> Any:
    return field(default=False, metadata={"json": key})


def _score(key: str) -> Any:
    return field(default=0.0, metadata={"json": key})


def _from_json(cls, data: Optional[Mapping[str, Any]]):
    data = data or {}
    values = {}
    for item in fields(cls):
        raw = data.get(item.metadata["json"])
        values[item.name] = type(item.default)(raw) if raw is not None else item.default
    return cls(**values)


def _to_json(obj) -> dict:
    return {item.metadata["json"]: getattr(obj, item.name) for item in fields(obj)}


@dataclass
class ModerationRequest:
    input: str = ""
    model: str = ""

    def to_dict(self) -> dict:
        return {key: value for key, value in (("input", self.input), ("model", self.model)) if value}


@dataclass
class ResultCategories:
    hate: bool = _flag("hate")
    hate_threatening: bool = _flag("hate/threatening")
    harassment: bool = _flag("harassment")
    harassment_threatening: bool = _flag("harassment/threatening")
    self_harm: bool = _flag("self-harm")
    self_harm_intent: bool = _flag("self-harm/intent")
    self_harm_instructions: bool = _flag("self-harm/instructions")
    sexual: bool = _flag("sexual")
    sexual_minors: bool = _flag("sexual/minors")
    violence: bool = _flag("violence")
    violence_graphic: bool = _flag("violence/graphic")

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ResultCategories":
        return _from_json(cls, data)

    def to_dict(self) -> dict:
        return _to_json(self)


@dataclass
class ResultCategoryScores:
    hate: float = _score("hate")
    hate_threatening: float = _score("hate/threatening")
    harassment: float = _score("harassment")
    harassment_threatening: float = _score("harassment/threatening")
    self_harm: float = _score("self-harm")
    self_harm_intent: float = _score("self-harm/intent")
    self_harm_instructions: float = _score("self-harm/instructions")
    sexual: float = _score("sexual")
    sexual_minors: float = _score("sexual/minors")
    violence: float = _score("violence")
    violence_graphic: float = _score("violence/graphic")

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ResultCategoryScores":
        return _from_json(cls, data)

    def to_dict(self) -> dict:
        return _to_json(self)


@dataclass
class Result:
    categories: ResultCategories = field(default_factory=ResultCategories)
    category_scores: ResultCategoryScores = field(default_factory=ResultCategoryScores)
    flagged: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Result":
        data = data or {}
        return cls(
            categories=ResultCategories.from_dict(data.get("categories")),
            category_scores=ResultCategoryScores.from_dict(data.get("category_scores")),
            flagged=bool(data.get("flagged", False)),
        )


@dataclass
class ModerationResponse:
    id: str = ""
    model: str = ""
    results: list = field(default_factory=list)
    headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], headers: Optional[Mapping[str, str]] = None) -> "ModerationResponse":
        return cls(
            id=data.get("id") or "",
            model=data.get("model") or "",
            results=[Result.from_dict(item) for item in data.get("results") or []],
            headers=dict(headers or {}),
        )


def moderations(transport: Transport, request: ModerationRequest) -> ModerationResponse:
    """Check text against the usage policies."""
    if request.model and request.model not in VALID_MODERATION_MODELS:
        raise InvalidModerationModelError()
    response = transport.request("POST", "/moderations", body=request.to_dict(), model=request.model)
    return ModerationResponse.from_dict(response.json(), response.headers)