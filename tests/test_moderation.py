import io
import json

import pytest

from assistclient.moderation import (
    MODERATION_OMNI_20240926,
    MODERATION_OMNI_LATEST,
    MODERATION_TEXT_LATEST,
    MODERATION_TEXT_STABLE,
    InvalidModerationModelError,
    ModerationRequest,
    ModerationResponse,
    Result,
    ResultCategories,
    ResultCategoryScores,
    moderations,
)
from assistclient.transport import ApiResponse, Transport

_RULES = [
    ("hate", "hate"),
    ("harass", "harassment"),
    ("suicide", "self-harm"),
    ("porn", "sexual"),
    ("kill", "violence"),
    ("corpse", "violence/graphic"),
]


class ModerationServer:
    def __init__(self):
        self.requests = []

    def __call__(self, prepared):
        self.requests.append(prepared)
        request = json.loads(prepared.body)
        categories, scores = {}, {}
        for word, key in _RULES:
            if word in request.get("input", ""):
                categories[key] = True
                scores[key] = 1
                break
        body = {
            "id": "1",
            "model": request.get("model", ""),
            "results": [{"categories": categories, "category_scores": scores, "flagged": True}],
        }
        return ApiResponse(200, {}, io.BytesIO(json.dumps(body).encode()))


@pytest.fixture
def server():
    return ModerationServer()


@pytest.fixture
def transport(server):
    return Transport("token", "http://localhost/v1", sender=server)


def test_moderations(transport, server):
    response = moderations(
        transport, ModerationRequest(model=MODERATION_TEXT_STABLE, input="I want to kill them.")
    )
    assert response.model == MODERATION_TEXT_STABLE
    assert response.results[0].flagged is True
    assert response.results[0].categories.violence is True
    assert response.results[0].category_scores.violence == 1.0
    assert server.requests[0].url == "http://localhost/v1/moderations"
    assert server.requests[0].method == "POST"


@pytest.mark.parametrize(
    "model",
    [MODERATION_TEXT_STABLE, MODERATION_TEXT_LATEST, MODERATION_OMNI_20240926, MODERATION_OMNI_LATEST, ""],
)
def test_valid_models(transport, model):
    response = moderations(transport, ModerationRequest(model=model, input="I want to kill them."))
    assert response.model == model


def test_invalid_model_raises_before_sending(transport, server):
    with pytest.raises(InvalidModerationModelError):
        moderations(transport, ModerationRequest(model="gpt-3.5-turbo", input="I want to kill them."))
    assert server.requests == []


def test_request_omits_empty_fields():
    assert ModerationRequest(input="hello").to_dict() == {"input": "hello"}
    assert ModerationRequest().to_dict() == {}


def test_categories_round_trip_uses_wire_keys():
    categories = ResultCategories(hate_threatening=True, self_harm_intent=True)
    data = categories.to_dict()
    assert data["hate/threatening"] is True
    assert data["self-harm/intent"] is True
    assert data["violence"] is False
    assert ResultCategories.from_dict(data) == categories


def test_scores_round_trip():
    scores = ResultCategoryScores(sexual_minors=0.25, violence_graphic=0.5)
    assert scores.to_dict()["sexual/minors"] == 0.25
    assert ResultCategoryScores.from_dict(scores.to_dict()) == scores


def test_result_from_dict_defaults():
    result = Result.from_dict({})
    assert result.flagged is False
    assert result.categories == ResultCategories()


def test_response_from_dict_keeps_headers():
    response = ModerationResponse.from_dict({"id": "x", "results": []}, {"x-ratelimit-limit-requests": "5"})
    assert response.id == "x"
    assert response.headers == {"x-ratelimit-limit-requests": "5"}