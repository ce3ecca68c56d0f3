"""Learning / Compatibility API 통합 테스트"""

import pytest
import pytest_asyncio


@pytest_asyncio.fixture
async def profiles(client, api_key_header):
    """seeker와 후보 프로필"""
    for payload in (
        {
            "user_id": "seeker",
            "signature": "#808080",
            "factual": {"interests": ["Hiking", "Art"]},
            "preferences": {
                "desired_age_range": {"min": 25, "max": 35},
                "veto_criteria": {"non_smoker_only": True},
            },
        },
        {
            "user_id": "ok",
            "signature": "#808080",
            "factual": {
                "age": 30,
                "interests": ["hiking"],
                "smoking_habits": "never",
            },
        },
        {
            "user_id": "smoker",
            "signature": "#808080",
            "factual": {"age": 30, "smoking_habits": "daily"},
        },
    ):
        response = await client.post(
            "/api/v1/profiles", json=payload, headers=api_key_header
        )
        assert response.status_code == 201


class TestCompatibilityAPI:
    """호환도 API 테스트"""

    @pytest.mark.asyncio
    async def test_score(self, client, api_key_header, profiles):
        """veto를 통과한 후보의 점수"""
        response = await client.get(
            "/api/v1/compatibility/seeker/ok", headers=api_key_header
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["veto_factor"] == 1
        assert data["hhc_score"] == 1.0
        assert 0.6 < data["total_score"] <= 1.0
        assert data["breakdown"]["components"]["age"] == 1.0
        assert data["breakdown"]["interest_overlap"] == pytest.approx(0.5)

    @pytest.mark.asyncio
    async def test_vetoed_score(self, client, api_key_header, profiles):
        """veto 위반 후보는 0점"""
        response = await client.get(
            "/api/v1/compatibility/seeker/smoker", headers=api_key_header
        )

        data = response.json()["data"]
        assert data["total_score"] == 0.0
        assert data["veto_factor"] == 0
        assert data["breakdown"]["veto_reason"] == "non_smoker_only"

    @pytest.mark.asyncio
    async def test_unknown_candidate(self, client, api_key_header, profiles):
        response = await client.get(
            "/api/v1/compatibility/seeker/missing", headers=api_key_header
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_vetoed_candidate_not_recommended(
        self, client, api_key_header, profiles
    ):
        """veto 위반 후보는 큐에 들어가지 않음"""
        response = await client.post(
            "/api/v1/recommendations/seeker/populate", headers=api_key_header
        )
        dequeued = await client.post(
            "/api/v1/recommendations/seeker/dequeue", headers=api_key_header
        )

        assert response.json()["data"]["queue_size"] == 1
        assert dequeued.json()["data"]["recommendation"]["candidate_id"] == (
            "ok"
        )


class TestLearningAPI:
    """선호 학습 API 테스트"""

    @pytest.mark.asyncio
    async def test_record_signal(self, client, api_key_header, profiles):
        """신호 기록 후 가중치 합은 1"""
        response = await client.post(
            "/api/v1/learning/seeker/signals",
            json={
                "candidate_id": "ok",
                "attribute": "interests",
                "reaction": "positive",
            },
            headers=api_key_header,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["signal"]["attribute"] == "interests"
        assert data["signal"]["attraction_force"] == 0.2
        assert data["total_interactions"] == 1
        assert sum(data["weights"].values()) == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_invalid_attribute(self, client, api_key_header, profiles):
        """알 수 없는 속성은 요청 검증에서 거부"""
        response = await client.post(
            "/api/v1/learning/seeker/signals",
            json={
                "candidate_id": "ok",
                "attribute": "eye_color",
                "reaction": "positive",
            },
            headers=api_key_header,
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_signal_for_unknown_user(self, client, api_key_header):
        response = await client.post(
            "/api/v1/learning/missing/signals",
            json={
                "candidate_id": "ok",
                "attribute": "age",
                "reaction": "negative",
            },
            headers=api_key_header,
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_next_question(self, client, api_key_header, profiles):
        """처음에는 묻지 않은 첫 속성"""
        response = await client.get(
            "/api/v1/learning/seeker/next-question", headers=api_key_header
        )

        assert response.status_code == 200
        assert response.json()["data"] == {
            "attribute": "age",
            "question": "What age range feels right for you?",
        }
