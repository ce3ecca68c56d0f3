"""사용자 시나리오 E2E 테스트

온보딩부터 추천, 좋아요, 매칭까지 채팅 레이어가 호출하는 순서대로
전체 플로우가 올바르게 동작하는지 검증합니다.
"""

import pytest

API = "/api/v1"


class TestRequestTracking:
    """요청 추적 E2E 시나리오 테스트"""

    @pytest.mark.asyncio
    async def test_request_id_consistency(self, client):
        """동일 요청에 대한 Request ID 일관성"""
        custom_id = "test-request-tracking-001"

        response = await client.get(
            f"{API}/",
            headers={"X-Request-ID": custom_id},
        )

        assert response.headers["x-request-id"] == custom_id

    @pytest.mark.asyncio
    async def test_multiple_requests_different_ids(self, client):
        """다중 요청에 대한 고유 Request ID"""
        response1 = await client.get(f"{API}/")
        response2 = await client.get(f"{API}/")

        assert (
            response1.headers["x-request-id"]
            != response2.headers["x-request-id"]
        )

    @pytest.mark.asyncio
    async def test_invalid_api_version_returns_404(self, client):
        """존재하지 않는 API 버전은 404"""
        response = await client.get("/api/v99/")

        assert response.status_code == 404


class TestMatchmakingScenario:
    """온보딩 → 학습 → 추천 → 매칭 시나리오"""

    @pytest.mark.asyncio
    async def test_two_users_match(self, client, api_key_header):
        """두 사용자가 서로를 추천받고 좋아요해서 매칭"""
        headers = api_key_header

        # 1. 온보딩
        for user_id, name, signature, age in (
            ("alice", "Alice", "#3CA0B4", 29),
            ("bob", "Bob", "#40A0B0", 31),
        ):
            response = await client.post(
                f"{API}/profiles",
                json={
                    "user_id": user_id,
                    "display_name": name,
                    "signature": signature,
                    "factual": {
                        "age": age,
                        "interests": ["Hiking", "Coffee"],
                        "relationship_goal": "long-term",
                    },
                    "preferences": {
                        "desired_age_range": {"min": 25, "max": 35},
                        "relationship_goal": ["long-term"],
                    },
                },
                headers=headers,
            )
            assert response.status_code == 201

        # 2. 선호 학습
        question = await client.get(
            f"{API}/learning/alice/next-question", headers=headers
        )
        attribute = question.json()["data"]["attribute"]
        learned = await client.post(
            f"{API}/learning/alice/signals",
            json={
                "candidate_id": "bob",
                "attribute": attribute,
                "reaction": "positive",
            },
            headers=headers,
        )
        assert learned.status_code == 201

        # 3. 호환도
        score = await client.get(
            f"{API}/compatibility/alice/bob", headers=headers
        )
        assert score.json()["data"]["total_score"] >= 0.8

        # 4. 서로 추천받기
        alice_card = await client.post(
            f"{API}/recommendations/alice/dequeue", headers=headers
        )
        bob_card = await client.post(
            f"{API}/recommendations/bob/dequeue", headers=headers
        )
        assert alice_card.json()["data"]["recommendation"]["name"] == "Bob"
        assert bob_card.json()["data"]["recommendation"]["name"] == "Alice"

        # 5. 좋아요 → 매칭
        pending = await client.post(
            f"{API}/recommendations/alice/like/bob", headers=headers
        )
        matched = await client.post(
            f"{API}/recommendations/bob/like/alice", headers=headers
        )
        assert pending.json()["data"]["is_pending"] is True
        assert matched.json()["data"]["is_match"] is True

        # 6. 두 사람 모두 매칭 목록에서 확인
        for user_id, other in (("alice", "bob"), ("bob", "alice")):
            matches = await client.get(
                f"{API}/recommendations/{user_id}/matches", headers=headers
            )
            assert matches.json()["data"] == [
                {
                    "candidate_id": other,
                    "liked_at": matches.json()["data"][0]["liked_at"],
                    "changed_mind": False,
                    "is_mutual": True,
                }
            ]

    @pytest.mark.asyncio
    async def test_queue_exhaustion_and_reset(self, client, api_key_header):
        """모든 후보를 본 뒤 초기화하면 다시 추천"""
        headers = api_key_header
        for user_id in ("seeker", "c1", "c2"):
            await client.post(
                f"{API}/profiles",
                json={"user_id": user_id, "signature": "#808080"},
                headers=headers,
            )

        seen = []
        for _ in range(3):
            response = await client.post(
                f"{API}/recommendations/seeker/dequeue", headers=headers
            )
            recommendation = response.json()["data"]["recommendation"]
            if recommendation:
                seen.append(recommendation["candidate_id"])

        await client.delete(f"{API}/recommendations/seeker/queue", headers=headers)
        again = await client.post(
            f"{API}/recommendations/seeker/dequeue", headers=headers
        )

        assert sorted(seen) == ["c1", "c2"]
        assert again.json()["data"]["recommendation"]["candidate_id"] in seen
