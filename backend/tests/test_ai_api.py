"""AI assistant endpoints with a fake Anthropic client behind the app."""

import json


async def test_ask_records_chat_message(client, auth_headers, fake_llm):
    fake_llm.messages.replies.append(
        json.dumps({"answer": "ACE inhibitors block angiotensin II formation.", "confidence": 0.8, "relatedTopics": ["RAAS"]})
    )

    response = await client.post("/api/ai/ask", json={"question": "How do ACE inhibitors work?"}, headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["answer"] == "ACE inhibitors block angiotensin II formation."
    assert body["confidence"] == 0.8
    assert body["related_topics"] == ["RAAS"]
    assert body["sources"] == []

    history = (await client.get("/api/ai/chat-history", headers=auth_headers)).json()
    assert len(history) == 1
    assert history[0]["message"] == "How do ACE inhibitors work?"
    assert history[0]["response"] == body["answer"]


async def test_ask_requires_question(client, auth_headers, fake_llm):
    for payload in ({}, {"question": "   "}):
        response = await client.post("/api/ai/ask", json=payload, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Question is required"
    assert fake_llm.messages.calls == []


async def test_ask_failure_is_500_and_not_recorded(client, auth_headers, fake_llm):
    fake_llm.messages.replies.append(RuntimeError("upstream down"))

    response = await client.post("/api/ai/ask", json={"question": "Why?"}, headers=auth_headers)

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to process question"
    history = (await client.get("/api/ai/chat-history", headers=auth_headers)).json()
    assert history == []


async def test_ask_requires_auth(client):
    response = await client.post("/api/ai/ask", json={"question": "Why?"})
    assert response.status_code == 401


async def test_chat_history_limit(client, auth_headers, storage, user):
    for i in range(3):
        await storage.create_chat_message({"user_id": user.id, "message": f"Q{i}", "response": f"A{i}"})

    response = await client.get("/api/ai/chat-history", params={"limit": 2}, headers=auth_headers)

    assert [m["message"] for m in response.json()] == ["Q2", "Q1"]


async def test_enhance_notes(client, auth_headers, fake_llm):
    fake_llm.messages.replies.append("Clearer notes")

    response = await client.post(
        "/api/ai/enhance-notes", json={"notes": "raw", "subject": "Anatomy"}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json() == {"enhanced_notes": "Clearer notes"}


async def test_enhance_notes_failure_returns_original(client, auth_headers, fake_llm):
    fake_llm.messages.replies.append(RuntimeError("rate limited"))

    response = await client.post("/api/ai/enhance-notes", json={"notes": "raw"}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"enhanced_notes": "raw"}


async def test_enhance_notes_requires_notes(client, auth_headers):
    response = await client.post("/api/ai/enhance-notes", json={"notes": ""}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Notes content is required"


async def test_generate_mcqs(client, auth_headers, fake_llm):
    fake_llm.messages.replies.append(
        json.dumps(
            {
                "questions": [
                    {
                        "question": "First-line drug for anaphylaxis?",
                        "options": ["Epinephrine", "Diphenhydramine", "Prednisone", "Albuterol"],
                        "correctAnswer": 0,
                        "explanation": "IM epinephrine is first-line.",
                        "difficulty": "easy",
                    }
                ]
            }
        )
    )

    response = await client.post(
        "/api/ai/generate-mcqs",
        json={"subject": "Pharmacology", "topic": "Anaphylaxis", "difficulty": "easy"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    questions = response.json()["questions"]
    assert len(questions) == 1
    assert questions[0]["correct_answer"] == 0
    assert "Difficulty: easy" in fake_llm.messages.calls[0]["messages"][0]["content"]


async def test_generate_mcqs_failure_returns_empty(client, auth_headers, fake_llm):
    fake_llm.messages.replies.append("garbage")

    response = await client.post(
        "/api/ai/generate-mcqs", json={"subject": "Pharmacology", "topic": "Anaphylaxis"}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json() == {"questions": []}


async def test_generate_mcqs_requires_subject_and_topic(client, auth_headers):
    response = await client.post("/api/ai/generate-mcqs", json={"subject": "Pharmacology"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Subject and topic are required"


async def test_generate_mcqs_rejects_unknown_difficulty(client, auth_headers):
    response = await client.post(
        "/api/ai/generate-mcqs",
        json={"subject": "Pharmacology", "topic": "Anaphylaxis", "difficulty": "extreme"},
        headers=auth_headers,
    )
    assert response.status_code == 422


async def test_recommendations_use_progress_and_history(client, auth_headers, fake_llm, storage, user):
    subject = await storage.create_subject({"name": "Cardiology", "icon": "fas fa-heart", "color": "medical-blue"})
    await storage.update_user_subject_progress(
        {"user_id": user.id, "subject_id": subject.id, "progress_percentage": 15}
    )
    fake_llm.messages.replies.append(
        json.dumps(
            {
                "recommendations": [
                    {
                        "subject": "Cardiology",
                        "topic": "Valvular disease",
                        "reason": "Progress is low",
                        "priority": "high",
                        "estimatedTime": 60,
                    }
                ]
            }
        )
    )

    response = await client.get("/api/ai/recommendations", headers=auth_headers)

    assert response.status_code == 200
    items = response.json()["recommendations"]
    assert items[0]["topic"] == "Valvular disease"
    assert items[0]["estimated_time"] == 60
    prompt = fake_llm.messages.calls[0]["messages"][0]["content"]
    assert '"subject": "Cardiology"' in prompt


async def test_recommendations_failure_returns_empty(client, auth_headers, fake_llm):
    fake_llm.messages.replies.append(RuntimeError("timeout"))

    response = await client.get("/api/ai/recommendations", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"recommendations": []}
