import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient
from columnmath.main import app

client = TestClient(app)

CARRY_PROBLEM = {"num1": 156, "num2": 278, "answer": 434, "operator": "+"}
BORROW_PROBLEM = {"num1": 423, "num2": 187, "answer": 236, "operator": "−"}


def test_root():
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["health"] == "/health"


def test_health_lists_lessons():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["lessons"] == ["borrowing", "carry_over"]


# ── lessons ───────────────────────────────────────────────────────────────────

def test_steps():
    response = client.get("/api/lessons/borrowing/steps")
    assert response.status_code == 200
    labels = [s["label"] for s in response.json()["steps"]]
    assert labels == ["Start", "Check", "Borrow", "Ones", "Tens", "Hundreds", "Done"]


def test_unknown_lesson():
    response = client.get("/api/lessons/long_division/steps")
    assert response.status_code == 404


@pytest.mark.parametrize("skill_tag,operator", [("carry_over", "+"), ("borrowing", "−")])
def test_seeded_problem(skill_tag, operator):
    first = client.post(f"/api/lessons/{skill_tag}/problem", params={"seed": 3})
    second = client.post(f"/api/lessons/{skill_tag}/problem", params={"seed": 3})
    assert first.status_code == 200
    assert first.json() == second.json()
    assert first.json()["operator"] == operator


def test_carry_state():
    response = client.post("/api/lessons/carry_over/state", json={"problem": CARRY_PROBLEM, "step": 3})
    assert response.status_code == 200
    body = response.json()
    assert body["answer_digits"] == ["", "3", "4"]
    assert body["carries"] == [False, True, False]
    assert body["sum_visualization"] == {"digit1": 5, "digit2": 7, "carry": 1, "show_split": True}


def test_borrow_state():
    response = client.post("/api/lessons/borrowing/state", json={"problem": BORROW_PROBLEM, "step": 3})
    assert response.status_code == 200
    assert response.json()["borrow_state"]["display_digits"] == [3, 11, 13]


def test_state_scrub_is_stable():
    bodies = [
        client.post("/api/lessons/carry_over/state", json={"problem": CARRY_PROBLEM, "step": s}).json()
        for s in (3, 1, 3)
    ]
    assert bodies[0] == bodies[2]


def test_step_out_of_range():
    response = client.post("/api/lessons/carry_over/state", json={"problem": CARRY_PROBLEM, "step": 7})
    assert response.status_code == 422
    response = client.post("/api/lessons/carry_over/state", json={"problem": CARRY_PROBLEM, "step": -1})
    assert response.status_code == 422


def test_wrong_operator_for_lesson():
    response = client.post("/api/lessons/borrowing/state", json={"problem": CARRY_PROBLEM, "step": 0})
    assert response.status_code == 422


def test_check_rejects_mismatched_answer():
    problem = dict(BORROW_PROBLEM, answer=999)
    response = client.post("/api/lessons/borrowing/check", json={
        "problem": problem,
        "answer": ["9", "9", "9"],
    })
    assert response.status_code == 422
    assert response.json()["detail"]["issues"] == ["answer_mismatch"]


@pytest.mark.parametrize("problem,issue", [
    ({"num1": 1423, "num2": 187, "answer": 1236, "operator": "−"}, "too_many_digits"),
    ({"num1": 100, "num2": 500, "answer": -400, "operator": "−"}, "num1_below_num2"),
])
def test_state_rejects_problems_outside_borrow_lesson(problem, issue):
    response = client.post("/api/lessons/borrowing/state", json={"problem": problem, "step": 3})
    assert response.status_code == 422
    assert issue in response.json()["detail"]["issues"]


def test_explain_rejects_wrong_sum():
    response = client.post("/api/lessons/carry_over/explain", json=dict(CARRY_PROBLEM, answer=433))
    assert response.status_code == 422


def test_explain():
    response = client.post("/api/lessons/borrowing/explain", json=BORROW_PROBLEM)
    assert response.status_code == 200
    assert response.json()["final_answer"] == "236"


def test_check_carry_attempt():
    response = client.post("/api/lessons/carry_over/check", json={
        "problem": CARRY_PROBLEM,
        "answer": ["4", "3", "4"],
        "carries": ["1", "1", ""],
    })
    assert response.status_code == 200
    result = response.json()["result"]
    assert result["is_correct"] is True
    assert result["carries_correct"] is True


def test_check_carry_attempt_missing_carries():
    response = client.post("/api/lessons/carry_over/check", json={
        "problem": CARRY_PROBLEM,
        "answer": ["4", "3", "4"],
    })
    result = response.json()["result"]
    assert result["answer_correct"] is True
    assert result["is_correct"] is False


def test_check_borrow_attempt():
    response = client.post("/api/lessons/borrowing/check", json={
        "problem": BORROW_PROBLEM,
        "answer": ["2", "3", "6"],
        "borrow_clicks": [0, 2, 2, 1],
    })
    assert response.status_code == 200
    body = response.json()
    assert body["result"]["is_correct"] is True
    assert body["accepted_borrows"] == [False, True, False, True]
    assert body["borrow_state"]["display_digits"] == [3, 11, 13]


def test_check_wrong_digit_count():
    response = client.post("/api/lessons/borrowing/check", json={
        "problem": BORROW_PROBLEM,
        "answer": ["3", "6"],
    })
    assert response.status_code == 422


# ── problems / practice ───────────────────────────────────────────────────────

def test_generate_problems_clamps_count():
    response = client.post("/api/problems/generate", json={"type": "addition", "difficulty": "medium", "count": 500})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert len(body["problems"]) == 50


def test_generate_problems_defaults_for_bad_input():
    response = client.post("/api/problems/generate", json={"type": "calculus", "difficulty": "insane", "count": "x"})
    assert response.status_code == 200
    problems = response.json()["problems"]
    assert len(problems) == 5
    for p in problems:
        # easy range for + and −; × and ÷ have their own caps
        assert p["operator"] in {"+", "−", "×", "÷"}


def test_practice_summary():
    response = client.post("/api/practice/summary", json={"correct": 17, "total": 20})
    assert response.status_code == 200
    assert response.json() == {"correct": 17, "total": 20, "score": 85, "stars": 4}


def test_practice_summary_caps_correct():
    response = client.post("/api/practice/summary", json={"correct": 9, "total": 5})
    assert response.json()["stars"] == 5
    assert response.json()["correct"] == 5
