"""Pytest configuration and shared fixtures."""
import copy
import json
import os

import httpx
import pytest

os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")

from config import reset_settings


TWO_SUM_BREAKDOWN = {
    "problemBreakdown": (
        "The problem asks you to find two numbers in an array that add up to a "
        "specific target value, and return their indices."
    ),
    "pattern": "Hash Map (or Two Pointers)",
    "difficulty": "Easy",
    "hints": [
        "Hint 1: A brute-force approach would involve nested loops. What is the time complexity of that solution?",
        "Hint 2: Can you optimize the search for the second number? Think about fast lookups.",
        "Hint 3: For each number, check whether you have already seen target - number. A hash map is perfect for this.",
    ],
    "solutions": {
        "bruteForce": {
            "title": "Brute Force Solution",
            "approach": "Check every pair with two nested loops.",
            "intuition": "The simplest way to find a pair is to try all of them.",
            "complexityAnalysis": {
                "time": "O(n^2)",
                "space": "O(1)",
                "graph": "Work grows quadratically with the array length.",
            },
            "code": "class Solution { int[] twoSum(int[] nums, int target) { return new int[]{}; } }\n",
        },
        "better": {
            "title": "Better Approach: Two-Pass Hash Map",
            "approach": "Store every number first, then look up each complement.",
            "intuition": "A hash map turns the inner search into a constant-time lookup.",
            "complexityAnalysis": {
                "time": "O(n)",
                "space": "O(n)",
                "graph": "Two linear passes; memory grows with n.",
            },
            "code": "class Solution { /* two pass */ }\n",
        },
        "optimal": {
            "title": "Optimal Solution: Single-Pass Hash Map",
            "approach": "Look up the complement before inserting the current number.",
            "intuition": "If the complement was seen earlier we already have the pair.",
            "complexityAnalysis": {
                "time": "O(n)",
                "space": "O(n)",
                "graph": "One linear pass; memory grows with n in the worst case.",
            },
            "code": "class Solution { /* one pass */ }\n",
        },
    },
}


def gemini_envelope(payload) -> dict:
    """Wrap a payload the way generateContent returns it."""
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def gemini_response(payload, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json=gemini_envelope(payload))


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Settings are cached per process; rebuild them from the env for every test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def sample_breakdown():
    """A well-formed breakdown payload (3 hints, 3 solutions). Safe to mutate."""
    return copy.deepcopy(TWO_SUM_BREAKDOWN)


@pytest.fixture
def auth_headers():
    """Bearer header for a test user."""
    from auth.middleware.auth_middleware import create_access_token

    def _make(user_id: str = "user-1") -> dict:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _make


class RecordingSleep:
    """Async stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def model_response():
    """Factory for httpx responses carrying a generateContent envelope."""
    return gemini_response


@pytest.fixture
def two_sum_response():
    return gemini_response(TWO_SUM_BREAKDOWN)
