import asyncio
import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.config.settings import Settings
from src.core.ai_service import AIService
from src.core.rate_limiter import RateLimiter
from src.core.request_executor import RequestExecutor
from src.models.evaluation import Answer
from src.models.question import Difficulty, InterviewQuestion


class ScriptedProvider:
    """Provider returning queued responses; exceptions in the queue are raised."""

    def __init__(self, *responses, default=None, delay: float = 0):
        self.model_name = "models/test-model"
        self.responses = list(responses)
        self.default = default
        self.delay = delay
        self.prompts: list[str] = []

    async def generate_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.responses:
            response = self.responses.pop(0)
        else:
            response = self.default
        if isinstance(response, BaseException):
            raise response
        if response is None:
            raise RuntimeError("no scripted response left")
        return response

    @property
    def calls(self) -> int:
        return len(self.prompts)


class RecordingSpan:
    def __init__(self, name: str, metadata: dict):
        self.name = name
        self.metadata = metadata
        self.output = None

    def end(self, output=None) -> None:
        self.output = output


class RecordingTracer:
    """Stands in for the Langfuse client; keeps spans and scores for assertions."""

    def __init__(self):
        self.spans: list[RecordingSpan] = []
        self.scores: list[dict] = []
        self.flushed = 0

    def start_span(self, name: str, metadata: dict) -> RecordingSpan:
        span = RecordingSpan(name, metadata)
        self.spans.append(span)
        return span

    def create_score(self, name: str, value: float, comment: str) -> None:
        self.scores.append({"name": name, "value": value, "comment": comment})

    def flush(self) -> None:
        self.flushed += 1


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class RecordedSleep:
    """Sleep stand-in that only records requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class ManualTask:
    def __init__(self, delay: float, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.done = False

    def cancel(self) -> None:
        if not self.done:
            self.cancelled = True


class ManualScheduler:
    """Scheduler whose tasks only run when the test says so."""

    def __init__(self):
        self.tasks: list[ManualTask] = []

    def call_later(self, delay_seconds: float, callback) -> ManualTask:
        task = ManualTask(delay_seconds, callback)
        self.tasks.append(task)
        return task

    @property
    def pending(self) -> list[ManualTask]:
        return [t for t in self.tasks if not t.cancelled and not t.done]

    async def run_pending(self) -> int:
        """Run every due task, including ones scheduled while running."""
        ran = 0
        while self.pending:
            task = self.pending[0]
            task.done = True
            await task.callback()
            ran += 1
        return ran


def question_payload(items=None) -> str:
    """Provider JSON for a valid 2/2/2 question set."""
    if items is None:
        items = [
            {"id": "q1", "question": "What is a closure?", "difficulty": "easy", "timeLimit": 20},
            {"id": "q2", "question": "What does the event loop do?", "difficulty": "easy", "timeLimit": 20},
            {"id": "q3", "question": "How do you paginate an API?", "difficulty": "medium", "timeLimit": 60},
            {"id": "q4", "question": "How does React reconcile?", "difficulty": "medium", "timeLimit": 60},
            {"id": "q5", "question": "Design a rate limiter.", "difficulty": "hard", "timeLimit": 120},
            {"id": "q6", "question": "Design a chat backend.", "difficulty": "hard", "timeLimit": 120},
        ]
    return json.dumps(items)


def evaluation_payload(score=80, feedback="Solid answer") -> str:
    return json.dumps({
        "score": score,
        "feedback": feedback,
        "strengths": ["Clear"],
        "improvements": ["More depth"],
    })


def make_answer(score: int, difficulty: Difficulty = Difficulty.EASY) -> Answer:
    return Answer(
        question_id="q1",
        question_text="What is a closure?",
        answer_text="A function with its environment",
        difficulty=difficulty,
        time_limit_seconds=difficulty.time_limit_seconds,
        time_spent_seconds=5,
        score=score,
    )


@pytest.fixture
def easy_question() -> InterviewQuestion:
    return InterviewQuestion.create(id="q1", text="What is a closure?", difficulty=Difficulty.EASY)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def recorded_sleep() -> RecordedSleep:
    return RecordedSleep()


@pytest.fixture
def make_ai_service(clock, recorded_sleep):
    """Build an AIService around a scripted provider with virtual time."""

    def _make(provider, offline=False, max_requests=60, timeout_seconds=30.0, tracer=None) -> AIService:
        limiter = RateLimiter(max_requests=max_requests, window_ms=60_000, clock=clock)
        executor = RequestExecutor(
            limiter,
            max_attempts=3,
            retry_delay_seconds=1.0,
            timeout_seconds=timeout_seconds,
            sleep=recorded_sleep,
        )
        return AIService(provider, executor, offline=offline, tracer=tracer)

    return _make


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        gemini_api_key="test-key",
        state_dir=str(tmp_path / "state"),
        ai_retry_delay_seconds=0,
        question_advance_delay_seconds=0,
    )
