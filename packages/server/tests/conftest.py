from __future__ import annotations

import pytest

from codelens_core.errors import GenerationError
from codelens_core.providers.base import BaseGenerator
from codelens_server.service import ReviewService
from codelens_store.sqlite import SQLiteStore

REVIEW_TEXT = """## Code Overview
Adds two numbers.

## Quality Score (1-10): 6

## Suggested Improvements
Use an arrow function and consistent spacing.

### Optimized Code
```javascript
const add = (a, b) => a + b;
```
"""


class FakeGenerator(BaseGenerator):
    """Records prompts and returns a canned reply or raises a canned error."""

    MODEL = "fake"

    def __init__(self, reply: str = REVIEW_TEXT, error: Exception | None = None):
        super().__init__()
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    def _call_api(self, system_prompt: str, user_prompt: str) -> str:
        self.prompts.append(user_prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def failing_generator():
    return FakeGenerator(error=GenerationError("upstream returned 503", status=503))


@pytest.fixture
def store(tmp_path):
    s = SQLiteStore(db_path=str(tmp_path / "reviews.db"))
    yield s
    s.close()


@pytest.fixture
def service(generator, store):
    return ReviewService(generator=generator, store=store)
