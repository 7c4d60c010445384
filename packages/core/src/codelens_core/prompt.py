"""Review prompt template and response parsing.

Both sides of the generator call live here so the prompt's section headings
and the parser that looks for them cannot drift apart.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from codelens_core.errors import GenerationError

SYSTEM_PROMPT = (
    "You are an advanced AI code reviewer with expertise in security, performance, and best practices."
)

OPTIMIZED_CODE_HEADING = "Optimized Code"

_REVIEW_TEMPLATE = """You are a **Senior AI Code Reviewer** with deep expertise in software engineering, \
security best practices, and performance optimization.

### Your Task
Analyze the following code snippet on these criteria:
- Code Readability & Maintainability
- Performance Optimization (Big-O Complexity)
- Security Vulnerabilities & Edge Cases
- Coding Best Practices (based on language-specific standards)
- Potential Bugs & Errors
- Alternative Approaches for Improvement

### Analysis Process
1. **Code Overview:** Briefly summarize what the code does.
2. **Quality Score (1-10):** Rate the code based on best practices.
3. **Performance Analysis:** Discuss time & space complexity if applicable.
4. **Security Risks:** Identify potential security flaws (e.g. XSS, SQL injection).
5. **Key Issues Found:** List problems in the code (inefficiencies, anti-patterns, etc.).
6. **Suggested Improvements:** Explain a better way to write the code.
7. **{heading}:** End with a heading named exactly "### {heading}" followed by a single \
fenced code block containing the full improved version of the code.

### Code to Review
```
{code}
```

Provide a detailed, structured response using markdown formatting."""

# A markdown heading (any level, optional bold/emoji decoration) naming the
# optimized code section, then the first fenced block after it.
_HEADING_RE = re.compile(
    r"^[ \t]*#{1,6}[^\n]*optimi[sz]ed[ \t]+code[^\n]*$",
    re.IGNORECASE | re.MULTILINE,
)
_FENCE_RE = re.compile(r"```[^\n]*\n(.*?)```", re.DOTALL)


@dataclass(frozen=True)
class ReviewResult:
    """What one generator call produced for a snippet."""

    review: str
    optimized_code: str = ""


def build_review_prompt(code: str) -> str:
    """Embed ``code`` verbatim in the fixed review template.

    Deterministic: the same code always yields the same prompt.
    """
    return _REVIEW_TEMPLATE.format(code=code, heading=OPTIMIZED_CODE_HEADING)


def parse_review(text) -> ReviewResult:
    """Split the generator's reply into the review and its optimized code.

    ``review`` is always the whole reply. ``optimized_code`` is the body of
    the first fenced block after an "Optimized Code" heading, or "" when the
    reply has no such section.
    """
    if not isinstance(text, str) or not text.strip():
        raise GenerationError("Review generator returned an empty response.")

    review = text.strip()
    heading = _HEADING_RE.search(review)
    if heading is None:
        return ReviewResult(review=review)

    fence = _FENCE_RE.search(review, heading.end())
    if fence is None:
        return ReviewResult(review=review)
    return ReviewResult(review=review, optimized_code=fence.group(1).strip("\n"))
