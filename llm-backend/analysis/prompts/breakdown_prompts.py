"""
Breakdown Prompt Templates

The structured prompt sent with every problem. It pins the model to a
single JSON object so the normalizer can validate it field by field.
"""

from analysis.prompts.templates import PromptTemplate


BREAKDOWN_PROMPT = PromptTemplate(
    """You are a friendly data-structures-and-algorithms mentor. A student has pasted
the problem below. Break it down so they can solve it themselves, revealing help gradually.

## Problem
{problem}

## Output
Respond with exactly one JSON object and nothing else. Use this shape:

{{
  "problemBreakdown": "Restate the problem in plain words: inputs, outputs, constraints.",
  "pattern": "The main technique, e.g. Hash Map, Two Pointers, Sliding Window.",
  "difficulty": "Easy | Medium | Hard",
  "hints": [
    "Hint 1: a nudge toward the naive idea.",
    "Hint 2: what to optimize and which data structure helps.",
    "Hint 3: the key insight, without code."
  ],
  "solutions": {{
    "bruteForce": {solution_shape},
    "better": {solution_shape},
    "optimal": {solution_shape}
  }}
}}

## Rules
- Exactly {hint_count} hints, ordered from gentlest to most revealing.
- difficulty must be one of Easy, Medium or Hard.
- Every field is a string; code is a complete {language} solution.
- complexityAnalysis.graph explains in one or two sentences how cost grows with input size.
""",
    name="breakdown_prompt",
    defaults={
        "hint_count": 3,
        "language": "Java",
        "solution_shape": (
            '{"title": "...", "approach": "...", "intuition": "...", '
            '"complexityAnalysis": {"time": "O(...)", "space": "O(...)", "graph": "..."}, '
            '"code": "..."}'
        ),
    },
)


def build_breakdown_prompt(problem: str, **overrides) -> str:
    """Render the breakdown prompt for `problem` (stripped)."""
    return BREAKDOWN_PROMPT.render(problem=problem.strip(), **overrides)
