"""Prompt templates and response cleaning."""

from __future__ import annotations

from psqlm.schema.types import Schema

SYSTEM_PROMPT_TEMPLATE = """You are a PostgreSQL expert assistant. Your job is to convert natural language questions into SQL queries.

Given the database schema below, generate a PostgreSQL query that answers the user's question.

IMPORTANT:
- Return ONLY the SQL query, nothing else
- Do not include explanations, markdown formatting, or code blocks
- The query should be ready to execute directly
- Use proper PostgreSQL syntax

Database Schema:
{schema}
"""

FIX_PROMPT_TEMPLATE = (
    "The query failed with this error:\n{error}\n\n"
    "Please fix the SQL query. Return ONLY the corrected SQL, nothing else."
)

_OPENING_FENCES = ("```sql", "```")
_CLOSING_FENCE = "```"


def build_system_prompt(schema: Schema) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(schema=schema.to_prompt_string())


def build_fix_prompt(error: str) -> str:
    return FIX_PROMPT_TEMPLATE.format(error=error)


def clean_sql(text: str) -> str:
    """Strip surrounding code fences and whitespace from a model reply.

    Repeats until nothing changes, so cleaning is idempotent.
    """
    previous = None
    while text != previous:
        previous = text
        text = text.strip()
        for fence in _OPENING_FENCES:
            if text.startswith(fence):
                text = text[len(fence) :]
                break
        if text.endswith(_CLOSING_FENCE):
            text = text[: -len(_CLOSING_FENCE)]
        text = text.strip()
    return text
