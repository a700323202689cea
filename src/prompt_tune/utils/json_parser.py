"""Utility to pull a JSON object out of a free-text model reply."""

from __future__ import annotations

import json


def extract_json(text: str) -> dict:
    """Extract a JSON object from model text, handling ```json fences.

    Tries in order:
    1. Direct json.loads on the full text
    2. The body of a fenced code block
    3. The span from the first '{' to the last '}'

    Raises ValueError when nothing parses to an object.
    """
    text = text.strip()

    for candidate in (text, _strip_code_fences(text)):
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        try:
            data = json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            data = None
        if isinstance(data, dict):
            return data

    raise ValueError(f"Could not extract JSON object from text: {text[:200]}...")


def _strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers from text."""
    lines = text.split("\n")

    if lines and lines[0].strip().startswith("```"):
        lines = lines[1:]
    while lines and lines[-1].strip() in ("```", ""):
        lines = lines[:-1]

    return "\n".join(lines).strip()
