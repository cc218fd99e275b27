"""JSON schemas declared to the language model for each kind of answer."""
from __future__ import annotations

from typing import Any

_STR: dict[str, Any] = {"type": "string"}
_STR_LIST: dict[str, Any] = {"type": "array", "items": _STR}

RESUME_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "contactInfo": {
            "type": "object",
            "properties": {
                "name": _STR,
                "email": _STR,
                "phone": _STR,
                "address": _STR,
                "links": _STR_LIST,
            },
        },
        "summary": _STR,
        "education": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "institution": _STR,
                    "degree": _STR,
                    "dates": _STR,
                    "description": _STR,
                },
            },
        },
        "experience": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "company": _STR,
                    "role": _STR,
                    "dates": _STR,
                    "description": _STR,
                },
            },
        },
        "skills": _STR_LIST,
        "languages": _STR_LIST,
    },
}

ANALYSIS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "matchingScore": {"type": "number", "description": "Score from 0 to 100"},
        "positivePoints": _STR_LIST,
        "negativePoints": _STR_LIST,
        "improvementSuggestions": _STR_LIST,
        "summaryFeedback": {
            "type": "string",
            "description": "One-sentence overall summary of the analysis.",
        },
    },
}

REWRITE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "markdownContent": {
            "type": "string",
            "description": "The complete résumé written in Markdown.",
        },
        "rawJson": {
            "type": "object",
            "description": "Updated structured data.",
            "properties": {
                "contactInfo": {"type": "object", "properties": {"name": _STR}},
                "summary": _STR,
            },
        },
    },
}

MATCH_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "matchingScore": {
            "type": "number",
            "description": "Match score from 0 to 100",
        },
        "matchReasons": {
            "type": "array",
            "items": _STR,
            "description": "Main reasons for the match (3-5 reasons)",
        },
    },
}
