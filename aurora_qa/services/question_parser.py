"""
Question Parser

Classifies a free-text question into one of a handful of intents using an
ordered list of regex templates. The first template that matches wins, so
the more specific templates sit ahead of the generic ones.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple


class QuestionIntent(str, Enum):
    """Types of question intent"""
    WHEN_TRIP = "when_trip"  # "When is Layla planning her trip to London?"
    HOW_MANY = "how_many"  # "How many cars does Vikram Desai have?"
    WHAT_FAVORITE = "what_favorite"  # "What are Amira's favorite restaurants?"
    WHAT_PREFER = "what_prefer"  # "What does Hans prefer?"
    DOES_HAVE = "does_have"  # "Does Lily have a dog?"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ParsedQuestion:
    intent = QuestionIntent.UNKNOWN

    @property
    def user_name(self) -> Optional[str]:
        return getattr(self, "user", None)


@dataclass(frozen=True)
class WhenTrip(ParsedQuestion):
    user: str
    location: str
    intent = QuestionIntent.WHEN_TRIP


@dataclass(frozen=True)
class HowMany(ParsedQuestion):
    subject: str
    user: str
    intent = QuestionIntent.HOW_MANY


@dataclass(frozen=True)
class WhatFavorite(ParsedQuestion):
    user: str
    category: str
    intent = QuestionIntent.WHAT_FAVORITE


@dataclass(frozen=True)
class WhatPrefer(ParsedQuestion):
    user: str
    intent = QuestionIntent.WHAT_PREFER


@dataclass(frozen=True)
class DoesHave(ParsedQuestion):
    user: str
    subject: str
    intent = QuestionIntent.DOES_HAVE


@dataclass(frozen=True)
class Unknown(ParsedQuestion):
    intent = QuestionIntent.UNKNOWN


_WORDS = r"([a-zA-Z\s]+?)"

# Priority order matters: possession would otherwise shadow the rest.
QUESTION_PATTERNS: List[Tuple[re.Pattern, Callable[[re.Match], ParsedQuestion]]] = [
    (
        re.compile(
            r"when\s+(?:is|does)\s+" + _WORDS +
            r"\s+(?:planning|going|traveling|travelling|visiting|flying|trip)\b.*?\b(?:to|in)\s+([a-zA-Z\s]+)",
            re.IGNORECASE,
        ),
        lambda m: WhenTrip(user=m.group(1).strip(), location=m.group(2).strip()),
    ),
    (
        re.compile(r"how\s+many\s+" + _WORDS + r"\s+(?:does|do)\s+" + _WORDS + r"\s+have\b", re.IGNORECASE),
        lambda m: HowMany(subject=m.group(1).strip(), user=m.group(2).strip()),
    ),
    (
        re.compile(
            r"what\s+(?:are|is)\s+" + _WORDS + r"(?:'s|’s|s)\s+favou?rite\s+([a-zA-Z\s]+)",
            re.IGNORECASE,
        ),
        lambda m: WhatFavorite(user=m.group(1).strip(), category=m.group(2).strip()),
    ),
    (
        re.compile(r"what\s+(?:does|do)\s+" + _WORDS + r"\s+prefer", re.IGNORECASE),
        lambda m: WhatPrefer(user=m.group(1).strip()),
    ),
    (
        re.compile(r"does\s+" + _WORDS + r"\s+have\s+([a-zA-Z\s]+)", re.IGNORECASE),
        lambda m: DoesHave(user=m.group(1).strip(), subject=m.group(2).strip()),
    ),
]


def parse_question(question: str, patterns=None) -> ParsedQuestion:
    """
    Classify a question and extract its slots.

    Args:
        question: Raw question text
        patterns: Ordered (pattern, constructor) pairs; defaults to QUESTION_PATTERNS

    Returns:
        The intent variant of the first matching template, or Unknown
    """
    for pattern, build in (patterns if patterns is not None else QUESTION_PATTERNS):
        match = pattern.search(question or "")
        if match:
            return build(match)
    return Unknown()
