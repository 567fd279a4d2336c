"""
Answer synthesis for parsed questions.

Each intent narrows the asking user's messages down with keyword filters and
then pulls a structured fragment (a date phrase, a number, a few names) out of
the free text. When the fragment can't be found the answer quotes the source
message instead of failing.
"""

import logging
import re
from typing import Iterable, List, Optional, Sequence

from aurora_qa.core.cache import filter_by_user_name
from aurora_qa.schemas import MessageItem
from aurora_qa.services.question_parser import (
    ParsedQuestion,
    QuestionIntent,
    WhenTrip,
    HowMany,
    WhatFavorite,
    WhatPrefer,
)

logger = logging.getLogger(__name__)


GUIDANCE_MESSAGE = (
    "I'm not sure how to answer that question. Please try rephrasing it, such as: "
    "'When is [Name] planning their trip to [Location]?' or "
    "'How many [things] does [Name] have?'"
)

TRAVEL_KEYWORDS = ("trip", "travel", "visit", "fly", "book")
PREFERENCE_KEYWORDS = ("favorite", "prefer", "love", "like")
PREFER_KEYWORDS = ("prefer", "preference")

TEMPORAL_PATTERN = re.compile(
    r"\b(this|next|on)\s+"
    r"(monday|tuesday|wednesday|thursday|friday|saturday|sunday|weekend|week|month|[\w\s]+day)\b",
    re.IGNORECASE,
)

NUMBER_WORDS = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
}
NUMBER_PATTERN = re.compile(r"\b(one|two|three|four|five|six|seven|eight|nine|ten|\d+)\b", re.IGNORECASE)

PROPER_NOUN_PATTERN = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b")

# Capitalized function words that open sentences but never name a thing
NON_NAME_WORDS = frozenset({
    "A", "An", "The", "My", "Our", "Your", "His", "Her", "Their", "Its",
    "We", "You", "He", "She", "They", "It", "Me", "Us",
    "This", "That", "These", "Those", "And", "But", "Or", "So",
    "Please", "Thanks", "Thank", "Also", "Hi", "Hello",
})

MAX_LISTED = 3


def _contains(text: str, term: str) -> bool:
    return term.lower() in text.lower()


def _contains_any(text: str, terms: Iterable[str]) -> bool:
    lowered = text.lower()
    return any(term in lowered for term in terms)


def extract_numbers(text: str) -> List[int]:
    """Digit and English word numerals (one to ten) in order of appearance."""
    numbers = []
    for token in NUMBER_PATTERN.findall(text):
        if token.isdigit():
            numbers.append(int(token))
        else:
            numbers.append(NUMBER_WORDS[token.lower()])
    return numbers


def extract_proper_nouns(text: str, exclude: Iterable[str] = ()) -> List[str]:
    """
    Best-effort proper-noun extraction by capitalization.

    Any run of Capitalized words counts, so sentence-initial words and other
    capitalized common words are false positives; only the short
    NON_NAME_WORDS list and the ``exclude`` tokens are filtered. Runs are
    de-duplicated keeping first-seen order.
    """
    excluded = {token.lower() for token in exclude if token}
    seen = set()
    names = []
    for span in PROPER_NOUN_PATTERN.findall(text):
        # Drop leading function words, e.g. "My Nobu" -> "Nobu"
        words = span.split()
        while words and words[0] in NON_NAME_WORDS:
            words.pop(0)
        if not words:
            continue
        name = " ".join(words)
        if name.lower() in excluded or name in seen:
            continue
        seen.add(name)
        names.append(name)
    return names


class AnswerSynthesizer:
    """Turns a parsed question plus the message set into an answer string."""

    def answer(self, parsed: ParsedQuestion, messages: Sequence[MessageItem]) -> str:
        user = parsed.user_name
        user_messages: List[MessageItem] = []

        if user:
            user_messages = filter_by_user_name(messages, user)
            if not user_messages:
                logger.info(f"[Answer] No messages for user '{user}'")
                return f"I couldn't find any information about {user}."

        handler = {
            QuestionIntent.WHEN_TRIP: self._when_trip,
            QuestionIntent.HOW_MANY: self._how_many,
            QuestionIntent.WHAT_FAVORITE: self._what_favorite,
            QuestionIntent.WHAT_PREFER: self._what_prefer,
        }.get(parsed.intent)

        if handler is None:
            return GUIDANCE_MESSAGE
        return handler(parsed, user_messages)

    def _when_trip(self, parsed: WhenTrip, user_messages: List[MessageItem]) -> str:
        trips = [
            m for m in user_messages
            if _contains(m.message, parsed.location) and _contains_any(m.message, TRAVEL_KEYWORDS)
        ]
        if not trips:
            return f"I couldn't find any trip plans to {parsed.location} for {parsed.user}."

        text = trips[0].message
        when = TEMPORAL_PATTERN.search(text)
        if when:
            return f"{parsed.user} is planning a trip to {parsed.location} {when.group(0)}."

        return f'{parsed.user} has mentioned plans to visit {parsed.location}. Details: "{text}"'

    def _how_many(self, parsed: HowMany, user_messages: List[MessageItem]) -> str:
        relevant = [m for m in user_messages if _contains(m.message, parsed.subject)]
        if not relevant:
            return f"I couldn't find any information about {parsed.subject} for {parsed.user}."

        numbers = []
        for m in relevant:
            numbers.extend(extract_numbers(m.message))

        if numbers:
            # Largest stated quantity, not a count of mentions
            return f"{parsed.user} has {max(numbers)} {parsed.subject}."

        return (
            f"I found mentions of {parsed.subject} for {parsed.user}, but couldn't determine "
            f"an exact count. Here's what I found: \"{relevant[0].message}\""
        )

    def _what_favorite(self, parsed: WhatFavorite, user_messages: List[MessageItem]) -> str:
        favorites = [
            m for m in user_messages
            if _contains(m.message, parsed.category) and _contains_any(m.message, PREFERENCE_KEYWORDS)
        ]
        if not favorites:
            return f"I couldn't find any information about {parsed.user}'s favorite {parsed.category}."

        details = " ".join(m.message for m in favorites)
        names = extract_proper_nouns(details, exclude=self._name_tokens(parsed.user))
        if names:
            listed = ", ".join(names[:MAX_LISTED])
            return f"{parsed.user}'s favorite {parsed.category} include: {listed}."

        return (
            f"{parsed.user} has mentioned preferences for {parsed.category}. "
            f"Here's what I found: \"{favorites[0].message}\""
        )

    def _what_prefer(self, parsed: WhatPrefer, user_messages: List[MessageItem]) -> str:
        preferences = [m.message for m in user_messages if _contains_any(m.message, PREFER_KEYWORDS)]
        if not preferences:
            return f"I couldn't find any preference information for {parsed.user}."

        return f"{parsed.user}'s preferences include: {'; '.join(preferences[:MAX_LISTED])}"

    @staticmethod
    def _name_tokens(user: Optional[str]) -> List[str]:
        if not user:
            return []
        return [user] + user.split()
