"""
Tests for intent-specific answer synthesis.
"""

import pytest

from aurora_qa.services.answer_synthesizer import (
    GUIDANCE_MESSAGE,
    AnswerSynthesizer,
    extract_numbers,
    extract_proper_nouns,
)
from aurora_qa.services.question_parser import (
    DoesHave,
    HowMany,
    Unknown,
    WhatFavorite,
    WhatPrefer,
    WhenTrip,
    parse_question,
)


@pytest.fixture
def synthesizer():
    return AnswerSynthesizer()


@pytest.fixture
def messages(message_factory):
    return [
        message_factory(1, user_name="Layla Kawaguchi", message="Please book a trip to London next Friday."),
        message_factory(2, user_name="Layla Kawaguchi", message="I want to visit Tokyo sometime soon."),
        message_factory(3, user_name="Vikram Desai", message="I have three cars"),
        message_factory(4, user_name="Vikram Desai", message="I have 5 cars"),
        message_factory(5, user_name="Amira Khan", message="My favorite restaurants are Nobu and Zuma"),
        message_factory(6, user_name="Amira Khan", message="I prefer aisle seats"),
        message_factory(7, user_name="Amira Khan", message="Window seats are my preference on long flights"),
    ]


class TestUserResolution:
    def test_unknown_user_short_circuits(self, synthesizer, messages):
        answer = synthesizer.answer(HowMany(subject="cars", user="Nobody"), messages)

        assert answer == "I couldn't find any information about Nobody."

    def test_does_have_with_unknown_user_reports_no_information(self, synthesizer, messages):
        answer = synthesizer.answer(DoesHave(user="Nobody", subject="a dog"), messages)

        assert answer == "I couldn't find any information about Nobody."


class TestWhenTrip:
    def test_reports_temporal_phrase(self, synthesizer, messages):
        answer = synthesizer.answer(WhenTrip(user="Layla", location="London"), messages)

        assert answer == "Layla is planning a trip to London next Friday."

    def test_this_weekend(self, synthesizer, message_factory):
        msgs = [message_factory(1, user_name="Hans", message="Fly me to Paris this weekend")]

        answer = synthesizer.answer(WhenTrip(user="Hans", location="Paris"), msgs)

        assert answer == "Hans is planning a trip to Paris this weekend."

    def test_falls_back_to_quote(self, synthesizer, messages):
        answer = synthesizer.answer(WhenTrip(user="Layla", location="Tokyo"), messages)

        assert answer == 'Layla has mentioned plans to visit Tokyo. Details: "I want to visit Tokyo sometime soon."'

    def test_no_trip(self, synthesizer, messages):
        answer = synthesizer.answer(WhenTrip(user="Layla", location="Rome"), messages)

        assert answer == "I couldn't find any trip plans to Rome for Layla."


class TestHowMany:
    def test_reports_maximum_not_count_or_sum(self, synthesizer, messages):
        answer = synthesizer.answer(HowMany(subject="cars", user="Vikram Desai"), messages)

        assert answer == "Vikram Desai has 5 cars."

    def test_falls_back_to_quote(self, synthesizer, message_factory):
        msgs = [message_factory(1, message="My cars need detailing")]

        answer = synthesizer.answer(HowMany(subject="cars", user="Vikram Desai"), msgs)

        assert "couldn't determine an exact count" in answer
        assert '"My cars need detailing"' in answer

    def test_no_mentions(self, synthesizer, messages):
        answer = synthesizer.answer(HowMany(subject="boats", user="Vikram Desai"), messages)

        assert answer == "I couldn't find any information about boats for Vikram Desai."


class TestWhatFavorite:
    def test_extracts_names(self, synthesizer, messages):
        answer = synthesizer.answer(WhatFavorite(user="Amira", category="restaurants"), messages)

        assert answer == "Amira's favorite restaurants include: Nobu, Zuma."

    def test_excludes_user_name_tokens(self, synthesizer, message_factory):
        msgs = [message_factory(
            1, user_name="Amira Khan",
            message="Amira Khan here, I love the restaurants Nobu, Zuma, Nobu and Carbone and Le Bernardin",
        )]

        answer = synthesizer.answer(WhatFavorite(user="Amira Khan", category="restaurants"), msgs)

        assert answer == "Amira Khan's favorite restaurants include: Nobu, Zuma, Carbone."

    def test_falls_back_to_quote(self, synthesizer, message_factory):
        msgs = [message_factory(1, user_name="Amira", message="i love all the restaurants here")]

        answer = synthesizer.answer(WhatFavorite(user="Amira", category="restaurants"), msgs)

        assert answer == (
            "Amira has mentioned preferences for restaurants. "
            "Here's what I found: \"i love all the restaurants here\""
        )

    def test_no_favorites(self, synthesizer, messages):
        answer = synthesizer.answer(WhatFavorite(user="Amira", category="hotels"), messages)

        assert answer == "I couldn't find any information about Amira's favorite hotels."


class TestWhatPrefer:
    def test_joins_preferences(self, synthesizer, messages):
        answer = synthesizer.answer(WhatPrefer(user="Amira"), messages)

        assert answer == (
            "Amira's preferences include: I prefer aisle seats; "
            "Window seats are my preference on long flights"
        )

    def test_no_preferences(self, synthesizer, messages):
        answer = synthesizer.answer(WhatPrefer(user="Vikram"), messages)

        assert answer == "I couldn't find any preference information for Vikram."


class TestGuidance:
    @pytest.mark.parametrize("question", ["", "hello", "Who owns the most boats?", "Tell me a joke"])
    def test_unknown_returns_guidance_verbatim(self, synthesizer, messages, question):
        assert synthesizer.answer(parse_question(question), messages) == GUIDANCE_MESSAGE

    def test_does_have_is_never_resolved(self, synthesizer, messages):
        assert synthesizer.answer(DoesHave(user="Vikram", subject="cars"), messages) == GUIDANCE_MESSAGE

    def test_unknown_with_no_messages(self, synthesizer):
        assert synthesizer.answer(Unknown(), []) == GUIDANCE_MESSAGE


class TestExtractionHelpers:
    def test_extract_numbers(self):
        assert extract_numbers("Two dogs, 12 cats and ten fish") == [2, 12, 10]
        assert extract_numbers("none here") == []

    def test_extract_proper_nouns_drops_leading_function_words(self):
        assert extract_proper_nouns("The Ritz and My Nobu") == ["Ritz", "Nobu"]

    def test_extract_proper_nouns_keeps_multi_word_spans(self):
        assert extract_proper_nouns("dinner at Le Bernardin with Sam", exclude=["Sam"]) == ["Le Bernardin"]


def test_end_to_end_question(synthesizer, message_factory):
    msgs = [message_factory(1, user_name="Vikram Desai", message="Vikram Desai: I have 2 cars")]

    answer = synthesizer.answer(parse_question("How many cars does Vikram Desai have?"), msgs)

    assert answer == "Vikram Desai has 2 cars."
