"""Tests for the trigger-phrase element detector."""

import pytest

from ielts_feedback.elements import POSITION_WINDOW, detect_elements, locate_span
from ielts_feedback.schemas import PAIRED_ROLES, Effectiveness

from essays import make_essay, plain_short_essay


class TestPlainEssay:
    def test_nothing_found(self, plain_essay):
        elements = detect_elements(plain_essay)

        assert elements.lead.effectiveness is Effectiveness.ADEQUATE
        assert elements.position.effectiveness is Effectiveness.MISSING
        assert elements.position.text == ""
        assert elements.claims[0].effectiveness is Effectiveness.ADEQUATE
        assert elements.claims[0].text == ""
        assert elements.evidence[0].effectiveness is Effectiveness.INEFFECTIVE
        assert elements.evidence[0].text == ""
        assert elements.counterclaim.effectiveness is Effectiveness.MISSING
        assert elements.rebuttal.effectiveness is Effectiveness.MISSING
        assert elements.conclusion.effectiveness is Effectiveness.MISSING

    def test_coaching_strings_always_present(self, plain_essay):
        for _, element in detect_elements(plain_essay).located():
            assert element.feedback
            assert element.indirect_feedback
            assert element.reflection_prompt


class TestLead:
    def test_text_runs_to_first_period(self):
        essay = make_essay("Technology shapes modern classrooms.")
        lead = detect_elements(essay).lead
        assert lead.text == "Technology shapes modern classrooms."
        assert (lead.span.start, lead.span.end) == (0, len(lead.text))

    def test_effective_only_above_500_characters(self):
        short = plain_short_essay()
        assert len(short) == 500
        assert detect_elements(short).lead.effectiveness is Effectiveness.ADEQUATE
        assert detect_elements(short + " k").lead.effectiveness is Effectiveness.EFFECTIVE

    def test_never_missing(self):
        lead = detect_elements("no period anywhere in this text").lead
        assert lead.effectiveness is not Effectiveness.MISSING
        assert lead.text == "no period anywhere in this text"

    def test_span_matches_text_without_period(self):
        essay = "word " * 250
        lead = detect_elements(essay).lead
        assert essay[lead.span.start:lead.span.end] == lead.text == essay


class TestPosition:
    def test_window_from_match(self):
        essay = make_essay("Intro sentence.", "In my opinion, schools must change how they teach.")
        idx = essay.index("In my opinion")
        position = detect_elements(essay).position
        assert position.effectiveness is Effectiveness.EFFECTIVE
        assert position.text == essay[idx:idx + POSITION_WINDOW] + "..."
        assert (position.span.start, position.span.end) == (idx, idx + POSITION_WINDOW)

    def test_i_believe_also_counts(self):
        essay = make_essay("Intro sentence.", "I believe that schools must change.")
        position = detect_elements(essay).position
        assert position.effectiveness is Effectiveness.EFFECTIVE
        assert position.text.startswith("I believe")


class TestClaimsAndEvidence:
    def test_claim_effective_with_follow_up(self):
        essay = make_essay("Firstly, access improves.", "Secondly, costs fall.")
        claim = detect_elements(essay).claims[0]
        assert claim.effectiveness is Effectiveness.EFFECTIVE
        assert claim.text == "Firstly, access improves."

    def test_claim_adequate_without_follow_up(self):
        claim = detect_elements(make_essay("First, access improves.")).claims[0]
        assert claim.effectiveness is Effectiveness.ADEQUATE
        assert claim.text == "First, access improves."

    @pytest.mark.parametrize("trigger", ["For example", "For instance"])
    def test_evidence_found_is_adequate(self, trigger):
        evidence = detect_elements(make_essay(f"{trigger}, apps help.")).evidence[0]
        assert evidence.effectiveness is Effectiveness.ADEQUATE
        assert evidence.text == f"{trigger}, apps help."

    def test_evidence_is_never_effective(self, rich_essay):
        assert detect_elements(rich_essay).evidence[0].effectiveness is not Effectiveness.EFFECTIVE


class TestCounterclaimRebuttalConclusion:
    def test_counterclaim_sentence(self):
        essay = make_essay("On the other hand, screens distract.")
        counterclaim = detect_elements(essay).counterclaim
        assert counterclaim.effectiveness is Effectiveness.EFFECTIVE
        assert counterclaim.text == "On the other hand, screens distract."

    def test_rebuttal_is_adequate(self):
        rebuttal = detect_elements(make_essay("Despite this, teachers cope.")).rebuttal
        assert rebuttal.effectiveness is Effectiveness.ADEQUATE
        assert rebuttal.text == "Despite this, teachers cope."

    def test_conclusion_uses_last_occurrence(self):
        essay = make_essay("In conclusion is a phrase.") + " In conclusion, balance matters. Thanks."
        conclusion = detect_elements(essay).conclusion
        assert conclusion.text == "In conclusion, balance matters. Thanks."
        assert conclusion.effectiveness is Effectiveness.ADEQUATE

    def test_to_conclude(self):
        essay = make_essay() + " To conclude, balance matters."
        assert detect_elements(essay).conclusion.text == "To conclude, balance matters."


class TestInvariants:
    ESSAYS = [
        plain_short_essay(),
        make_essay("In my opinion this is right.", "However, not always."),
        make_essay("Nevertheless, we try.", "To conclude, yes."),
        make_essay("I believe so.", "Despite this, fine.", "In conclusion, done."),
    ]

    @pytest.mark.parametrize("essay", ESSAYS)
    def test_missing_iff_empty(self, essay):
        elements = detect_elements(essay)
        for role in PAIRED_ROLES:
            element = getattr(elements, role)
            assert (element.effectiveness is Effectiveness.MISSING) == (element.text == "")

    @pytest.mark.parametrize("essay", ESSAYS)
    def test_spans_point_at_text(self, essay):
        elements = detect_elements(essay)
        for element in [elements.counterclaim, elements.rebuttal, elements.conclusion, *elements.claims, *elements.evidence]:
            if element.span is not None:
                assert essay[element.span.start:element.span.end] == element.text

    def test_deterministic(self, rich_essay):
        assert detect_elements(rich_essay) == detect_elements(rich_essay)


class TestLocateSpan:
    def test_searches_forward_for_repeated_phrase(self):
        essay = "Cats are good. Dogs are good. Cats are good."
        first, cursor = locate_span(essay, "Cats are good.")
        second, _ = locate_span(essay, "Cats are good.", cursor)
        assert first.start == 0
        assert second.start == essay.rindex("Cats")

    def test_ignores_trailing_ellipsis(self):
        span, _ = locate_span("One. Two three four.", "Two three...")
        assert span.start == 5

    def test_unknown_text(self):
        span, cursor = locate_span("One two.", "three", 3)
        assert span is None
        assert cursor == 3
