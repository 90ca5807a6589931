"""
Unit tests for compliai/prompts.py

Covers:
  - build_prompt() naming exactly the selected regulations, in order
  - The JSON response shape mandated by the system prompt
  - questionnaire_to_document()
"""

import itertools

import pytest


def _import_prompts():
    from compliai.prompts import (
        build_prompt, questionnaire_to_document, regulation_list, ANALYSIS_SYSTEM, NO_ANSWER,
    )
    return build_prompt, questionnaire_to_document, regulation_list, ANALYSIS_SYSTEM, NO_ANSWER


def _labels():
    from compliai.regulations import RegulationId
    return {r: r.label for r in RegulationId}


class TestBuildPrompt:
    def test_user_message_is_document_unmodified(self):
        build_prompt = _import_prompts()[0]
        text = "  We collect emails without consent.\n"
        assert build_prompt(text, ["gdpr"]).user == text

    def test_names_exactly_the_selection_in_order(self):
        build_prompt = _import_prompts()[0]
        from compliai.regulations import RegulationId
        labels = _labels()
        regs = list(RegulationId)
        for n in range(1, len(regs) + 1):
            for subset in itertools.permutations(regs, n):
                system = build_prompt("doc", list(subset)).system
                expected = ", ".join(labels[r] for r in subset)
                assert f"regulations: {expected}." in system
                for other in set(regs) - set(subset):
                    assert labels[other] not in system

    def test_deterministic(self):
        build_prompt = _import_prompts()[0]
        assert build_prompt("doc", ["ccpa", "gdpr"]) == build_prompt("doc", ["ccpa", "gdpr"])

    def test_system_mandates_json_shape(self):
        system = _import_prompts()[3]
        for key in ("score", "issues", "summary", "severity", "description", "recommendation"):
            assert key in system
        assert "JSON" in system

    def test_regulation_list(self):
        regulation_list = _import_prompts()[2]
        assert regulation_list(["hipaa", "iso27001"]) == "HIPAA, ISO 27001"


class TestQuestionnaireToDocument:
    def test_sections_in_wizard_order(self):
        questionnaire_to_document = _import_prompts()[1]
        from compliai.models import QuestionnaireAnswers
        doc = questionnaire_to_document(QuestionnaireAnswers(
            data_handling="Emails stored in CRM.",
            security_measures="TLS everywhere.",
            vendor_management="Annual vendor review.",
        ))
        assert doc.index("Data Handling Procedures") < doc.index("Security Measures") < doc.index("Vendor Management")
        assert "Emails stored in CRM." in doc

    def test_blank_step_marked(self):
        questionnaire_to_document, NO_ANSWER = _import_prompts()[1], _import_prompts()[4]
        from compliai.models import QuestionnaireAnswers
        doc = questionnaire_to_document(QuestionnaireAnswers(data_handling="Emails stored in CRM."))
        assert doc.count(NO_ANSWER) == 2

    @pytest.mark.parametrize("answers", [{}, {"data_handling": "   ", "vendor_management": "\n"}])
    def test_all_blank_is_empty(self, answers):
        questionnaire_to_document = _import_prompts()[1]
        from compliai.models import QuestionnaireAnswers
        assert questionnaire_to_document(QuestionnaireAnswers(**answers)) == ""
