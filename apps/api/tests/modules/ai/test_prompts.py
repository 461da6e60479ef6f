"""
Unit tests for AI prompt construction.
"""

from app.modules.ai import prompts


class TestLessonPlanTruncation:
    """Tests for truncate_lesson_plan."""

    def test_short_content_untouched(self):
        assert prompts.truncate_lesson_plan("short plan") == "short plan"

    def test_empty_content(self):
        assert prompts.truncate_lesson_plan(None) == ""

    def test_long_content_truncated_with_note(self):
        content = "x" * 30000
        result = prompts.truncate_lesson_plan(content)
        assert result.startswith("x" * 25000)
        assert result.endswith(
            "[Content truncated due to length - showing first 25,000 characters]"
        )
        assert len(result) == 25000 + len(prompts.LESSON_PLAN_TRUNCATION_NOTE)


class TestLanguage:
    """Tests for language handling."""

    def test_english_is_default(self):
        assert prompts.target_language(None) is None
        assert prompts.target_language("English") is None
        assert prompts.target_language(" english ") is None

    def test_other_language(self):
        assert prompts.target_language("Spanish") == "Spanish"

    def test_system_prompt_mentions_language(self):
        assert "Spanish" in prompts.recommendation_system_prompt("Spanish")
        assert "fluent" not in prompts.recommendation_system_prompt(None)

    def test_language_instruction_appended(self, recommendation_request):
        recommendation_request.language = "French"
        prompt = prompts.build_recommendation_prompt(recommendation_request)
        assert "IMPORTANT LANGUAGE REQUIREMENT" in prompt
        assert "French" in prompt

    def test_chinese_detection(self):
        assert prompts.is_chinese_request("Can you explain this in Chinese?")
        assert prompts.is_chinese_request("请用中文回答")
        assert not prompts.is_chinese_request("How often should I check in?")


class TestPromptSelection:
    """Tests for build_recommendation_prompt by task type."""

    def test_intervention_prompt_mentions_student(self, recommendation_request):
        prompt = prompts.build_recommendation_prompt(recommendation_request)
        assert "Alex" in prompt
        assert "IMPORTANT LANGUAGE REQUIREMENT" not in prompt

    def test_prompts_differ_by_task_type(self, recommendation_request):
        intervention = prompts.build_recommendation_prompt(recommendation_request)

        recommendation_request.task_type = "differentiation"
        differentiation = prompts.build_recommendation_prompt(recommendation_request)

        recommendation_request.lesson_plan_content = "Fractions lesson: equivalent fractions."
        lesson_plan = prompts.build_recommendation_prompt(recommendation_request)

        recommendation_request.task_type = "classroom_management"
        classroom = prompts.build_recommendation_prompt(recommendation_request)

        assert len({intervention, differentiation, lesson_plan, classroom}) == 4
        assert "Fractions lesson" in lesson_plan


class TestMocks:
    """Tests for canned responses."""

    def test_mock_follow_up_echoes_question(self, follow_up_request):
        assert "How often should I check in?" in prompts.mock_follow_up(follow_up_request)

    def test_mock_recommendations_by_task_type(self, recommendation_request):
        intervention = prompts.mock_recommendations(recommendation_request)
        recommendation_request.task_type = "differentiation"
        assert prompts.mock_recommendations(recommendation_request) != intervention
