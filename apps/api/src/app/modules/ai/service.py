"""
AI Service Layer

Generates intervention recommendations and follow-up guidance.

The DeepSeek API is used when a key is available. Otherwise, or when the call
fails, canned guidance is returned with a disclaimer suffix that says why.
Generated text is sanitized before it reaches the database. Urgent concerns
always get the urgent case block appended, whatever the text source.
"""

import logging
import re

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.admin import repository as admin_repository
from app.modules.ai import prompts
from app.modules.ai.client import AIProviderError, DeepSeekClient, resolve_api_credentials
from app.modules.ai.schemas import (
    FollowUpRequest,
    FollowUpResult,
    InterventionDraft,
    RecommendationRequest,
    RecommendationResult,
    RecommendationSource,
)

logger = logging.getLogger(__name__)

# Control characters other than \t, \n and \r, plus the Unicode replacement character
_UNSAFE_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f\ufffd]")

STRUCTURED_PLAN_TITLE = "Structured Support Plan"
STRUCTURED_PLAN_STEPS = ["Review recommendations", "Implement strategies", "Monitor progress"]
STRUCTURED_PLAN_TIMELINE = "2-6 weeks"


def sanitize_for_database(text: str | None) -> str:
    """Strip characters the database rejects or that render as garbage."""
    if not text:
        return ""
    return _UNSAFE_CHARS.sub("", text).strip()


def _with_urgent_block(text: str, severity_level: str) -> str:
    if severity_level == "urgent":
        return text + prompts.URGENT_CASE_BLOCK
    return text


def _mock_result(req: RecommendationRequest, disclaimer_suffix: str) -> RecommendationResult:
    recommendations = sanitize_for_database(prompts.mock_recommendations(req))
    return RecommendationResult(
        recommendations=_with_urgent_block(recommendations, req.severity_level),
        disclaimer=prompts.DISCLAIMER + disclaimer_suffix,
        source=RecommendationSource.MOCK,
    )


async def generate_recommendations(
    db: AsyncSession | None,
    req: RecommendationRequest,
) -> RecommendationResult:
    """
    Generate recommendations for a concern.

    Never raises for provider problems: the result falls back to canned text.
    """
    credentials = await resolve_api_credentials(db)
    if credentials is None:
        logger.info("No AI API key configured, returning mock recommendations")
        return _mock_result(req, prompts.DISCLAIMER_NO_API_KEY)

    client = DeepSeekClient(api_key=credentials.api_key)
    system_prompt = prompts.recommendation_system_prompt(req.language)
    user_prompt = prompts.build_recommendation_prompt(req)

    try:
        content = await client.complete(system_prompt, user_prompt)
    except AIProviderError as e:
        if e.is_auth_error:
            logger.error("DeepSeek authentication failed, returning mock recommendations")
            return _mock_result(req, prompts.DISCLAIMER_AUTH_FAILED)
        logger.error(f"DeepSeek call failed, returning mock recommendations: {e.message}")
        return _mock_result(req, prompts.DISCLAIMER_UNAVAILABLE)

    if credentials.key_id and db is not None:
        await admin_repository.record_api_key_usage(db, credentials.key_id)

    recommendations = sanitize_for_database(content) or prompts.EMPTY_RECOMMENDATIONS
    logger.info(f"Generated {req.task_type} recommendations ({len(recommendations)} chars)")

    return RecommendationResult(
        recommendations=_with_urgent_block(recommendations, req.severity_level),
        disclaimer=prompts.DISCLAIMER,
        source=RecommendationSource.AI,
    )


async def follow_up_assistance(
    db: AsyncSession | None,
    req: FollowUpRequest,
) -> FollowUpResult:
    """Answer a follow-up question about earlier recommendations."""
    credentials = await resolve_api_credentials(db)
    if credentials is None:
        logger.info("No AI API key configured, returning mock follow-up assistance")
        return FollowUpResult(assistance=prompts.mock_follow_up(req), source=RecommendationSource.MOCK)

    chinese = prompts.is_chinese_request(req.question) or (req.language or "").lower() == "chinese"
    client = DeepSeekClient(api_key=credentials.api_key)

    try:
        content = await client.complete(
            prompts.follow_up_system_prompt(chinese),
            prompts.build_follow_up_prompt(req, chinese),
        )
    except AIProviderError as e:
        logger.error(f"DeepSeek follow-up call failed, returning mock assistance: {e.message}")
        return FollowUpResult(assistance=prompts.mock_follow_up(req), source=RecommendationSource.MOCK)

    if credentials.key_id and db is not None:
        await admin_repository.record_api_key_usage(db, credentials.key_id)

    return FollowUpResult(
        assistance=sanitize_for_database(content) or prompts.EMPTY_FOLLOW_UP,
        source=RecommendationSource.AI,
    )


def build_interventions(result: RecommendationResult) -> list[InterventionDraft]:
    """Package generated recommendations as storable interventions."""
    return [
        InterventionDraft(
            title=STRUCTURED_PLAN_TITLE,
            description=result.recommendations,
            steps=list(STRUCTURED_PLAN_STEPS),
            timeline=STRUCTURED_PLAN_TIMELINE,
        )
    ]
