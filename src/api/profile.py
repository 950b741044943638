"""Profile API Routes - onboarding answers and the generated bio."""

import logging

from fastapi import APIRouter, Depends

from src.ai.profile import ProfileGenerator
from src.api.deps import get_profile_generator, get_session
from src.models import GeneratedText, OnboardingUpdate, Profile
from src.repositories.session import AccountSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=Profile, summary="Get profile")
async def get_profile(session: AccountSession = Depends(get_session)):
    return await session.profiles.ensure_loaded()


@router.patch("", response_model=Profile, summary="Update onboarding answers")
async def update_profile(
    patch: OnboardingUpdate,
    session: AccountSession = Depends(get_session)
):
    return await session.profiles.update_onboarding(patch)


@router.post("/generate", response_model=GeneratedText, summary="Generate positioning profile")
async def generate_profile(
    force: bool = False,
    session: AccountSession = Depends(get_session),
    generator: ProfileGenerator = Depends(get_profile_generator)
):
    """Returns the cached bio unless ``force`` is set."""
    text = await generator.generate(session.profiles, force=force)
    return GeneratedText(text=text)


@router.post("/complete", response_model=Profile, summary="Finish onboarding")
async def complete_onboarding(session: AccountSession = Depends(get_session)):
    return await session.profiles.complete_onboarding()
