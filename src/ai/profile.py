"""Server-side generation of the onboarding positioning profile."""

import logging
from typing import Any, Dict, Optional

from src.ai.gateway import AIGateway
from src.ai.stream import accumulate
from src.core.exceptions import AIGenerationError
from src.models import GenerationType, OnboardingProfile
from src.repositories.profiles import ProfileRepository

logger = logging.getLogger(__name__)


def profile_context(onboarding: OnboardingProfile) -> Dict[str, Any]:
    """Onboarding answers under the context keys the profile prompt reads."""
    return {
        "name": onboarding.name,
        "area": onboarding.area,
        "niche": onboarding.niche,
        "experienceLevel": onboarding.experience,
        "idealClient": onboarding.ideal_client,
        "portfolioObjective": onboarding.objective,
    }


class ProfileGenerator:
    """Writes the AI bio once and caches it on the profile."""

    def __init__(self, gateway: Optional[AIGateway] = None):
        self.gateway = gateway or AIGateway()

    async def generate(self, profiles: ProfileRepository, force: bool = False) -> str:
        """
        Return the cached bio, generating and saving it first if needed.

        Raises:
            AIGenerationError: Upstream failure or empty answer
            BackendError: The bio could not be saved
        """
        profile = await profiles.ensure_loaded()
        cached = profile.onboarding.generated_profile
        if cached and not force:
            return cached

        stream = await self.gateway.open(
            GenerationType.PROFILE.value,
            profile_context(profile.onboarding)
        )
        try:
            text = (await accumulate(stream.chunks())).strip()
        finally:
            await stream.aclose()

        if not text:
            raise AIGenerationError()

        await profiles.save_generated_profile(text)
        logger.info(f"Generated profile for {profiles.user_id}")
        return text
