"""
Quota-gated generation flows.

This is the collaborator between the UI-facing API and the generation
backend. It consults the usage counters before calling the backend, and
hands only final results to the store:

- story scenario (streamed) -> story history, story usage
- caption for a scenario (streamed, consumed internally) -> caption, scenario deleted
- chat message -> chat history, chat usage
- image generation / editing -> image history, image usage
"""
import logging
from typing import AsyncIterator

from itembot.core.activity import log_activity
from itembot.core.db import Store
from itembot.core.usage import UsageKind, has_remaining_quota, increment_usage
from itembot.models import Caption, ChatMessage
from itembot.repositories import content, history, users
from .ai_base import GenerationBackend, GenerationError, ImagePayload

logger = logging.getLogger("uvicorn.error")


class QuotaExceededError(GenerationError):
    """The user reached today's limit for this kind of request."""


def _story_prompt(about: str, idea: str) -> str:
    return f"""Write an Instagram story scenario for a user with the profile below.
User profile: {about}
User's raw idea: {idea}

The scenario should be a sequence of consecutive stories; for each story explain exactly what the user should do.
Make it creative and engaging with clean formatting. Use relevant emojis in each step and wrap important words in <b> tags. Do not use # or *."""


def _caption_prompt(about: str, scenario: str) -> str:
    return f"""Write a professional Instagram caption for the video scenario below. The caption is for a user with the following profile, so match its tone and content to them:
<b>User profile:</b>
{about}

<b>Scenario:</b>
{scenario}

<b>Caption instructions:</b>
- The first line must be short and spark curiosity.
- End with a few relevant, popular hashtags.
- Match the tone to the scenario and the user.
- Use fitting emojis and wrap keywords in <b>.
- Leave one blank line between paragraphs and two before the hashtags.
- Output only the caption, ready to copy, without extra words like "---"."""


def _chat_instruction(about: str) -> str:
    return f"""You are "Item", a dedicated AI assistant developed by the Item team.
About the user you are talking to: {about}
Be warm, human and occasionally playful.
Base your answers on the latest Instagram growth methods and motivate the user to create more content.
Use emojis where they help, wrap key words in <b> and </b>, and do not use markdown characters like # or *."""


class GenerationService:
    """
    Generation flows bound to one store and one backend.

    Args:
        store: Store handle results are persisted to
        backend: Generation backend (e.g. `gemini_service`)
    """

    def __init__(self, store: Store, backend: GenerationBackend):
        self.store = store
        self.backend = backend

    def _about(self, user_id: int) -> str:
        user = users.get_user_by_id(self.store, user_id)
        if user is None:
            raise LookupError(f"Unknown user: {user_id}")
        return user.about_info or ""

    def _require_quota(self, user_id: int, kind: UsageKind) -> None:
        # Usage is only counted once a result has been persisted, so requests
        # that overlap in time can all pass this check (e.g. two story streams
        # started together both count). Same last-write-wins policy as the store.
        if not has_remaining_quota(self.store, user_id, kind):
            raise QuotaExceededError(f"Daily {kind} limit reached. Please try again tomorrow.")

    def stream_story_scenario(self, user_id: int, idea: str) -> AsyncIterator[str]:
        """
        Start a streamed story scenario.

        The quota check runs immediately (so callers can reject before
        streaming starts). The returned iterator yields fragments; only when
        it is exhausted is the full story saved and usage counted. An
        abandoned or failed stream persists nothing.

        Raises:
            LookupError: Unknown user
            QuotaExceededError: Story limit reached
        """
        about = self._about(user_id)
        self._require_quota(user_id, "story")
        return self._story_chunks(user_id, _story_prompt(about, idea))

    async def _story_chunks(self, user_id: int, prompt: str) -> AsyncIterator[str]:
        parts = []
        async for chunk in self.backend.stream_text(prompt):
            parts.append(chunk)
            yield chunk
        story = "".join(parts)
        history.save_story_history(self.store, user_id, story)
        increment_usage(self.store, user_id, "story")

    async def generate_caption_for_scenario(self, user_id: int, scenario_id: int) -> Caption | None:
        """
        Turn a recorded scenario into a caption and consume the scenario.

        The scenario is deleted even when generation fails, so it is marked
        done either way; the error is then re-raised.

        Returns:
            The new caption, or None if the scenario does not belong to the user
        """
        scenario = content.get_scenario_by_id(self.store, scenario_id)
        if scenario is None or scenario.user_id != user_id:
            return None
        about = self._about(user_id)

        try:
            parts = []
            async for chunk in self.backend.stream_text(_caption_prompt(about, scenario.content)):
                parts.append(chunk)
        except GenerationError:
            logger.exception("[generation] Caption generation failed for scenario %s", scenario_id)
            content.delete_scenario(self.store, scenario_id)
            raise

        caption = content.add_caption(
            self.store,
            user_id,
            f"Caption for scenario #{scenario.scenario_number}",
            "".join(parts),
            scenario.content,
        )
        content.delete_scenario(self.store, scenario_id)
        log_activity(self.store, user_id, f"Approved scenario #{scenario.scenario_number}.")
        return caption

    async def send_chat_message(self, user_id: int, message: str) -> str:
        """Send one chat message; the exchange is appended to the chat history."""
        about = self._about(user_id)
        self._require_quota(user_id, "chat")
        prior = history.get_chat_history(self.store, user_id)
        reply = await self.backend.chat(prior, message, system_instruction=_chat_instruction(about))
        history.save_chat_history(
            self.store,
            user_id,
            [*prior, ChatMessage(role="user", text=message), ChatMessage(role="model", text=reply)],
        )
        increment_usage(self.store, user_id, "chat")
        return reply

    async def generate_image(self, user_id: int, prompt: str) -> ImagePayload:
        self._about(user_id)
        self._require_quota(user_id, "image")
        image = await self.backend.generate_image(prompt)
        history.save_image_history(self.store, user_id, image.data_url)
        increment_usage(self.store, user_id, "image")
        return image

    async def edit_image(self, user_id: int, prompt: str, source: ImagePayload) -> ImagePayload:
        self._about(user_id)
        self._require_quota(user_id, "image")
        image = await self.backend.edit_image(prompt, source)
        history.save_image_history(self.store, user_id, image.data_url)
        increment_usage(self.store, user_id, "image")
        return image
