"""
Text-generation collaborator - Azure OpenAI chat completions
"""
import asyncio
import json
import logging
from typing import List, Dict, Any, Optional

import aiohttp
import json_repair

from ..core.llm_config import LLMConfig, LLMManager

logger = logging.getLogger(__name__)

ARTICLE_SYSTEM_PROMPT = (
    "You are a professional news editor that specializes in creating high-quality news articles based on "
    "multiple sources.\n"
    "Create a concise, well-structured news article that combines information from the provided sources.\n"
    "Follow this structure:\n"
    "1. Create a compelling headline (first line of the response)\n"
    "2. Write a strong introduction summarizing the key points\n"
    "3. Include 3-4 detailed body paragraphs with relevant facts\n"
    "4. Add a brief conclusion\n"
    "5. Mention the original sources where appropriate\n"
    "Use a formal journalistic tone and ensure factual accuracy. If sources contradict each other, note this "
    "in your article."
)

IMAGE_PROMPT_SYSTEM_PROMPT = (
    "You are an expert at creating image prompts. Create a detailed, descriptive prompt that would generate a "
    "relevant image for the given content. Focus on visual elements, style, and mood."
)


class LLMServiceError(Exception):
    """The collaborator is unavailable or returned an unusable response."""


class LLMService:
    def __init__(self, config: Optional[LLMConfig] = None):
        if config is None:
            try:
                config = LLMManager.get_config_from_env()
            except ValueError as e:
                logger.info(f"LLM config not loaded: {e}; running in disabled mode.")
                config = None
        self.config = config
        self.session: Optional[aiohttp.ClientSession] = None

        if self.config:
            logger.info(f"LLM initialized with deployment {self.config.deployment} ({self.config.api_version})")
        else:
            logger.info("LLM initialized in disabled mode.")

    @property
    def available(self) -> bool:
        return bool(self.config and self.config.api_key)

    async def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession()
        return self.session

    async def close(self):
        if self.session and not self.session.closed:
            await self.session.close()

    @staticmethod
    def parse_completion(body: str) -> str:
        """Extract the message text from a chat-completions response body."""
        try:
            data = json_repair.loads(body)
        except Exception as e:
            raise LLMServiceError(f"Malformed LLM response: {e}") from e
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise LLMServiceError("LLM response has no completion content") from e
        if not isinstance(content, str) or not content.strip():
            raise LLMServiceError("LLM returned an empty completion")
        return content.strip()

    async def _make_request(self, messages: List[Dict[str, str]], **kwargs) -> str:
        if not self.available:
            raise LLMServiceError("LLM is not configured.")

        session = await self._get_session()
        headers = {
            "api-key": self.config.api_key,
            "Content-Type": "application/json",
        }
        payload = {
            "messages": messages,
            "temperature": kwargs.get("temperature", self.config.temperature),
            "top_p": kwargs.get("top_p", self.config.top_p),
            "max_tokens": kwargs.get("max_tokens", self.config.max_tokens),
        }
        url = self.config.chat_completions_url
        timeout = aiohttp.ClientTimeout(total=kwargs.get("timeout", self.config.timeout_seconds))

        logger.info(f"Sending request to Azure OpenAI deployment {self.config.deployment}")
        try:
            async with session.post(url, headers=headers, json=payload, timeout=timeout) as response:
                body = await response.text(errors="replace")
                if response.status != 200:
                    logger.warning(f"Azure OpenAI failed [{response.status}]: {body[:500]}")
                    raise LLMServiceError(f"LLM error {response.status}: {body[:200]}")
        except asyncio.TimeoutError as e:
            raise LLMServiceError(f"LLM request timed out after {timeout.total}s") from e
        except aiohttp.ClientError as e:
            raise LLMServiceError(f"LLM request failed: {e}") from e

        return self.parse_completion(body)

    # ------------------------------------------------------------

    async def generate_article(self, sources: List[Dict[str, Any]]) -> str:
        """Ask the collaborator for one article combining ``sources``."""
        messages = [
            {"role": "system", "content": ARTICLE_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": f"Please create a comprehensive news article based on these sources: {json.dumps(sources)}",
            },
        ]
        content = await self._make_request(messages)
        logger.info(f"Generated article length: {len(content)}")
        return content

    async def generate_image_prompt(self, content: str) -> str:
        if not self.available:
            return content

        messages = [
            {"role": "system", "content": IMAGE_PROMPT_SYSTEM_PROMPT},
            {"role": "user", "content": f"Create an image prompt for this content: {content}"},
        ]
        try:
            return await self._make_request(messages, max_tokens=150)
        except LLMServiceError as e:
            logger.warning(f"Image prompt generation failed: {e}")
            return content
