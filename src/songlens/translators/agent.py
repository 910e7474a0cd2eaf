"""Lyrics Pipeline Agent - segmentation + per-section translation

Builds the LangChain chat model from config and runs the pipeline graph.
"""

import logging
import os
import time
from typing import Optional

from ..errors import InvalidInputError
from .config import PipelineConfig
from .graph import build_graph, create_initial_state
from .models import Section

logger = logging.getLogger(__name__)


def create_chat_model(config: PipelineConfig):
    """Create the LangChain chat model named by ``config.provider``"""
    if config.provider == "gemini":
        from langchain_google_genai import ChatGoogleGenerativeAI

        # Check in order: config, GOOGLE_API_KEY, GEMINI_API_KEY
        api_key = (
            config.api_key
            or os.getenv("GOOGLE_API_KEY")
            or os.getenv("GEMINI_API_KEY")
        )
        if not api_key:
            raise ValueError(
                "Google API key not found. "
                "Set GOOGLE_API_KEY or GEMINI_API_KEY environment variable, "
                "or pass api_key in PipelineConfig"
            )
        return ChatGoogleGenerativeAI(
            model=config.model,
            google_api_key=api_key,
            temperature=config.temperature,
            timeout=config.request_timeout,
        )

    if config.provider == "ollama":
        from langchain_ollama import ChatOllama

        return ChatOllama(
            model=config.model,
            base_url=config.ollama_base_url.replace("/v1", ""),
            temperature=config.temperature,
            client_kwargs={"timeout": config.request_timeout},
        )

    raise ValueError(f"Unsupported provider: {config.provider}")


class LyricsPipelineAgent:
    """Segments lyrics and translates each section with a chat model"""

    def __init__(self, config: Optional[PipelineConfig] = None, llm=None):
        """Initialize pipeline agent

        Args:
            config: Configuration (uses defaults if None)
            llm: Chat model to use (built from config if None)
        """
        self.config = config or PipelineConfig()
        self.llm = llm if llm is not None else create_chat_model(self.config)
        self.graph = build_graph(self.llm, self.config)

    def validate_lyrics(self, lyrics: Optional[str]) -> str:
        """Reject missing, blank or oversized lyrics"""
        if not lyrics or not lyrics.strip():
            raise InvalidInputError("No lyrics provided")
        if len(lyrics) > self.config.max_lyrics_chars:
            raise InvalidInputError(
                "Lyrics too long",
                details=f"{len(lyrics)} characters (max {self.config.max_lyrics_chars})",
            )
        return lyrics

    async def run(self, lyrics: Optional[str]) -> list[Section]:
        """Run segmentation, extraction and translation

        Any stage failure propagates as a single SongLensError; no partial
        section list is returned.

        Args:
            lyrics: Raw lyrics text

        Returns:
            Sections in boundary order
        """
        lyrics = self.validate_lyrics(lyrics)
        start_time = time.time()

        final_state = await self.graph.ainvoke(
            create_initial_state(lyrics),
            config={"recursion_limit": 10, "run_name": "LyricsPipeline"},
        )

        sections = final_state.get("sections") or []
        for message in final_state.get("messages") or []:
            logger.debug(f"   {message}")
        elapsed = time.time() - start_time
        logger.info(f"✓ Pipeline finished: {len(sections)} section(s) in {elapsed:.1f}s")
        return sections
