"""Configuration for the lyrics pipeline - includes prompt templates"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


@dataclass
class PipelineConfig:
    """Configuration for segmentation and section translation"""

    # Model settings
    provider: str = "gemini"  # "gemini" or "ollama"
    model: str = "gemini-2.5-flash"
    api_key: str = ""  # Set via GOOGLE_API_KEY or GEMINI_API_KEY
    ollama_base_url: str = "http://localhost:11434"
    temperature: float = 0.7
    request_timeout: float = 60.0

    # Translation settings
    target_lang: str = "English"
    max_concurrency: Optional[int] = 8  # None or 0 = unlimited
    max_lyrics_chars: int = 3000

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        """Build a config from environment variables (and .env if present)"""
        load_dotenv()
        config = cls()
        config.provider = os.getenv("SONGLENS_PROVIDER", config.provider)
        config.model = os.getenv("SONGLENS_MODEL", config.model)
        config.api_key = (
            os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY") or ""
        )
        config.ollama_base_url = os.getenv("OLLAMA_BASE_URL", config.ollama_base_url)
        config.target_lang = os.getenv("SONGLENS_TARGET_LANG", config.target_lang)
        max_concurrency = os.getenv("SONGLENS_MAX_CONCURRENCY")
        if max_concurrency:
            config.max_concurrency = int(max_concurrency)
        return config

    # ==================== PROMPT TEMPLATES ====================

    def get_segmentation_system_prompt(self) -> str:
        """System prompt asking for section line ranges as strict JSON"""
        return (
            "You are a lyrics analyzer. Your task is to identify the different "
            "sections of a song (verse 1, verse 2, chorus, bridge, etc.) and return "
            "their line ranges. Return ONLY valid JSON in this format: "
            '{"sections": [{"type": "verse", "startLine": 1, "endLine": 4}, ...]}. '
            "Line numbers are 1-indexed. Each section should be continuous and not "
            "overlap with others."
        )

    def get_segmentation_user_prompt(self, numbered_lyrics: str) -> str:
        """User prompt carrying the line-numbered lyrics"""
        return f"""Identify the sections in these numbered lyrics:
{numbered_lyrics}

Return the sections with their line number ranges. Make sure line numbers correspond to the numbers shown above."""

    def get_translation_system_prompt(self) -> str:
        """System prompt asking for translation + analysis as strict JSON"""
        return (
            "You are a skilled translator and lyrics analyst. Translate the given "
            f"lyrics section to {self.target_lang}, preserving meaning and cultural "
            "context. Return ONLY valid JSON in this format: "
            '{"translation": "translated text", "analysis": "analysis text"}. '
            "CRITICAL: Preserve ALL existing line breaks from the original text, and "
            "DO NOT add any new ones. Each line in the original should correspond to "
            "exactly one line in the translation. The number and position of line "
            "breaks must match the original EXACTLY."
        )

    def get_translation_user_prompt(self, kind: str, section_text: str) -> str:
        """User prompt carrying one section's text"""
        return f"""Translate this {kind}, maintaining EXACT line structure:
{section_text}

IMPORTANT: Return one translated line for each original line, keeping all line breaks in the same places."""
