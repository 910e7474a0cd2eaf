"""
Pytest configuration for tests
"""

import asyncio
import json

import pytest
from dotenv import load_dotenv
from langchain_core.messages import AIMessage

from songlens.storage import TranslationStore
from songlens.translators import LyricsPipelineAgent, PipelineConfig


def pytest_configure(config):
    """Load environment variables before running tests"""
    load_dotenv()


class ScriptedChatModel:
    """Stands in for a LangChain chat model

    Segmentation prompts get ``segmentation``; translation prompts get the
    first entry of ``translations`` whose key appears in the prompt, or a
    generic reply. An Exception value is raised instead of returned.
    """

    def __init__(self, segmentation: str, translations: dict | None = None, delay: float = 0.0):
        self.segmentation = segmentation
        self.translations = translations or {}
        self.delay = delay
        self.prompts: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def ainvoke(self, messages):
        system, human = messages[0].content, messages[1].content
        self.prompts.append(human)
        if "lyrics analyzer" in system:
            reply = self.segmentation
        else:
            reply = json.dumps({"translation": "translated", "analysis": "notes"})
            for key, value in self.translations.items():
                if key in human:
                    reply = value
                    break

        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if isinstance(reply, Exception):
                raise reply
            return AIMessage(content=reply)
        finally:
            self.in_flight -= 1


@pytest.fixture
def sample_lyrics():
    return "Line one\nLine two\nLine three\nLine four"


@pytest.fixture
def config():
    return PipelineConfig(api_key="test-key")


@pytest.fixture
def make_agent(config):
    def _make(llm) -> LyricsPipelineAgent:
        return LyricsPipelineAgent(config=config, llm=llm)

    return _make


@pytest.fixture
async def store(tmp_path):
    store = TranslationStore(str(tmp_path / "translations.db"))
    await store.init()
    return store
