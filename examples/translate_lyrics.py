"""Example usage of the lyrics pipeline

Segments a short song, translates each section and prints the result.
Needs GOOGLE_API_KEY (or SONGLENS_PROVIDER=ollama with a local model).
"""

import asyncio

from songlens import LyricsPipelineAgent, PipelineConfig

EXAMPLE_LYRICS = """Sous le ciel de Paris
S'envole une chanson
Elle est née d'aujourd'hui
Dans le cœur d'un garçon

Sous le ciel de Paris
Marchent des amoureux"""


async def main():
    """Run example translation"""
    print("=" * 60)
    print("songlens - Example")
    print("=" * 60)
    print()

    try:
        agent = LyricsPipelineAgent(PipelineConfig.from_env())
    except ValueError as e:
        print(f"❌ Error: {e}")
        return

    print("🚀 Segmenting and translating...")
    sections = await agent.run(EXAMPLE_LYRICS)

    for section in sections:
        print()
        print(f"【{section.kind}】")
        print(section.original_text)
        print("-" * 60)
        print(section.translation_text)
        if section.analysis_text:
            print()
            print(section.analysis_text)

    print()
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
