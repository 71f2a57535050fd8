from ridelytics.integrations.llm.geminiService import (
    GeminiTextGenerator,
    TextGenerator,
    UpstreamGenerationError,
)

__all__ = ["GeminiTextGenerator", "TextGenerator", "UpstreamGenerationError"]
