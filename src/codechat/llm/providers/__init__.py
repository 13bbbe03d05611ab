from .openai_compatible import OpenAICompatibleTransport

__all__ = ["OpenAICompatibleTransport"]
