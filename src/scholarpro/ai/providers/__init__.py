from .gemini import GeminiLiveConnection, GeminiProvider

__all__ = ["GeminiLiveConnection", "GeminiProvider"]
