"""
LLM module for NicheScope.

Provider adapters that execute a ModelRequest and return raw JSON text.
"""

from config import config
from llm.base import ModelInvocationError, content_to_text


def get_model_client(api_key: str):
    """
    Build the configured provider client for a session's model key.

    Raises:
        ValueError: If the provider is unsupported or misconfigured.
    """
    if config.llm.provider == "gemini":
        from llm.langchain_gemini import LangChainGeminiClient
        return LangChainGeminiClient(api_key)
    elif config.llm.provider == "azure_openai":
        from llm.langchain_azure import LangChainAzureClient
        return LangChainAzureClient(api_key)
    raise ValueError(
        f"Unsupported LLM provider: {config.llm.provider}. "
        "Supported: 'gemini', 'azure_openai'"
    )


__all__ = ["ModelInvocationError", "content_to_text", "get_model_client"]
