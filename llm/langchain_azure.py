"""
LangChain Azure OpenAI client for LLM invocations.

Uses AzureChatOpenAI from langchain-openai. The deployment and endpoint
come from configuration; the API key comes from the session.
"""

import logging
from langchain_openai import AzureChatOpenAI
from langchain_core.messages import HumanMessage, SystemMessage
from config import config
from executor.request_builder import ModelRequest
from llm.base import ModelInvocationError, content_to_text

logger = logging.getLogger(__name__)


class LangChainAzureClient:
    """
    Client for interacting with Azure OpenAI models via LangChain.
    """

    def __init__(self, api_key: str) -> None:
        """
        Initialize the LangChain Azure OpenAI client.
        Raises ValueError if the key or required Azure configuration is missing.
        """
        if not api_key:
            logger.error("Azure OpenAI API key missing from session")
            raise ValueError("A model API key is required")

        if not config.llm.azure_openai_endpoint:
            logger.error("AZURE_OPENAI_ENDPOINT not found in configuration")
            raise ValueError("AZURE_OPENAI_ENDPOINT is required")

        if not config.llm.azure_openai_deployment_name:
            logger.error("AZURE_OPENAI_DEPLOYMENT not found in configuration")
            raise ValueError("AZURE_OPENAI_DEPLOYMENT is required")

        self.api_key = api_key
        self.deployment_name = config.llm.azure_openai_deployment_name

        logger.info(
            f"Azure OpenAI client initialized with deployment: {self.deployment_name}"
        )

    def _build_llm(self, request: ModelRequest):
        """Chat model bound to this request's JSON schema."""
        llm = AzureChatOpenAI(
            azure_endpoint=config.llm.azure_openai_endpoint,
            api_key=self.api_key,
            api_version=config.llm.azure_openai_api_version,
            azure_deployment=self.deployment_name,
            temperature=request.temperature,
            max_tokens=config.llm.max_tokens,
            timeout=config.llm.timeout,
            max_retries=0,
        )
        return llm.bind(
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": request.variant.value,
                    "schema": request.schema,
                },
            }
        )

    async def generate(self, request: ModelRequest) -> str:
        """
        Run the request and return the raw JSON text.

        Raises:
            ModelInvocationError: If the provider call fails
        """
        llm = self._build_llm(request)
        messages = [
            SystemMessage(content=request.instruction),
            HumanMessage(content=request.payload),
        ]

        try:
            response = await llm.ainvoke(messages)
        except Exception as e:
            logger.error(f"LangChain Azure OpenAI generation failed: {e}")
            raise ModelInvocationError(f"Azure OpenAI invocation failed: {e}") from e

        logger.debug(f"Azure LLM response type: {type(response)}")
        return content_to_text(response.content)
