import logging
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_core.messages import HumanMessage, SystemMessage
from config import config
from executor.request_builder import ModelRequest
from llm.base import ModelInvocationError, content_to_text

logger = logging.getLogger(__name__)

class LangChainGeminiClient:
    """
    Client for interacting with Google's Gemini models via LangChain.

    The output schema is enforced server-side through Gemini's JSON
    response mode.
    """

    def __init__(self, api_key: str) -> None:
        """
        Initialize the LangChain Gemini client for one session key.
        Raises ValueError if the API key is missing.
        """
        if not api_key:
            logger.error("Gemini API key missing from session")
            raise ValueError("A model API key is required")

        self.api_key = api_key
        self.model_name = config.llm.gemini_model

        logger.info(f"Initialized LangChain Gemini client with model: {self.model_name}")

    def _build_llm(self, request: ModelRequest) -> ChatGoogleGenerativeAI:
        """Chat model configured for this request's schema and temperature."""
        return ChatGoogleGenerativeAI(
            model=self.model_name,
            google_api_key=self.api_key,
            temperature=request.temperature,
            max_output_tokens=config.llm.max_tokens,
            timeout=config.llm.timeout,
            max_retries=1,  # single attempt
            response_mime_type="application/json",
            response_schema=request.schema,
        )

    async def generate(self, request: ModelRequest) -> str:
        """
        Run the request and return the raw JSON text.

        Args:
            request: Fully built model request

        Returns:
            Generated text (expected to parse as JSON matching request.schema)

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
            logger.error(f"LangChain Gemini generation failed: {e}")
            raise ModelInvocationError(f"Gemini invocation failed: {e}") from e

        logger.debug(f"LLM response content type: {type(response.content)}")
        return content_to_text(response.content)
