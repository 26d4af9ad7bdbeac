"""
Gemini API Client

Wrapper for Google Gemini via LangChain, used by the health chat search and
medical-report PDF analysis endpoints. Never used by the risk engine.
"""
from dataclasses import dataclass
from typing import Dict, Any, Optional
from datetime import datetime
import base64
import os

from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from wellnessai.utils import get_logger

logger = get_logger(__name__)

HEALTH_ASSISTANT_PROMPT = '''You are a helpful health assistant. The user has asked: "{query}".

Please provide a clear, informative response about their health question. Keep in mind:
- Provide general health information and guidance
- Always recommend consulting healthcare professionals for serious concerns
- Be empathetic and supportive
- Keep responses concise but comprehensive
- Include disclaimers when appropriate

Response:'''

PDF_ANALYSIS_PROMPT = (
    "Analyze this medical report PDF and summarize key findings, "
    "possible issues, and recommendations."
)

SERVICE_UNAVAILABLE_MESSAGE = (
    "Sorry, the AI service is not available at the moment. Please contact support."
)
REQUEST_FAILED_MESSAGE = (
    "Sorry, I was unable to process your health question at the moment. "
    "Please try again later or contact our support team for assistance."
)


@dataclass
class GeminiConfig:
    """Configuration for Gemini client."""
    api_key: Optional[str] = None
    model: str = "gemini-2.5-flash"
    temperature: float = 0.7
    top_p: float = 0.95
    top_k: int = 40
    max_output_tokens: int = 500
    document_max_output_tokens: int = 2048
    request_timeout_seconds: int = 30
    max_retries: int = 2

    def __post_init__(self):
        """Load API key from environment if not provided."""
        if self.api_key is None:
            self.api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY")


@dataclass
class GeminiResponse:
    """Structured response from Gemini."""
    text: str
    model: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    latency_ms: float = 0.0
    is_fallback: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "model": self.model,
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "latency_ms": round(self.latency_ms, 2),
            "is_fallback": self.is_fallback,
            "error": self.error,
        }


class GeminiClient:
    """
    Client for Google Gemini API.

    Failures never raise: callers get a fallback GeminiResponse carrying the
    error and decide how to surface it.
    """

    def __init__(self, config: Optional[GeminiConfig] = None):
        self.config = config or GeminiConfig()
        self._chat_llm = None
        self._document_llm = None
        self._initialized = False

        self._initialize()

    def _build_llm(self, max_output_tokens: int) -> ChatGoogleGenerativeAI:
        return ChatGoogleGenerativeAI(
            model=self.config.model,
            temperature=self.config.temperature,
            top_p=self.config.top_p,
            top_k=self.config.top_k,
            max_output_tokens=max_output_tokens,
            timeout=self.config.request_timeout_seconds,
            max_retries=self.config.max_retries,
            google_api_key=self.config.api_key,
        )

    def _initialize(self):
        """Initialize the Gemini models using LangChain."""
        if not self.config.api_key:
            logger.warning("No Gemini API key provided - AI endpoints disabled")
            self._initialized = False
            return

        try:
            self._chat_llm = self._build_llm(self.config.max_output_tokens)
            self._document_llm = self._build_llm(self.config.document_max_output_tokens)
            self._initialized = True
            logger.info(f"LangChain Gemini client initialized with model: {self.config.model}")
        except Exception as e:
            logger.error(f"Failed to initialize LangChain Gemini: {e}")
            self._initialized = False

    @property
    def is_available(self) -> bool:
        """Check if Gemini is available for use."""
        return self._initialized

    def ask_health_question(self, query: str) -> GeminiResponse:
        """Answer a free-text health question with the health-assistant prompt."""
        prompt = HEALTH_ASSISTANT_PROMPT.format(query=query)
        return self._invoke(self._chat_llm, prompt, REQUEST_FAILED_MESSAGE)

    def summarize_pdf(self, pdf_bytes: bytes, instruction: str = PDF_ANALYSIS_PROMPT) -> GeminiResponse:
        """Summarize a medical report PDF sent inline as base64."""
        message = HumanMessage(content=[
            {
                "type": "media",
                "mime_type": "application/pdf",
                "data": base64.b64encode(pdf_bytes).decode("ascii"),
            },
            {"type": "text", "text": instruction},
        ])
        return self._invoke(self._document_llm, [message], "Error analyzing PDF")

    def _invoke(self, llm, payload, failure_text: str) -> GeminiResponse:
        start_time = datetime.now()

        if not self.is_available:
            return self._fallback_response(SERVICE_UNAVAILABLE_MESSAGE, error="Gemini API key not configured")

        try:
            response = llm.invoke(payload)

            latency = (datetime.now() - start_time).total_seconds() * 1000
            text = response.content if hasattr(response, 'content') else str(response)
            if isinstance(text, list):
                text = "".join(
                    part.get("text", "") if isinstance(part, dict) else str(part)
                    for part in text
                )
            if not text or not text.strip():
                raise ValueError("Invalid response from Gemini API")

            prompt_tokens = 0
            completion_tokens = 0
            usage = getattr(response, 'usage_metadata', None)
            if usage:
                prompt_tokens = usage.get('input_tokens', 0)
                completion_tokens = usage.get('output_tokens', 0)

            return GeminiResponse(
                text=text,
                model=self.config.model,
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                latency_ms=latency,
            )

        except Exception as e:
            logger.error(f"LangChain Gemini generation failed: {e}")
            return self._fallback_response(failure_text, error=str(e))

    def _fallback_response(self, text: str, error: str) -> GeminiResponse:
        return GeminiResponse(text=text, model="fallback", is_fallback=True, error=error)
