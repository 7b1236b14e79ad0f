"""
Gemini Chat Assistant

Answers owner questions about a diagnosis through Google Gemini (via
LangChain). Educational only: it never changes a diagnosis and always
points the owner to a veterinarian.

The assistant never raises. Without an API key it answers in mock mode;
any backend failure returns a fixed fallback message and is logged.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from felineneuro.config import ChatConfig
from felineneuro.utils import ChatServiceError, get_logger

logger = get_logger(__name__)

SYSTEM_PERSONA = (
    "You are a helpful AI assistant integrated into a Feline Neurological Diagnosis "
    "Expert System. You provide educational information about cat health conditions "
    "and veterinary diagnoses.\n"
    "\n"
    "Keep your responses:\n"
    "- Concise and helpful (2-3 sentences max)\n"
    "- Educational and informative\n"
    "- Empathetic and supportive\n"
    "- Always emphasizing veterinary consultation\n"
    "\n"
    "IMPORTANT: You are NOT a veterinarian and cannot provide medical advice. Always "
    "recommend consulting with a licensed veterinarian for actual medical care."
)

FALLBACK_MESSAGE = (
    "I'm currently unable to connect to the diagnosis server. Please double-check your "
    "internet connection or consult a veterinarian directly for urgent concerns."
)


@dataclass
class ChatReply:
    """One assistant answer."""
    text: str
    model: str
    is_mock: bool = False
    is_fallback: bool = False
    latency_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reply": self.text,
            "model": self.model,
            "is_mock": self.is_mock,
            "is_fallback": self.is_fallback,
            "latency_ms": round(self.latency_ms, 2),
        }


def build_system_instruction(context: Optional[Dict[str, Any]] = None) -> str:
    """Persona plus the current diagnosis, when there is one."""
    if context and context.get("diagnosis"):
        notes = context.get("clinical_notes") or []
        return (
            f"{SYSTEM_PERSONA}\n\n"
            "CURRENT DIAGNOSIS CONTEXT:\n"
            f"The user's cat has been tentatively diagnosed with: {context['diagnosis']}\n"
            f"Urgency Level: {context.get('urgency', 'UNKNOWN')}\n"
            f"Description: {context.get('description', '')}\n"
            f"Clinical Notes: {', '.join(notes) if notes else 'None'}"
        )
    return (
        f"{SYSTEM_PERSONA}\n\n"
        "CONTEXT: No diagnosis has been run yet. The user is asking general questions."
    )


class ChatAssistant:
    """
    Thin async wrapper around ChatGoogleGenerativeAI.

    Mock mode is selected once at construction, when no API key is configured.
    """

    def __init__(self, config: Optional[ChatConfig] = None):
        self.config = config or ChatConfig()
        self._llm = None
        self._request_count = 0
        self._failure_count = 0
        self._last_request_time: Optional[datetime] = None

        if not self.config.api_key:
            logger.warning("No Gemini API key provided - chat assistant in mock mode")
            return

        self._llm = ChatGoogleGenerativeAI(
            model=self.config.model,
            temperature=self.config.temperature,
            max_output_tokens=self.config.max_output_tokens,
            timeout=self.config.request_timeout_seconds,
            max_retries=self.config.max_retries,
            google_api_key=self.config.api_key,
        )
        logger.info(f"Chat assistant initialized with model: {self.config.model}")

    @property
    def is_available(self) -> bool:
        return self._llm is not None

    async def send_message(
        self,
        user_text: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> ChatReply:
        """
        Ask the assistant a question, optionally about a diagnosis.

        Args:
            user_text: The owner's question.
            context:   {diagnosis, urgency, description, clinical_notes} or None.

        Returns:
            ChatReply. Failures produce the fallback message, never an exception.
        """
        system_text = build_system_instruction(context)

        if not self.is_available:
            return self._mock_reply(user_text, context)

        start = datetime.now()
        try:
            response = await self._llm.ainvoke([
                SystemMessage(content=system_text),
                HumanMessage(content=user_text),
            ])
            text = response.content if hasattr(response, "content") else str(response)
            if not isinstance(text, str) or not text.strip():
                raise ChatServiceError("Empty response from Gemini", model=self.config.model)
        except Exception as exc:
            self._failure_count += 1
            logger.error(f"Chat assistant request failed: {exc}")
            return ChatReply(text=FALLBACK_MESSAGE, model=self.config.model, is_fallback=True)

        self._request_count += 1
        self._last_request_time = datetime.now()
        return ChatReply(
            text=text,
            model=self.config.model,
            latency_ms=(self._last_request_time - start).total_seconds() * 1000,
        )

    def _mock_reply(self, user_text: str, context: Optional[Dict[str, Any]]) -> ChatReply:
        text = "[MOCK RESPONSE - Gemini unavailable]\n\n"
        if context and context.get("diagnosis"):
            text += (
                f"Your cat's signs were matched to {context['diagnosis']} "
                f"({context.get('urgency', 'UNKNOWN')} urgency). "
                "Please share this result with a licensed veterinarian, who can examine "
                "your cat and confirm the diagnosis."
            )
        else:
            text += (
                "I can explain feline neurological conditions once a diagnosis has been run. "
                "For any concern about your cat's health, please consult a licensed veterinarian."
            )
        return ChatReply(text=text, model="mock", is_mock=True, latency_ms=0.0)

    def get_stats(self) -> Dict[str, Any]:
        return {
            "is_available": self.is_available,
            "model": self.config.model,
            "request_count": self._request_count,
            "failure_count": self._failure_count,
            "last_request": self._last_request_time.isoformat() if self._last_request_time else None,
        }
