"""Advisor session - one conversation, its rate gate and its model memory.

send_message():
1. Rate gate (raises RateLimitError)
2. Validation (raises MessageValidationError)
3. Prompt assembly
4. Sequential model fallback; first success wins and becomes sticky
5. Canned reply if every model fails - never raises past step 2
"""
import logging
from typing import List, Optional, Sequence

from cfo_helper.config import settings
from cfo_helper.errors import MessageValidationError
from cfo_helper.advisor.candidates import ModelCandidates, ModelMemory
from cfo_helper.advisor.client import GeminiModelClient, ModelClient
from cfo_helper.advisor.prompt_builder import INSIGHTS_PROMPT, build_prompt
from cfo_helper.advisor.rate_gate import RateGate
from cfo_helper.advisor.schemas import ChatMessage, FinancialContext, GenerationConfig

logger = logging.getLogger(__name__)


BUSY_FALLBACK = (
    "⏳ The AI service is temporarily busy. This usually resolves quickly! "
    "In the meantime, here are some key financial insights:\n\n"
    "💡 **Quick Financial Tips:**\n"
    "• Track your monthly cash flow closely\n"
    "• Maintain 3-6 months of operating expenses as emergency fund\n"
    "• Review your biggest expense categories monthly\n"
    "• Monitor profit margins and adjust pricing if needed\n"
    "• Plan for seasonal variations in revenue\n\n"
    "🔄 Please try your question again in a few moments!"
)

GENERIC_FALLBACK = (
    "I'm currently experiencing technical difficulties connecting to the AI service. "
    "However, I can still help you with general financial advice:\n\n"
    "💡 **Quick Tips:**\n"
    "• Monitor your cash flow regularly\n"
    "• Keep 3-6 months of expenses as emergency fund\n"
    "• Review and optimize your biggest expense categories\n"
    "• Track your profit margins monthly\n\n"
    "Please try asking your question again in a moment, or contact support if the issue persists."
)

CONNECTION_TEST_PROMPT = 'Hello, respond with just "OK"'


def is_temporary_unavailability(error: Optional[BaseException]) -> bool:
    """True when an error looks like a 503 / service-unavailable response."""
    if error is None:
        return False
    if getattr(error, "status_code", None) == 503:
        return True
    message = str(error)
    return "503" in message or "service is currently unavailable" in message


def default_generation_config() -> GenerationConfig:
    return GenerationConfig(
        temperature=settings.ADVISOR_TEMPERATURE,
        top_k=settings.ADVISOR_TOP_K,
        top_p=settings.ADVISOR_TOP_P,
        max_output_tokens=settings.ADVISOR_MAX_OUTPUT_TOKENS,
    )


class AdvisorSession:
    """
    A single user's advisor conversation.

    History, rate-gate counters and the sticky model are instance state; build
    one session per user rather than sharing a module-level instance.
    """

    def __init__(
        self,
        client: Optional[ModelClient] = None,
        models: Optional[Sequence[str]] = None,
        config: Optional[GenerationConfig] = None,
        rate_gate: Optional[RateGate] = None,
        memory: Optional[ModelMemory] = None,
        history_window: Optional[int] = None,
        max_message_length: Optional[int] = None,
    ):
        self.client = client or GeminiModelClient()
        self.candidates = ModelCandidates(models or settings.ADVISOR_MODELS, memory or ModelMemory())
        self.config = config or default_generation_config()
        self.rate_gate = rate_gate or RateGate(
            min_interval=settings.ADVISOR_MIN_REQUEST_INTERVAL_SECONDS,
            max_per_minute=settings.ADVISOR_MAX_REQUESTS_PER_MINUTE,
        )
        self.history_window = history_window if history_window is not None else settings.ADVISOR_HISTORY_WINDOW
        self.max_message_length = max_message_length or settings.ADVISOR_MAX_MESSAGE_LENGTH
        self._history: List[ChatMessage] = []
        self.last_model: Optional[str] = None

    @property
    def current_model(self) -> str:
        return self.candidates.current

    def _validate(self, text: str) -> None:
        if not text or not text.strip():
            raise MessageValidationError("Please enter a message.")
        if len(text) > self.max_message_length:
            raise MessageValidationError(
                f"Message is too long. Please keep it under {self.max_message_length} characters."
            )

    async def send_message(
        self,
        text: str,
        context: Optional[FinancialContext] = None,
    ) -> ChatMessage:
        """Send one user message and return the advisor's reply."""
        self.rate_gate.check()
        self._validate(text)

        prompt = build_prompt(text, self._history, context, self.history_window)
        self._history.append(ChatMessage(content=text, is_user=True))

        last_error: Optional[Exception] = None
        for model in self.candidates:
            try:
                logger.info(f"Trying advisor model {model}")
                reply_text = await self.client.generate(model, prompt, self.config)
            except Exception as e:
                if is_temporary_unavailability(e):
                    logger.warning(f"Advisor model {model} temporarily unavailable")
                else:
                    logger.warning(f"Advisor model {model} failed: {e}")
                last_error = e
                continue

            if self.candidates.memory.remember(model):
                logger.info(f"Switched advisor model to {model}")
            self.last_model = model

            reply = ChatMessage(content=reply_text, is_user=False)
            self._history.append(reply)
            return reply

        logger.error(f"All advisor models failed. Last error: {last_error}")
        self.last_model = None
        body = BUSY_FALLBACK if is_temporary_unavailability(last_error) else GENERIC_FALLBACK
        fallback = ChatMessage(content=body, is_user=False, is_fallback=True)
        self._history.append(fallback)
        return fallback

    async def generate_insights(self, context: FinancialContext) -> ChatMessage:
        """Ask for a short list of insights about the given context."""
        return await self.send_message(INSIGHTS_PROMPT, context)

    async def test_connection(self) -> bool:
        """Check the current model responds. Bypasses the rate gate and history."""
        model = self.current_model
        try:
            text = await self.client.generate(model, CONNECTION_TEST_PROMPT, self.config)
        except Exception as e:
            logger.error(f"Advisor connection test failed for {model}: {e}")
            return False
        logger.info(f"Advisor connection test succeeded for {model}: {text!r}")
        return True

    def clear_history(self) -> None:
        self._history = []

    def get_history(self) -> List[ChatMessage]:
        return list(self._history)
