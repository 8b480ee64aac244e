"""Financial advisor chat using the Google Gen AI SDK."""
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx
from google import genai
from google.genai import errors, types

from .prompts import (
    build_chat_system_prompt,
    build_insights_prompt,
    build_insights_system_prompt,
    build_recommendations_prompt
)
from finance_wizard.analysis.models import FinancialInsights
from finance_wizard.context.manager import ContextManager
from finance_wizard.tools.schemas import AVAILABLE_TOOLS, ToolCall, ToolResult
from finance_wizard.utils.exceptions import LLMError, RetryableLLMError
from finance_wizard.utils.logger import get_logger
from finance_wizard.utils.retry import retry_with_backoff
from finance_wizard.ynab.models import Transaction

logger = get_logger()

DEFAULT_MODEL = "gemini-2.5-flash"


@dataclass
class ChatResult:
    response: str = ""
    tool_calls: List[ToolCall] = field(default_factory=list)


def build_tool_declarations() -> List[types.Tool]:
    """Translate the tool table into Gemini function declarations."""
    declarations = []
    for tool in AVAILABLE_TOOLS:
        parameters = None
        if tool["parameters"]:
            parameters = types.Schema(
                type=types.Type.OBJECT,
                properties={
                    name: types.Schema(
                        type=types.Type(prop["type"].upper()),
                        description=prop["description"],
                        enum=prop.get("enum")
                    )
                    for name, prop in tool["parameters"].items()
                }
            )
        declarations.append(types.FunctionDeclaration(
            name=tool["name"],
            description=tool["description"],
            parameters=parameters
        ))
    return [types.Tool(function_declarations=declarations)]


class AdvisorChat:
    """Sends insights, context and conversation history to Gemini."""

    def __init__(
        self,
        api_key: str,
        context_manager: ContextManager,
        model_name: str = DEFAULT_MODEL,
        max_output_tokens: int = 1000,
        insights_max_output_tokens: int = 1500,
        temperature: float = 0.4,
        max_retries: int = 3,
        client: Optional[genai.Client] = None
    ):
        """
        Initialize the advisor chat.

        Args:
            api_key: Gemini API key
            context_manager: Source of the personal context section of prompts
            model_name: Gemini model identifier
            max_output_tokens: Token limit for chat turns
            insights_max_output_tokens: Token limit for one-shot insight summaries
            temperature: Sampling temperature
            max_retries: Attempts for server-side failures
            client: Pre-built SDK client (tests)
        """
        self.client = client or genai.Client(api_key=api_key)
        self.context_manager = context_manager
        self.model_name = model_name
        self.max_output_tokens = max_output_tokens
        self.insights_max_output_tokens = insights_max_output_tokens
        self.temperature = temperature
        self.tools = build_tool_declarations()

        self._generate = retry_with_backoff(max_retries=max_retries)(self._generate_once)

        logger.info(f"Advisor chat initialized with {self.model_name}")

    def generate_insights(self, insights: FinancialInsights) -> str:
        """One-shot financial health summary."""
        response = self._generate(
            contents=[self.user_turn(build_insights_prompt(insights))],
            config=types.GenerateContentConfig(
                system_instruction=build_insights_system_prompt(self._user_context()),
                max_output_tokens=self.insights_max_output_tokens,
                temperature=self.temperature
            )
        )
        return self.parse_response(response).response

    def generate_budget_recommendations(self, insights: FinancialInsights) -> str:
        response = self._generate(
            contents=[self.user_turn(build_recommendations_prompt(insights))],
            config=types.GenerateContentConfig(
                system_instruction=build_insights_system_prompt(self._user_context()),
                max_output_tokens=self.max_output_tokens,
                temperature=self.temperature
            )
        )
        return self.parse_response(response).response

    def chat(
        self,
        message: str,
        insights: FinancialInsights,
        recent_transactions: List[Transaction],
        history: Optional[List[types.Content]] = None
    ) -> ChatResult:
        """
        Send one chat turn.

        Args:
            message: User message; blank messages are not appended (continuations)
            insights: Current analysis, summarised into the system prompt
            recent_transactions: Transactions listed in the system prompt
            history: Prior turns; not modified

        Returns:
            ChatResult with the text reply and any requested tool calls
        """
        contents = list(history or [])
        if message and message.strip():
            contents.append(self.user_turn(message))

        response = self._generate(
            contents=contents,
            config=types.GenerateContentConfig(
                system_instruction=build_chat_system_prompt(
                    insights, recent_transactions, self._user_context()
                ),
                tools=self.tools,
                automatic_function_calling=types.AutomaticFunctionCallingConfig(disable=True),
                max_output_tokens=self.max_output_tokens,
                temperature=self.temperature
            )
        )
        result = self.parse_response(response)
        if result.tool_calls:
            logger.info(f"Model requested tools: {', '.join(c.name for c in result.tool_calls)}")
        return result

    @staticmethod
    def parse_response(response: Any) -> ChatResult:
        """Collect text parts and function calls from a generate_content response."""
        result = ChatResult()
        candidates = getattr(response, "candidates", None) or []
        if not candidates or not candidates[0].content:
            return result

        for part in candidates[0].content.parts or []:
            function_call = getattr(part, "function_call", None)
            if function_call:
                result.tool_calls.append(ToolCall(
                    name=function_call.name,
                    parameters=dict(function_call.args or {}),
                    id=getattr(function_call, "id", None) or f"tool_{uuid.uuid4().hex[:12]}"
                ))
            elif getattr(part, "text", None):
                result.response += part.text
        return result

    @staticmethod
    def user_turn(text: str) -> types.Content:
        return types.Content(role="user", parts=[types.Part.from_text(text=text)])

    @staticmethod
    def model_turn(result: ChatResult) -> types.Content:
        """The assistant turn, including any function calls it made."""
        parts = []
        if result.response:
            parts.append(types.Part.from_text(text=result.response))
        for call in result.tool_calls:
            parts.append(types.Part(function_call=types.FunctionCall(
                id=call.id, name=call.name, args=call.parameters
            )))
        return types.Content(role="model", parts=parts)

    @staticmethod
    def tool_results_turn(results: List[tuple[ToolCall, ToolResult]]) -> types.Content:
        """Function responses answering the calls of the previous model turn."""
        parts = []
        for call, outcome in results:
            payload: Dict[str, Any] = (
                {"output": outcome.message} if outcome.success else {"error": outcome.message}
            )
            parts.append(types.Part(function_response=types.FunctionResponse(
                id=call.id, name=call.name, response=payload
            )))
        return types.Content(role="user", parts=parts)

    def _user_context(self) -> str:
        return self.context_manager.generate_context_prompt()

    def _generate_once(self, contents: List[types.Content], config: types.GenerateContentConfig) -> Any:
        try:
            return self.client.models.generate_content(
                model=self.model_name,
                contents=contents,
                config=config
            )
        except errors.ServerError as e:
            raise RetryableLLMError(f"Gemini server error: {e}")
        except errors.APIError as e:
            raise LLMError(f"Gemini request failed: {e}")
        except httpx.TransportError as e:
            raise RetryableLLMError(f"Gemini connection failed: {e}")
