"""Conversation session: request shaping and optional history around a completion provider."""

import logging
from typing import Iterator, List, Optional, Sequence

from docqa.errors import ProviderFailure, require_text
from docqa.model_provider import CompletionProvider
from docqa.models.message import Message
from docqa.models.result import OperationResult

logger = logging.getLogger(__name__)

JSON_SYSTEM_MESSAGE = (
    "You are a helpful assistant that only returns and replies with valid, iterable RFC8259 "
    "compliant JSON in your responses unless I ask for any other format. Do not provide "
    "introductory words such as 'Here is your result' or '```json', etc. in the response"
)
DEFAULT_SYSTEM_MESSAGE = "You are a helpful assistant"


def _preview(text: str, limit: int = 200) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


class ConversationHistory:
    """Ordered messages of one exchange, first one conventionally the system message."""

    def __init__(self, messages: Optional[Sequence[Message]] = None):
        self._messages: List[Message] = list(messages or [])

    def append(self, message: Message) -> None:
        self._messages.append(message)

    def pop_last(self) -> Message:
        """Remove and return the newest message (transient rollback)."""
        return self._messages.pop()

    @property
    def messages(self) -> List[Message]:
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)


class ConversationSession:
    """A single logical exchange with the completion provider.

    Calls are stateless by default: each builds a fresh [system, user]
    request. With ``carry_history=True`` the session keeps one growing
    history, created on first use with that call's system message; later
    stateful calls append to it and ignore their own system message.

    Provider failures are logged and come back as an empty string, unless the
    session was created with ``raise_on_error=True``.
    """

    def __init__(self, provider: CompletionProvider, raise_on_error: bool = False):
        self._provider = provider
        self.raise_on_error = raise_on_error
        self._history: Optional[ConversationHistory] = None

    @staticmethod
    def system_message_for(return_as_json: bool = False, system_role: Optional[str] = None) -> str:
        if return_as_json:
            return JSON_SYSTEM_MESSAGE
        return system_role if system_role else DEFAULT_SYSTEM_MESSAGE

    def send(self, messages: Sequence[Message]) -> OperationResult:
        """Invoke the provider once on caller-owned messages; never raises.

        Failures are returned, not logged: callers log them with their own context.
        """
        result, _ = self._invoke(messages)
        return result

    def _invoke(self, messages: Sequence[Message]):
        try:
            text = self._provider(list(messages))
        except Exception as e:
            return OperationResult.failure(str(e) or e.__class__.__name__), e
        return OperationResult.ok(text or ""), None

    def complete_result(
        self,
        prompt: str,
        return_as_json: bool = False,
        carry_history: bool = False,
        system_role: Optional[str] = None,
    ) -> OperationResult:
        """
        Send a prompt and return the explicit result.

        Args:
            prompt: User message; must not be blank.
            return_as_json: Demand strict, unwrapped JSON (overrides system_role).
            carry_history: Read and extend the session history.
            system_role: System message used when not in JSON mode.

        Returns:
            OperationResult with the reply text, or the provider failure.
        """
        require_text(prompt, "Prompt")
        system_message = self.system_message_for(return_as_json, system_role)

        if carry_history:
            if self._history is None:
                self._history = ConversationHistory([Message.system(system_message)])
            self._history.append(Message.user(prompt))
            messages = self._history.messages
        else:
            messages = [Message.system(system_message), Message.user(prompt)]

        result, exc = self._invoke(messages)
        if not result.is_ok:
            logger.error(
                "An exception occurred while getting AI completion for prompt: %s",
                _preview(prompt),
                exc_info=exc,
            )
        elif carry_history and result.text:
            self._history.append(Message.assistant(result.text))
        return result

    def complete(
        self,
        prompt: str,
        return_as_json: bool = False,
        carry_history: bool = False,
        system_role: Optional[str] = None,
    ) -> str:
        """Send a prompt and return the reply text ("" when the provider failed)."""
        result = self.complete_result(prompt, return_as_json, carry_history, system_role)
        if not result.is_ok and self.raise_on_error:
            raise ProviderFailure("Error getting AI completion", result.error)
        return result.text

    def clear_history(self) -> None:
        """Reset the stateful history to uninitialized."""
        self._history = None

    def history_length(self) -> int:
        return len(self._history) if self._history is not None else 0

    def is_initialized(self) -> bool:
        return self._history is not None

    @property
    def history(self) -> List[Message]:
        return self._history.messages if self._history is not None else []
