"""Completion provider built on a LangChain chat model, Google Gemini with Groq fallback."""

import os
from typing import Callable, List, Optional, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from docqa.models.message import Message, Role

GEMINI_DEFAULT_MODEL = "gemini-2.0-flash"
GROQ_DEFAULT_MODEL = "openai/gpt-oss-120b"

CompletionProvider = Callable[[Sequence[Message]], str]

_LANGCHAIN_MESSAGE_TYPES = {
    Role.SYSTEM: SystemMessage,
    Role.USER: HumanMessage,
    Role.ASSISTANT: AIMessage,
}


def create_chat_model(model_name: Optional[str] = None, temperature: float = 0.0) -> BaseChatModel:
    """
    Build the chat model behind the default completion provider.

    Gemini is preferred when GOOGLE_API_KEY is present; GROQ_API_KEY is the
    fallback. A model_name override applies to whichever backend is chosen.

    Raises:
        ValueError: Neither key is configured.
    """
    if os.getenv("GOOGLE_API_KEY"):
        from langchain_google_genai import ChatGoogleGenerativeAI

        return ChatGoogleGenerativeAI(
            model=model_name or GEMINI_DEFAULT_MODEL,
            temperature=temperature,
            google_api_key=os.environ["GOOGLE_API_KEY"],
        )
    if os.getenv("GROQ_API_KEY"):
        from langchain_groq import ChatGroq

        return ChatGroq(
            model=model_name or GROQ_DEFAULT_MODEL,
            temperature=temperature,
            api_key=os.environ["GROQ_API_KEY"],
        )
    raise ValueError("No chat model API key found: set GOOGLE_API_KEY or GROQ_API_KEY.")


def to_langchain_messages(messages: Sequence[Message]) -> List[BaseMessage]:
    """Convert chat messages to LangChain message objects, preserving order."""
    return [_LANGCHAIN_MESSAGE_TYPES[m.role](content=m.content) for m in messages]


def create_completion_provider(llm: Optional[BaseChatModel] = None, model_name: Optional[str] = None, temperature: float = 0.0) -> CompletionProvider:
    """
    Wrap a LangChain chat model as a completion provider.

    Args:
        llm: Chat model to use. If None, one is created with create_chat_model.
        model_name: Model name override passed to create_chat_model.
        temperature: Temperature passed to create_chat_model.

    Returns:
        A callable taking the ordered messages and returning the reply text.
    """
    chat_model = llm if llm is not None else create_chat_model(model_name, temperature)

    def complete(messages: Sequence[Message]) -> str:
        response = chat_model.invoke(to_langchain_messages(messages))
        # Extract content from AIMessage if needed
        text = response.content if hasattr(response, "content") else str(response)
        return text if isinstance(text, str) else str(text)

    return complete
