"""
Bedrock chat adapter for summaries and answers.

When the model reports token log-probabilities their mean probability
scales the retrieval context quality into the final confidence; models
that report none leave the context quality unchanged.

Dependencies: langchain_aws, langchain_core, docagents.configs
System role: Text generation adapter
"""

import logging

from langchain_aws import ChatBedrockConverse
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from docagents.configs.llm import LLMSettings
from docagents.core.confidence import blend_confidence, generation_confidence
from docagents.core.exceptions import GenerationError

logger = logging.getLogger(__name__)

SUMMARY_SYSTEM_PROMPT = (
    "You are a concise assistant. First provide a brief summary paragraph, "
    "then list the key points as bullet points (using - or *)."
)
ANSWER_SYSTEM_PROMPT = (
    "You answer questions concisely based only on the provided context."
)


def extract_summary(content: str) -> tuple[str, list[str]]:
    """
    Split model output into a summary paragraph and bullet points.

    Lines starting with - or * become key points; every other non-empty
    line is joined into the summary.
    """
    points: list[str] = []
    summary_lines: list[str] = []
    for line in content.splitlines():
        trimmed = line.strip()
        if not trimmed:
            continue
        if trimmed.startswith(("-", "*")):
            points.append(trimmed.lstrip("-* "))
        else:
            summary_lines.append(trimmed)
    return " ".join(summary_lines), points


def message_text(message: AIMessage) -> str:
    """Plain text of a chat response; Converse may return a list of content blocks."""
    if isinstance(message.content, str):
        return message.content
    return "".join(
        block.get("text", "") if isinstance(block, dict) else str(block)
        for block in message.content
    )


def extract_logprobs(message: AIMessage) -> list[float]:
    """Token log-probabilities from a chat response, empty when absent."""
    logprobs = (message.response_metadata or {}).get("logprobs") or {}
    return [
        token["logprob"]
        for token in logprobs.get("content") or []
        if token.get("logprob") is not None
    ]


class BedrockGenerator:
    """Generator backed by the Bedrock Converse API."""

    def __init__(
        self,
        settings: LLMSettings,
        chat_model: ChatBedrockConverse | None = None,
    ) -> None:
        """
        Initialize the chat client.

        Args:
            settings: LLM settings (model, region, temperature, max tokens)
            chat_model: Preconfigured client, mainly for tests
        """
        self.model_name = settings.model
        self._chat = chat_model or ChatBedrockConverse(
            model=settings.model,
            region_name=settings.region,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
        )

    async def summarize(self, text: str) -> tuple[str, list[str]]:
        """
        Summarize document text.

        Raises:
            GenerationError: Provider call failed or returned no text
        """
        try:
            response = await self._chat.ainvoke(
                [SystemMessage(content=SUMMARY_SYSTEM_PROMPT), HumanMessage(content=text)]
            )
        except Exception as e:
            raise GenerationError(
                "summary generation failed",
                {"model": self.model_name, "error": str(e)},
            ) from e
        content = message_text(response)
        if not content.strip():
            raise GenerationError("empty model response", {"model": self.model_name})
        return extract_summary(content)

    async def answer(
        self,
        question: str,
        context: str,
        context_quality: float,
    ) -> tuple[str, float]:
        """
        Answer a question from retrieved context.

        Returns:
            tuple[str, float]: Answer text and context_quality scaled by the
            mean token probability

        Raises:
            GenerationError: Provider call failed or returned no text
        """
        prompt = f"Context:\n{context}\n\nQuestion: {question}"
        try:
            response = await self._chat.ainvoke(
                [SystemMessage(content=ANSWER_SYSTEM_PROMPT), HumanMessage(content=prompt)]
            )
        except Exception as e:
            raise GenerationError(
                "answer generation failed",
                {"model": self.model_name, "error": str(e)},
            ) from e

        answer = message_text(response).strip()
        if not answer:
            raise GenerationError("empty model response", {"model": self.model_name})

        confidence = blend_confidence(
            context_quality,
            generation_confidence(extract_logprobs(response)),
        )
        return answer, confidence
