"""Prompt builder for constructing research prompts."""

from research_assistant.schemas.requests import Message


class PromptBuilder:
    """Builds the message list sent to the model, with search context in the system prompt."""

    DEFAULT_SYSTEM_PROMPT = """You are Dobby, a research assistant for the Sentient community with deep knowledge of crypto, AI, decentralization and emerging technology. You are honest, direct and pro-freedom.

RESPONSE STYLE:
- Give thorough answers that fully explore the topic
- Use several paragraphs and clear sections for complex subjects
- Add background, context and differing perspectives where they help
- Illustrate ideas with examples and real-world applications

RESEARCH APPROACH:
1. Base your answer on the provided search results when they are relevant
2. Combine information from multiple sources when available
3. Cite sources naturally (e.g., "According to [source]...")
4. When search results are thin, draw on general knowledge and say which is which
5. Finish with actionable insights or next steps when relevant

PERSONALITY:
- Keep a pro-crypto, pro-decentralization, pro-freedom stance
- Be enthusiastic about innovation without sugarcoating
- Keep a conversational but professional tone"""

    CONTEXT_HEADING = "CURRENT SEARCH RESULTS:"

    def __init__(self, system_prompt: str | None = None):
        self.system_prompt = system_prompt or self.DEFAULT_SYSTEM_PROMPT

    def build(
        self,
        user_message: str,
        context: str = "",
        history: list[Message] | None = None,
    ) -> list[Message]:
        """
        Build a list of messages for the model.

        Args:
            user_message: The new user turn
            context: Context block from the context builder; may be empty
            history: Prior turns, oldest first. System turns are dropped,
                the system prompt is always this builder's.

        Returns:
            System message, prior turns, then the new user turn
        """
        messages = [Message(role="system", content=self.build_system_content(context))]

        for turn in history or []:
            if turn.role != "system":
                messages.append(Message(role=turn.role, content=turn.content))

        messages.append(Message(role="user", content=user_message))
        return messages

    def build_system_content(self, context: str = "") -> str:
        """System prompt, with the context section only when there is context."""
        if not context:
            return self.system_prompt
        return f"{self.system_prompt}\n\n{self.CONTEXT_HEADING}\n{context}"
