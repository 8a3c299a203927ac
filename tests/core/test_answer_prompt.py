"""
Test suite for the knowledge base answer prompt.

Tests prompt template structure and chat history formatting.

System role: Verification of RAG prompt template
"""

from kb_assistant.core.rag_query.prompt import RAG_ANSWER_PROMPT, format_chat_history
from kb_assistant.models.chat import ChatMessage


class TestAnswerPromptTemplate:
    """Test suite for RAG_ANSWER_PROMPT."""

    def test_prompt_should_have_expected_variables(self) -> None:
        assert set(RAG_ANSWER_PROMPT.input_variables) == {"context", "chat_history", "question"}

    def test_prompt_should_render_system_and_human_messages(self) -> None:
        # Act
        messages = RAG_ANSWER_PROMPT.format_messages(
            context="[Source: Doc]\nFacts.", chat_history="", question="What?"
        )

        # Assert
        assert [m.type for m in messages] == ["system", "human"]
        assert "ONLY use information from the Knowledge Base Context" in messages[0].content
        assert "Current Question: What?" in messages[1].content


class TestFormatChatHistory:
    """Test suite for format_chat_history."""

    def test_empty_history_should_render_nothing(self) -> None:
        assert format_chat_history([]) == ""

    def test_should_label_roles(self) -> None:
        history = [
            ChatMessage(role="user", content="Hi"),
            ChatMessage(role="assistant", content="Hello"),
        ]

        assert format_chat_history(history) == (
            "\n\nPrevious Conversation:\nUser: Hi\nAssistant: Hello"
        )

    def test_should_keep_only_most_recent_messages(self) -> None:
        history = [ChatMessage(role="user", content=f"m{i}") for i in range(10)]

        rendered = format_chat_history(history, max_messages=6)

        assert rendered.count("User:") == 6
        assert "m3" not in rendered
        assert "m4" in rendered and "m9" in rendered
