"""
Knowledge base answer prompt.

Defines the system prompt template for grounded Q&A. The model must answer
from the supplied context only.

Dependencies: langchain_core.prompts
System role: Prompt template for RAG answer generation
"""

from langchain_core.prompts import ChatPromptTemplate

from kb_assistant.models.chat import ChatMessage

NO_INFORMATION_ANSWER = (
    "I couldn't find any relevant information in the knowledge base to answer your "
    "question. Please make sure the relevant content has been added first."
)

INSUFFICIENT_CONTEXT_ANSWER = (
    "The retrieved documents don't contain sufficient information to answer your "
    "question. Please add more detailed content to the knowledge base."
)

UNANSWERABLE_PHRASE = "I don't have that information in the knowledge base"

SYSTEM_PROMPT = f"""You are a Knowledge Base Assistant. You provide helpful, conversational answers using ONLY the knowledge base context provided.

## Rules
1. ONLY use information from the Knowledge Base Context
2. DO NOT use external knowledge or make assumptions
3. Be conversational and natural in your responses
4. If you need to reference previous conversation, use the chat history
5. If the answer is not in the context, say "{UNANSWERABLE_PHRASE}"
6. Provide clear, well-structured answers
7. Be concise but thorough"""

RAG_ANSWER_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    ("human", """Knowledge Base Context:
{context}
{chat_history}

Current Question: {question}

Provide a helpful answer based ONLY on the knowledge base context above:"""),
])


def format_chat_history(history: list[ChatMessage], max_messages: int = 6) -> str:
    """
    Render the most recent messages as a transcript block.

    Args:
        history: Conversation so far, oldest first
        max_messages: Messages kept from the end of the history

    Returns:
        str: "Previous Conversation:" block, or "" when there is no history
    """
    if not history or max_messages <= 0:
        return ""

    recent = history[-max_messages:]
    lines = [
        f"{'User' if message.role == 'user' else 'Assistant'}: {message.content}"
        for message in recent
    ]
    return "\n\nPrevious Conversation:\n" + "\n".join(lines)
