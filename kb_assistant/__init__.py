"""Knowledge base assistant: web page ingestion and RAG question answering."""

__version__ = "1.0.0"
