"""Resume review backend: LLM feedback and keyword matching for uploaded resumes."""

__version__ = "1.0.0"
