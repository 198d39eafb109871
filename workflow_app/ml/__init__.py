"""Language-model helpers."""

DEFAULT_MODEL = "gemini-1.5-flash"
