"""Analysis prompts."""
