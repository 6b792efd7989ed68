"""Business logic services for the Thought Dump application."""
