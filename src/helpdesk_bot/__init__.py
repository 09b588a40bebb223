"""Help desk chat bot: ticket submission and knowledge base lookup."""

__version__ = "1.0.0"
