from .base import Dialog, TurnContext
from .help import HelpDialog, NotUnderstoodDialog
from .knowledge_base import KnowledgeBaseDialog
from .submit_ticket import SubmitStep, SubmitTicketDialog

__all__ = [
    "Dialog",
    "HelpDialog",
    "KnowledgeBaseDialog",
    "NotUnderstoodDialog",
    "SubmitStep",
    "SubmitTicketDialog",
    "TurnContext",
]
