"""Console UI for promptboost."""

from .chooser import ChoiceItem, prompt_choice, prompt_confirm
from .interaction import ThreadedConsoleInteraction, UserInteractionPort

__all__ = [
    "ChoiceItem",
    "prompt_choice",
    "prompt_confirm",
    "ThreadedConsoleInteraction",
    "UserInteractionPort",
]
