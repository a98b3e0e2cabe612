"""Ordered model candidates with sticky last-success memory."""
from typing import Iterator, List, Optional, Sequence


class ModelMemory:
    """Remembers the model that last answered successfully."""

    def __init__(self, current: Optional[str] = None):
        self.current = current

    def remember(self, model: str) -> bool:
        """Store model; returns True if this was a switch."""
        switched = self.current != model
        self.current = model
        return switched


class ModelCandidates:
    """
    Iterates model names to try, most preferred first.

    The remembered model (if any) goes to the front; the configured list
    follows in order with duplicates removed.
    """

    def __init__(self, models: Sequence[str], memory: ModelMemory):
        if not models:
            raise ValueError("At least one model must be configured")
        self.models = list(models)
        self.memory = memory

    def ordered(self) -> List[str]:
        ordered: List[str] = []
        for model in [self.memory.current, *self.models]:
            if model and model not in ordered:
                ordered.append(model)
        return ordered

    def __iter__(self) -> Iterator[str]:
        return iter(self.ordered())

    @property
    def current(self) -> str:
        return self.memory.current or self.models[0]
