"""Symptom checklist shown on the intake form."""

from typing import Dict, Iterable, List, Optional, Tuple
from medagent.models.assessment import Symptom


# (identifier, label), in display order
DEFAULT_SYMPTOMS: List[Tuple[str, str]] = [
    ("fever", "Fever"),
    ("headache", "Headache"),
    ("cough", "Cough"),
    ("fatigue", "Fatigue"),
    ("chest_pain", "Chest Pain"),
    ("shortness_breath", "Shortness of Breath"),
    ("nausea", "Nausea"),
    ("sore_throat", "Sore Throat"),
]


class SymptomCatalog:
    """Fixed, ordered set of symptoms known at build time."""

    def __init__(self, entries: Optional[Iterable[Tuple[str, str]]] = None):
        self._entries: List[Tuple[str, str]] = list(entries or DEFAULT_SYMPTOMS)
        self._labels: Dict[str, str] = {}
        for name, label in self._entries:
            if name in self._labels:
                raise ValueError(f"Duplicate symptom identifier: {name}")
            self._labels[name] = label

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: str) -> bool:
        return name in self._labels

    @property
    def names(self) -> List[str]:
        return [name for name, _ in self._entries]

    def label_for(self, name: str) -> Optional[str]:
        return self._labels.get(name)

    def as_list(self) -> List[Dict[str, str]]:
        return [{"name": name, "label": label} for name, label in self._entries]

    def build_symptoms(self, selected: Iterable[str]) -> Tuple[Symptom, ...]:
        """Return the whole checklist in catalog order with selection flags set."""
        chosen = set(selected)
        return tuple(
            Symptom(name=name, label=label, selected=name in chosen)
            for name, label in self._entries
        )


default_catalog = SymptomCatalog()
