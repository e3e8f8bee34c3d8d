"""
Heuristic entity extraction for generated summaries.

This is not named-entity recognition: person names are guessed from
capitalized word pairs and organizations from a few company suffixes.
Callers depend only on ``EntityExtractor`` so a real NLP component can
replace ``CapitalizedBigramExtractor``.
"""
import re
from abc import ABC, abstractmethod
from typing import Iterable, List, Sequence, Tuple

from ..models.schemas import Entity, FeedItem

MAX_ENTITIES = 10

ORGANIZATION_SUFFIXES: Sequence[str] = ("Inc.", "Corp.", "Company", "Organization", "Agency", "Group", "Ltd")

# (lower-cased trigger, name, type), checked before the regex heuristics.
KNOWN_PEOPLE: Sequence[Tuple[str, str, str]] = (
    ("ruto", "William Ruto", "Person - President of Kenya"),
)
KNOWN_LOCATIONS: Sequence[Tuple[str, str, str]] = (
    ("kenya", "Kenya", "Location - Country"),
)

POLITICAL_TITLES = ("President", "Minister")
BUSINESS_TITLES = ("CEO", "founder")
_ORGANIZATION_WORDS = {suffix.rstrip(".") for suffix in ORGANIZATION_SUFFIXES}

# A leading title is matched but not captured, so "Minister Jane Doe" yields "Jane Doe".
_PERSON_RE = re.compile(r"(?:(?:President|Minister) )?([A-Z][a-z]+ [A-Z][a-z]+)")


class EntityExtractor(ABC):
    @abstractmethod
    def extract(self, items: Iterable[FeedItem]) -> List[Entity]:
        ...


class CapitalizedBigramExtractor(EntityExtractor):
    def __init__(self, limit: int = MAX_ENTITIES):
        self.limit = limit

    @staticmethod
    def _person_type(name: str, text: str) -> str:
        if any(f"{title} {name}" in text for title in POLITICAL_TITLES):
            return "Person - Political Figure"
        if any(f"{title} {name}" in text for title in BUSINESS_TITLES):
            return "Person - Business Leader"
        return "Person"

    def extract(self, items: Iterable[FeedItem]) -> List[Entity]:
        text = " ".join(f"{item.title} {item.description}" for item in items)
        lowered = text.lower()
        entities: List[Entity] = []
        seen = set()

        def add(name: str, entity_type: str):
            if name not in seen:
                seen.add(name)
                entities.append(Entity(name=name, type=entity_type))

        for trigger, name, entity_type in KNOWN_PEOPLE:
            if trigger in lowered:
                add(name, entity_type)

        for name in _PERSON_RE.findall(text):
            if name.split(" ")[1] in _ORGANIZATION_WORDS:
                continue
            add(name, self._person_type(name, text))

        for suffix in ORGANIZATION_SUFFIXES:
            for match in re.findall(rf"[A-Z][A-Za-z]+ {re.escape(suffix)}", text):
                add(match, "Organization")

        for trigger, name, entity_type in KNOWN_LOCATIONS:
            if trigger in lowered:
                add(name, entity_type)

        return entities[: self.limit]
