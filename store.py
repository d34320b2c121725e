"""
In-memory storage for phonebook records.

``PhonebookStore`` owns the collection.  Records are only ever appended;
each append swaps in a new list so a snapshot handed out by ``list`` is
never changed afterwards.
"""

import logging
import threading
from typing import Iterable, List, Optional

from schemas import Person

logger = logging.getLogger(__name__)

SEED_PERSONS = (
    Person(id=1, name="Arto Hellas", number="040-123456"),
    Person(id=2, name="Ada Lovelace", number="39-44-5323523"),
    Person(id=3, name="Dan Abramov", number="12-43-234345"),
    Person(id=4, name="Mary Poppendieck", number="39-23-6423122"),
)


class NameConflictError(Exception):
    """Raised when a record with the same name already exists."""

    def __init__(self, name: str):
        super().__init__(f"name already exists: {name}")
        self.name = name


class PhonebookStore:
    """Ordered collection of phonebook records.

    ``create`` is the only way to add records.  It runs under a lock so
    the duplicate-name check, id assignment and append happen as one
    step even when requests are served from several threads.
    """

    def __init__(self, persons: Optional[Iterable[Person]] = None):
        self._persons: List[Person] = list(SEED_PERSONS if persons is None else persons)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._persons)

    def list(self) -> List[Person]:
        return list(self._persons)

    def get(self, person_id: int) -> Optional[Person]:
        for person in self._persons:
            if person.id == person_id:
                return person
        return None

    def next_id(self) -> int:
        """Return one more than the highest id, or 1 for an empty store.

        Ids are never reused, even if records were ever removed.
        """
        persons = self._persons
        if not persons:
            return 1
        return max(person.id for person in persons) + 1

    def create(self, name: str, number: str) -> Person:
        """Append a new record and return it.

        Raises ``NameConflictError`` without touching the collection if
        ``name`` is already taken.
        """
        with self._lock:
            if any(person.name == name for person in self._persons):
                raise NameConflictError(name)
            person = Person(id=self.next_id(), name=name, number=number)
            self._persons = self._persons + [person]
        logger.debug("Stored person %s (%d records)", person.id, len(self._persons))
        return person
