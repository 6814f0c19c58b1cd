"""
Keyed collections of operations and fragments for one generator run.

The first definition seen for a name wins. Later definitions with the same
name never replace it; they are kept aside under NAME_1, NAME_2, ... so the
run can report every collision.
"""

from typing import Dict, Generic, List, Tuple, TypeVar

from models import FragmentRecord, OperationRecord

RecordT = TypeVar("RecordT", OperationRecord, FragmentRecord)


class _KeyedCollection(Generic[RecordT]):
    def __init__(self):
        self.primary: Dict[str, RecordT] = {}
        self.duplicates: Dict[str, RecordT] = {}
        self._collisions: Dict[str, int] = {}

    def insert(self, record: RecordT) -> bool:
        """Store record; return False if its name was already taken."""
        name = record.key
        if name not in self.primary:
            self.primary[name] = record
            return True
        counter = self._collisions.get(name, 0) + 1
        self._collisions[name] = counter
        duplicate_name = f"{name}_{counter}"
        self.duplicates[duplicate_name] = record.renamed(duplicate_name)
        return False

    def values(self) -> List[RecordT]:
        return list(self.primary.values())


class Registry:
    """Operations and fragments collected during a single pass."""

    def __init__(self):
        self._operations: _KeyedCollection[OperationRecord] = _KeyedCollection()
        self._fragments: _KeyedCollection[FragmentRecord] = _KeyedCollection()

    def insert_operation(self, record: OperationRecord) -> bool:
        return self._operations.insert(record)

    def insert_fragment(self, record: FragmentRecord) -> bool:
        return self._fragments.insert(record)

    @property
    def operations(self) -> Dict[str, OperationRecord]:
        return dict(self._operations.primary)

    @property
    def fragments(self) -> Dict[str, FragmentRecord]:
        return dict(self._fragments.primary)

    @property
    def duplicate_operations(self) -> Dict[str, OperationRecord]:
        return dict(self._operations.duplicates)

    @property
    def duplicate_fragments(self) -> Dict[str, FragmentRecord]:
        return dict(self._fragments.duplicates)

    def snapshot(self) -> Tuple[List[OperationRecord], List[FragmentRecord]]:
        """Primary records in insertion order; duplicates are never emitted."""
        return self._operations.values(), self._fragments.values()
