# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Image File Directory model

A Directory is an ordered list of (tag, FieldValue) pairs, fully
dereferenced and independent of the file it was read from.

Copyright 2025 DNAi inc.
"""

import logging
from typing import Any, BinaryIO, Iterable, Iterator, List, Optional, Tuple, Type

from tiffy.byte_order import ByteOrder
from tiffy.exceptions import InsufficientDataError, MissingTagError, WrongDataTypeError
from tiffy.ifd_field import (
    FieldValue,
    Long,
    Short,
    Unrecognized,
    decode_field,
    encode_field,
)
from tiffy.raw_ifd import RawDirectory

logger = logging.getLogger(__name__)


class Directory:
    """
    High-level representation of an Image File Directory.

    Tag ids need not be unique; lookups return the first match. Entries
    keep the order they were read or added in, and are sorted by tag
    only when encoded.
    """

    def __init__(self, entries: Optional[Iterable[Tuple[int, FieldValue]]] = None):
        """
        Initialize a directory.

        Args:
            entries: Optional (tag, value) pairs
        """
        self.entries: List[Tuple[int, FieldValue]] = []
        for tag, value in entries or ():
            self.add(tag, value)

    @staticmethod
    def _check(tag: int, value: FieldValue) -> None:
        if not 0 <= tag <= 0xFFFF:
            raise ValueError(f"Tag id out of range: {tag}")
        if not isinstance(value, FieldValue):
            raise TypeError(f"Expected a FieldValue for tag {tag}, got {type(value).__name__}")

    def add(self, tag: int, value: FieldValue) -> None:
        """Append an entry, even if `tag` is already present."""
        self._check(tag, value)
        self.entries.append((tag, value))

    def set(self, tag: int, value: FieldValue) -> None:
        """Replace the first entry for `tag`, or append one."""
        self._check(tag, value)
        for index, (existing, _) in enumerate(self.entries):
            if existing == tag:
                self.entries[index] = (tag, value)
                return
        self.entries.append((tag, value))

    def get(self, tag: int) -> Optional[FieldValue]:
        """
        Return the value of the first entry for `tag`, or None.

        The returned object is the stored value itself, so mutating it
        changes the directory.
        """
        for existing, value in self.entries:
            if existing == tag:
                return value
        return None

    def remove(self, tag: int) -> bool:
        """Remove every entry for `tag`. Returns True if any was removed."""
        kept = [(t, v) for t, v in self.entries if t != tag]
        removed = len(kept) != len(self.entries)
        self.entries = kept
        return removed

    def tags(self) -> List[int]:
        return [tag for tag, _ in self.entries]

    def without_unrecognized(self) -> 'Directory':
        """Return a copy without Unrecognized entries."""
        return Directory(
            (tag, value) for tag, value in self.entries
            if not isinstance(value, Unrecognized)
        )

    def get_values(self, tag: int, kind: Type[FieldValue]) -> Any:
        """
        Return the value list of `tag`, requiring it to be of `kind`.

        Args:
            tag: Tag id
            kind: FieldValue variant, e.g. Long or Ascii

        Returns:
            The variant's `values` (bytes for Byte/Undefined, a list otherwise)

        Raises:
            MissingTagError: If the tag is absent
            WrongDataTypeError: If the tag holds another variant
        """
        value = self.get(tag)
        if value is None:
            raise MissingTagError(tag)
        if type(value) is not kind:
            raise WrongDataTypeError(tag, kind.__name__, type(value).__name__)
        return value.values

    def get_value(self, tag: int, kind: Type[FieldValue]) -> Any:
        """
        Return the first unit of `tag`.

        Raises:
            InsufficientDataError: If the value list is empty
        """
        values = self.get_values(tag, kind)
        if len(values) == 0:
            raise InsufficientDataError(tag)
        return values[0]

    def get_ints(self, tag: int) -> List[int]:
        """
        Return the integers of a SHORT or LONG tag.

        Offsets and counts such as StripOffsets may be stored as either.
        """
        value = self.get(tag)
        if value is None:
            raise MissingTagError(tag)
        if not isinstance(value, (Short, Long)):
            raise WrongDataTypeError(tag, "Short or Long", type(value).__name__)
        return list(value.values)

    @classmethod
    def decode_from(cls, stream: BinaryIO, order: ByteOrder, raw: RawDirectory) -> 'Directory':
        """
        Read the fields of `raw` into memory, dereferencing offsets through `stream`.

        Args:
            stream: Byte source the raw directory came from
            order: Byte order of the file
            raw: Raw directory record

        Returns:
            A fully materialized directory
        """
        return cls((entry.tag, decode_field(stream, order, entry)) for entry in raw.entries)

    def encode_to(self, stream: BinaryIO, order: ByteOrder) -> RawDirectory:
        """
        Encode the fields, appending out-of-line values to `stream`.

        Unrecognized entries are dropped and the rest are emitted in
        ascending tag order.

        Returns:
            The raw directory describing the encoded fields
        """
        writable = []
        for tag, value in self.entries:
            if isinstance(value, Unrecognized):
                logger.warning(
                    "Dropping tag %d with unrecognized type %d", tag, value.type_code
                )
                continue
            writable.append((tag, value))
        writable.sort(key=lambda entry: entry[0])
        return RawDirectory(
            entries=[encode_field(stream, order, tag, value) for tag, value in writable]
        )

    def _sorted_entries(self) -> List[Tuple[int, FieldValue]]:
        return sorted(self.entries, key=lambda entry: entry[0])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Directory):
            return NotImplemented
        return self._sorted_entries() == other._sorted_entries()

    def __iter__(self) -> Iterator[Tuple[int, FieldValue]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, tag: object) -> bool:
        return any(existing == tag for existing, _ in self.entries)

    def __repr__(self) -> str:
        return f"Directory({self.entries!r})"
