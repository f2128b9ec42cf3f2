# -*- coding: utf-8 -*-
from dataclasses import dataclass

from . import codec
from .logger import Logger


@dataclass(frozen=True)
class DependencyRecord:
    filename: str


class LoadRegistry:
    """Ordered, duplicate-free list of dependencies loaded in this session.

    The registry reflects loads that already happened; it does not prevent
    them. Callers check contains() before doing anything with side effects.
    """
    def __init__(self, logger=None):
        self.logger = logger or Logger(False)
        self._records = []
        self._names = set()

    def contains(self, filename):
        return filename in self._names

    __contains__ = contains

    def __len__(self):
        return len(self._records)

    def __iter__(self):
        return self.enumerate()

    def insert(self, filename):
        """Append filename; returns False if it is already present"""
        if filename == codec.SENTINEL:
            raise ValueError(f"'{codec.SENTINEL}' marks the primary binary and cannot be registered")
        if self.contains(filename):
            return False
        try:
            record = DependencyRecord(filename)
            self._records.append(record)
        except MemoryError:
            self.logger.log(f"Failed to allocate memory for registry entry '{filename}'", "ERROR")
            return False
        self._names.add(filename)
        return True

    def enumerate(self):
        """Yield filenames in insertion order"""
        for record in self._records:
            yield record.filename

    def reconstruct_from(self, entries):
        """Restore records from (segment_comment, is_sentinel) pairs.

        Returns the number of filenames that were added.
        """
        restored = 0
        for text, is_sentinel in entries:
            if is_sentinel:
                continue
            decoded = codec.decode(text)
            if decoded is codec.NOT_OURS or decoded is codec.ORIGINAL:
                continue
            if self.insert(decoded):
                restored += 1
        return restored

    def clear(self):
        self._records.clear()
        self._names.clear()
