"""Concurrency primitives."""

from .rwlock import ReadWriteLock

__all__ = ["ReadWriteLock"]
