from .store import Memory, MemoryType

__all__ = ["Memory", "MemoryType"]
