"""Model providers.

Concrete remote-API adapters live outside this package; subclass
:class:`BaseModelProvider` and implement ``_do_complete``/``_do_stream``.
"""

from .base import BaseModelProvider, CircuitBreaker, CircuitBreakerConfig, RetryConfig
from .scripted import ScriptedProvider

__all__ = [
    "BaseModelProvider",
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "RetryConfig",
    "ScriptedProvider",
]
