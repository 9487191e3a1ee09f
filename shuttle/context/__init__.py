from .model_context import ModelContext

__all__ = ["ModelContext"]
