from .client import ProcessorClient, ProcessorError

__all__ = ["ProcessorClient", "ProcessorError"]
