# Generator package

# Makes generate/ importable and exposes key interfaces.

from .classifier import classify
from .normalize import normalize
from .operations import GenerationOperation, build_operations
from .types import Err, ErrorKind, GenerationError, Ok, RawGenerationResult, SamplingConfig
from .clients.canned_client import CannedClient

__all__ = [
    "classify",
    "normalize",
    "GenerationOperation",
    "build_operations",
    "Err",
    "ErrorKind",
    "GenerationError",
    "Ok",
    "RawGenerationResult",
    "SamplingConfig",
    "CannedClient",
]
