from .errors import (
    ResumeAIError,
    ConfigurationError,
    ValidationError,
    UpstreamFormatError,
    EmptyResponseError,
    IncompleteDocumentError,
    AuthFailureError,
    RateLimitedError,
    TransportFailureError,
    UnknownError,
    StageOrderError,
    StageInProgressError,
)
from .llm_gateway import (
    ModelGateway,
    get_model_gateway
)
from .resume_ai import ResumeAIService
from .document_store import (
    DocumentStore,
    InMemoryDocumentStore
)
from .revision_session import (
    RevisionOrchestrator,
    RevisionSession,
    RevisionStage,
    SnapshotManager,
)
from .resume_client import ResumeApiClient

__all__ = [
    # Errors
    "ResumeAIError",
    "ConfigurationError",
    "ValidationError",
    "UpstreamFormatError",
    "EmptyResponseError",
    "IncompleteDocumentError",
    "AuthFailureError",
    "RateLimitedError",
    "TransportFailureError",
    "UnknownError",
    "StageOrderError",
    "StageInProgressError",
    # Gemini
    "ModelGateway",
    "get_model_gateway",
    "ResumeAIService",
    # Revision session
    "DocumentStore",
    "InMemoryDocumentStore",
    "RevisionOrchestrator",
    "RevisionSession",
    "RevisionStage",
    "SnapshotManager",
    "ResumeApiClient",
]
