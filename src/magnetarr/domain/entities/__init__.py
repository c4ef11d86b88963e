from .stremio import (
    Found,
    LabeledLink,
    LinkLabels,
    Metadata,
    NotFound,
    RequestIdentity,
    ResolutionOutcome,
    StageResult,
    StreamRecord,
    StremioContentType,
    StremioStreamRequest,
)

__all__ = [
    "Found",
    "LabeledLink",
    "LinkLabels",
    "Metadata",
    "NotFound",
    "RequestIdentity",
    "ResolutionOutcome",
    "StageResult",
    "StreamRecord",
    "StremioContentType",
    "StremioStreamRequest",
]
