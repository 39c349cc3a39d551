"""Business logic services for the Pulse Stage application."""

from .post_service import PostService
from .previews import PreviewResolver
from .reputation import ReputationDecayWorker
from .tips import TipLedger
from .votes import VoteLedger

__all__ = [
    "PostService",
    "PreviewResolver",
    "ReputationDecayWorker",
    "TipLedger",
    "VoteLedger",
]
