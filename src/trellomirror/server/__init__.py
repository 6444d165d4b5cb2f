"""HTTP transport."""

from trellomirror.server.app import WEBHOOK_PATH, create_app
from trellomirror.server.signature import SIGNATURE_HEADER, compute_signature, verify_signature

__all__ = ["SIGNATURE_HEADER", "WEBHOOK_PATH", "compute_signature", "create_app", "verify_signature"]
