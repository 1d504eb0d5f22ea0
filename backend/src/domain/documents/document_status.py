"""DocumentStatus state machine for the verification lifecycle

State flow:
    (new) → PENDING → VERIFIED or REJECTED
    VERIFIED / REJECTED → PENDING only when the owner replaces the file
"""

from enum import Enum
from typing import Optional, Dict, List


class DocumentStatus(str, Enum):
    """Document verification status enum"""
    PENDING = "pending"      # Awaiting review (set on every create and replace)
    VERIFIED = "verified"    # Accepted by a reviewer
    REJECTED = "rejected"    # Refused by a reviewer, see feedback


# Statuses only an external reviewer may set
REVIEW_STATUSES = (DocumentStatus.VERIFIED, DocumentStatus.REJECTED)

# State transition rules
ALLOWED_TRANSITIONS: Dict[Optional[DocumentStatus], List[DocumentStatus]] = {
    None: [DocumentStatus.PENDING],
    DocumentStatus.PENDING: [DocumentStatus.VERIFIED, DocumentStatus.REJECTED],
    DocumentStatus.VERIFIED: [DocumentStatus.PENDING],  # Replace by owner
    DocumentStatus.REJECTED: [DocumentStatus.PENDING],  # Replace by owner
}


def can_transition(from_status: Optional[DocumentStatus], to_status: DocumentStatus) -> bool:
    """Validate if status transition is allowed

    Args:
        from_status: Current status (None for new documents)
        to_status: Target status

    Returns:
        True if transition is allowed, False otherwise

    Example:
        >>> can_transition(DocumentStatus.PENDING, DocumentStatus.VERIFIED)
        True
        >>> can_transition(DocumentStatus.VERIFIED, DocumentStatus.REJECTED)
        False
    """
    allowed = ALLOWED_TRANSITIONS.get(from_status, [])
    return to_status in allowed


def get_allowed_transitions(from_status: Optional[DocumentStatus]) -> List[DocumentStatus]:
    """Get list of allowed transitions from current status

    Example:
        >>> get_allowed_transitions(DocumentStatus.PENDING)
        [DocumentStatus.VERIFIED, DocumentStatus.REJECTED]
    """
    return ALLOWED_TRANSITIONS.get(from_status, [])
