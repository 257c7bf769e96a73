"""Self-role catalog, question provider, selection message and verification flow."""

from .catalog import ROLE_CATALOG, RoleConfig, find_role, missing_roles
from .questions import QuestionData, generate_question
from .selection import RoleSelectionService
from .verification import VerificationFlow, VerificationState

__all__ = [
    "ROLE_CATALOG",
    "RoleConfig",
    "find_role",
    "missing_roles",
    "QuestionData",
    "generate_question",
    "RoleSelectionService",
    "VerificationFlow",
    "VerificationState",
]
