# ==============================================================================
# Auth Context
# ==============================================================================
"""
Explicit authentication context.

Holds the signed-in user and their approval status.  Components receive the
context at composition time and query it on every call instead of caching
the result, so a sign-out or a revoked approval takes effect immediately.
"""

import logging

from outreach.core.audit_emitter import AuditEventEmitter
from outreach.core.models import AuthUser, UserStatus

logger = logging.getLogger(__name__)


class AuthContext:
    """Current user and approval state."""

    def __init__(self, audit: AuditEventEmitter | None = None):
        """
        Initialize a signed-out context.

        Args:
            audit: Receives sign-in and approval-revoked events
        """
        self._audit = audit
        self._user: AuthUser | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def user(self) -> AuthUser | None:
        return self._user

    @property
    def user_id(self) -> str | None:
        return self._user.id if self._user else None

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def is_approved(self) -> bool:
        return self._user is not None and self._user.is_approved

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def sign_in(self, user: AuthUser) -> None:
        """Set the signed-in user and record a successful auth attempt."""
        self._user = user
        logger.info("User %s signed in (status=%s)", user.id, user.status.value)
        if self._audit is not None:
            self._audit.log_auth_attempt(True, email=user.email)

    def record_failed_sign_in(self, email: str | None, error: str | None = None) -> None:
        """Record a rejected sign-in attempt."""
        logger.info("Sign-in failed for %s", email)
        if self._audit is not None:
            self._audit.log_auth_attempt(False, email=email, error=error)

    def sign_out(self) -> None:
        """Clear the signed-in user. Signing out twice is a no-op."""
        if self._user is None:
            return
        logger.info("User %s signed out", self._user.id)
        self._user = None

    def update_status(self, status: UserStatus) -> None:
        """
        Apply an approval status change for the signed-in user.

        A user whose approval is revoked is signed out and the revocation is
        audited as suspicious activity.
        """
        if self._user is None:
            return

        old_status = self._user.status
        was_approved = self._user.is_approved
        self._user = self._user.model_copy(update={"status": status})

        if was_approved and not self._user.is_approved:
            logger.warning("User approval status revoked, signing out")
            if self._audit is not None:
                self._audit.log_suspicious_activity(
                    "approval_revoked",
                    {"old_status": old_status.value, "new_status": status.value},
                )
            self.sign_out()
