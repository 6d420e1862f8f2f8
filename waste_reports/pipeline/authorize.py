"""Entry guard: only signed-in administrators may run reports."""

from __future__ import annotations

import logging
from typing import Callable

from waste_reports.common.errors import AccountNotFound, AuthorizationError, Forbidden, Unauthenticated
from waste_reports.common.logging import default_logger, log_event
from waste_reports.common.models import AccountRecord, AuthorizedUser, Session

AccountLookup = Callable[[str], "AccountRecord | None"]


class AuthorizationGate:
    def __init__(
        self,
        account_lookup: AccountLookup,
        access_config: dict,
        logger: logging.Logger | None = None,
    ) -> None:
        self.account_lookup = account_lookup
        self.role_field = access_config["role_field"]
        self.admin_role = access_config["admin_role"]
        self.logger = logger or default_logger()

    def _deny(self, exc: AuthorizationError, uid: str | None) -> AuthorizationError:
        log_event(
            self.logger,
            f"report access denied for {uid or 'anonymous'}",
            level=logging.WARNING,
            stage="authorize",
            event="AUTHORIZE_DENIED",
            status="error",
            error_code=exc.error_code,
        )
        return exc

    def authorize(self, session: Session | None) -> AuthorizedUser:
        """Return the caller when their account holds the administrative role.

        Raises Unauthenticated without a session, AccountNotFound when the
        account record is missing and Forbidden for any other role.
        StoreUnavailable from the lookup propagates unchanged.
        """
        if session is None or not session.uid:
            raise self._deny(Unauthenticated("No active session"), None)

        account = self.account_lookup(session.uid)
        if account is None:
            raise self._deny(AccountNotFound(f"No account record for {session.uid}"), session.uid)
        if account.get(self.role_field) != self.admin_role:
            raise self._deny(Forbidden(f"Account {session.uid} lacks the {self.admin_role} role"), session.uid)

        log_event(self.logger, "report access granted", stage="authorize", event="AUTHORIZE_OK", status="ok")
        return AuthorizedUser(uid=session.uid, account=account)
