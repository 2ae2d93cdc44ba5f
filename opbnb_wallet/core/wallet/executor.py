"""
Transfer executor for native-currency sends.

Drives one transfer through its lifecycle:
- Validation (local, never reaches the wallet)
- Wallet confirmation
- Submission (hash available immediately)
- On-chain confirmation
"""

from __future__ import annotations

import logging
from typing import Optional

from ...providers.errors import ProviderRpcError
from .errors import (
    SubmissionError,
    SubmissionErrorKind,
    ValidationError,
    WalletError,
)
from .models import TransferRequest, TransferState, TransferStatus
from .session import WalletSession
from .validator import validate_transfer

logger = logging.getLogger(__name__)

MSG_INITIATING = "Initiating transaction..."
MSG_CONFIRM_IN_WALLET = "Please confirm the transaction in your wallet..."
MSG_SUBMITTED = "Transaction submitted! Waiting for confirmation..."
MSG_CONFIRMED = "Transaction confirmed!"
MSG_FAILED = "Transaction failed!"
MSG_NOT_CONNECTED = "Please connect your wallet"


class TransferExecutor:
    """
    Sends native currency from the session's active account.

    Status lives in ``session.state.transfer`` so observers of the session
    see every transition. One executor runs one transfer at a time.
    """

    def __init__(self, session: WalletSession):
        self.session = session

    @property
    def state(self) -> TransferState:
        return self.session.state.transfer

    @property
    def can_submit(self) -> bool:
        return self.state.can_submit

    def _set(self, transfer: TransferState, **changes) -> TransferState:
        self.session.update_state(transfer=transfer, **changes)
        return transfer

    async def submit(self, request: Optional[TransferRequest] = None) -> TransferState:
        """
        Run a transfer to completion and return its final state.

        Uses the session's form inputs when *request* is omitted. A
        disconnected session and validation failures return an IDLE state
        carrying the error; wallet and chain failures return FAILED. None of
        these raise.

        Raises:
            SubmissionError: IN_PROGRESS when a transfer is still running
        """
        if not self.can_submit:
            raise SubmissionError(
                "A transaction is already in progress",
                SubmissionErrorKind.IN_PROGRESS,
            )

        request = request or self.session.state.form
        self._set(TransferState(), form=request)

        if not self.session.connected:
            error = SubmissionError(MSG_NOT_CONNECTED, SubmissionErrorKind.NOT_CONNECTED)
            logger.info("Transfer refused: wallet not connected")
            return self._set(TransferState(status=TransferStatus.IDLE, error=error), error=error.message)

        # Validating; the error slot is cleared before the new outcome lands
        self._set(TransferState(status=TransferStatus.VALIDATING), error=None)
        try:
            amount = validate_transfer(
                request.recipient,
                request.amount_smallest_unit,
                self.session.state.balance,
                self.session.chain.native_currency.decimals,
            )
        except ValidationError as e:
            logger.info("Transfer rejected: %s", e.kind.value)
            return self._set(TransferState(status=TransferStatus.IDLE, error=e), error=e.message)

        self._set(TransferState(
            status=TransferStatus.AWAITING_WALLET_CONFIRMATION,
            message=MSG_INITIATING,
        ))

        tx_hash: Optional[str] = None
        try:
            signer = self.session.signer()
            tx = {"to": request.recipient, "value": amount}

            self._set(TransferState(
                status=TransferStatus.AWAITING_WALLET_CONFIRMATION,
                message=MSG_CONFIRM_IN_WALLET,
            ))
            pending = await signer.send_transaction(tx)
            tx_hash = pending.hash

            self._set(TransferState(
                status=TransferStatus.SUBMITTED,
                message=MSG_SUBMITTED,
                tx_hash=tx_hash,
            ))
            logger.info(f"Transfer submitted: {tx_hash} ({amount} wei to {request.recipient})")

            await pending.wait()
        except Exception as exc:
            error = _as_submission_error(exc, tx_hash)
            logger.error(f"Transaction error: {exc}")
            return self._set(
                TransferState(
                    status=TransferStatus.FAILED,
                    message=MSG_FAILED,
                    tx_hash=tx_hash,
                    reason=error.message,
                    error=error,
                ),
                error=error.message,
            )

        confirmed = self._set(TransferState(
            status=TransferStatus.CONFIRMED,
            message=MSG_CONFIRMED,
            tx_hash=tx_hash,
        ))
        await self.session.refresh_balance()
        self.session.update_state(form=TransferRequest())
        return confirmed


def _as_submission_error(exc: BaseException, tx_hash: Optional[str]) -> SubmissionError:
    """Map any failure to a SubmissionError; only wallet and provider messages reach the user."""
    if isinstance(exc, SubmissionError):
        if exc.tx_hash is None:
            exc.tx_hash = tx_hash
        return exc
    if isinstance(exc, ProviderRpcError):
        kind = SubmissionErrorKind.USER_REJECTED if exc.is_user_rejection else SubmissionErrorKind.NODE_ERROR
        return SubmissionError(exc.message or "Transaction failed", kind, cause=exc, tx_hash=tx_hash)
    if isinstance(exc, WalletError):
        return SubmissionError(exc.message, SubmissionErrorKind.NODE_ERROR, cause=exc, tx_hash=tx_hash)
    logger.error("Unexpected transfer failure", exc_info=exc)
    return SubmissionError("Transaction failed", SubmissionErrorKind.NODE_ERROR, cause=exc, tx_hash=tx_hash)
