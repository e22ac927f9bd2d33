"""Canister lifecycle operations against a local replica or mainnet."""

from __future__ import annotations

import logging
from typing import Iterable

from canister_sdk.errors import UnsupportedModeError
from canister_sdk.management import ICManagementCanister, ManagementCanisterProtocol
from canister_sdk.transport import HttpTransport
from canister_sdk.types import DEFAULT_CYCLES, CanisterSettings, InstallMode

LOCAL_HOST = "http://127.0.0.1:8080"
ALT_LOCAL_HOST = "http://127.0.0.1:4943"
MAINNET_HOST = "https://ic0.app"

logger = logging.getLogger(__name__)


class CanisterManager:
    """One method per management canister operation.

    Every operation logs its intent, makes exactly one call through the
    management interface and logs the outcome. Failures are logged and
    re-raised unchanged.
    """

    def __init__(
        self,
        use_local: bool = True,
        *,
        local_host: str = LOCAL_HOST,
        mainnet_host: str = MAINNET_HOST,
        identity=None,
        transport: HttpTransport | None = None,
        management: ManagementCanisterProtocol | None = None,
        return_fallback_result: bool = False,
    ) -> None:
        self.is_local = use_local
        self.host = local_host if use_local else mainnet_host
        self.return_fallback_result = return_fallback_result
        self.transport = transport if transport is not None else HttpTransport(host=self.host)

        if use_local:
            try:
                self.transport.fetch_root_key()
            except Exception as exc:
                logger.warning(
                    "Unable to fetch root key. Check to ensure that your local replica "
                    "is running: %s",
                    exc,
                )

        self._management = management
        self._identity = identity

    @property
    def management(self) -> ManagementCanisterProtocol:
        if self._management is None:
            self._management = ICManagementCanister.create(
                transport=self.transport,
                identity=self._identity,
            )
        return self._management

    def create_canister(self, controllers: Iterable[str] | None = None) -> str:
        settings = CanisterSettings(controllers=tuple(controllers or ()))
        try:
            logger.info("Creating new canister...")
            canister_id = self.management.create_canister(settings=settings)
        except Exception as exc:
            logger.error("Error creating canister: %s", exc)
            raise
        logger.info("Canister created successfully: %s", canister_id)
        return canister_id

    def provisional_create_canister_with_cycles(self, cycles: int | None = None) -> str:
        logger.info("Creating canister with provisional function...")
        if not self.is_local:
            raise UnsupportedModeError("Provisional functions only work on local replica")

        amount = cycles or DEFAULT_CYCLES
        logger.info("Using cycles: %d", amount)
        try:
            canister_id = self.management.provisional_create_canister_with_cycles(amount=amount)
        except Exception as exc:
            logger.error("Error creating canister with provisional function: %s", exc)
            logger.info("Trying fallback method...")
            try:
                fallback_id = self.create_canister()
            except Exception as fallback_exc:
                logger.error("Fallback also failed: %s", fallback_exc)
                raise exc from None
            if self.return_fallback_result:
                return fallback_id
            # Fallback success is discarded; the provisional failure still surfaces.
            raise exc

        logger.info("Canister created successfully with provisional function: %s", canister_id)
        return canister_id

    def _install(
        self, mode: InstallMode, canister_id: str, wasm_module: bytes, arg: bytes | None
    ) -> None:
        self.management.install_code(
            mode=mode,
            canister_id=canister_id,
            wasm_module=wasm_module,
            arg=b"" if arg is None else arg,
        )

    def install_code(self, canister_id: str, wasm_module: bytes, arg: bytes | None = None) -> None:
        try:
            logger.info("Installing code to canister: %s", canister_id)
            self._install(InstallMode.INSTALL, canister_id, wasm_module, arg)
        except Exception as exc:
            logger.error("Error installing code: %s", exc)
            raise
        logger.info("Code installed successfully on %s", canister_id)

    def upgrade_code(self, canister_id: str, wasm_module: bytes, arg: bytes | None = None) -> None:
        try:
            logger.info("Upgrading code on canister: %s", canister_id)
            self._install(InstallMode.UPGRADE, canister_id, wasm_module, arg)
        except Exception as exc:
            logger.error("Error upgrading code: %s", exc)
            raise
        logger.info("Code upgraded successfully on %s", canister_id)

    def start_canister(self, canister_id: str) -> None:
        try:
            logger.info("Starting canister: %s", canister_id)
            self.management.start_canister(canister_id)
        except Exception as exc:
            logger.error("Error starting canister: %s", exc)
            raise
        logger.info("Canister started successfully: %s", canister_id)

    def stop_canister(self, canister_id: str) -> None:
        try:
            logger.info("Stopping canister: %s", canister_id)
            self.management.stop_canister(canister_id)
        except Exception as exc:
            logger.error("Error stopping canister: %s", exc)
            raise
        logger.info("Canister stopped successfully: %s", canister_id)

    def get_canister_status(self, canister_id: str) -> dict:
        try:
            logger.info("Getting canister status: %s", canister_id)
            status = self.management.canister_status(canister_id)
        except Exception as exc:
            logger.error("Error getting canister status: %s", exc)
            raise
        logger.info("Canister status for %s: %s", canister_id, status)
        return status

    def delete_canister(self, canister_id: str) -> None:
        try:
            logger.info("Deleting canister: %s", canister_id)
            self.management.delete_canister(canister_id)
        except Exception as exc:
            logger.error("Error deleting canister: %s", exc)
            raise
        logger.info("Canister deleted successfully: %s", canister_id)


__all__ = ["CanisterManager", "LOCAL_HOST", "ALT_LOCAL_HOST", "MAINNET_HOST"]
