"""canister-sdk public surface."""

from canister_sdk.errors import (
    AgentUnavailableError,
    CanisterSDKError,
    IdentityError,
    UnsupportedModeError,
)
from canister_sdk.hints import HintKind, classify_error_text, render_hints
from canister_sdk.identity import PemIdentity, load_pem_identity
from canister_sdk.management import ICManagementCanister, ManagementCanisterProtocol
from canister_sdk.manager import ALT_LOCAL_HOST, LOCAL_HOST, MAINNET_HOST, CanisterManager
from canister_sdk.principal import (
    ANONYMOUS_PRINCIPAL,
    MANAGEMENT_CANISTER_ID,
    principal_to_text,
    self_authenticating_principal,
)
from canister_sdk.transport import HttpTransport
from canister_sdk.types import DEFAULT_CYCLES, CanisterSettings, InstallMode

__all__ = [
    "CanisterSDKError",
    "UnsupportedModeError",
    "AgentUnavailableError",
    "IdentityError",
    "CanisterManager",
    "LOCAL_HOST",
    "ALT_LOCAL_HOST",
    "MAINNET_HOST",
    "ManagementCanisterProtocol",
    "ICManagementCanister",
    "HttpTransport",
    "DEFAULT_CYCLES",
    "CanisterSettings",
    "InstallMode",
    "HintKind",
    "classify_error_text",
    "render_hints",
    "PemIdentity",
    "load_pem_identity",
    "MANAGEMENT_CANISTER_ID",
    "ANONYMOUS_PRINCIPAL",
    "principal_to_text",
    "self_authenticating_principal",
]
