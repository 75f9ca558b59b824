__all__ = [
    # Models
    "Address",
    "WideUint",
    "CallRequest",
    "ReadResult",
    "WriteResult",
    "TxStatus",
    "AbiFunction",
    "ContractDescriptor",
    # Validation / display
    "validate_address",
    "to_checksum_address",
    "to_wide",
    "to_display",
    # Chain
    "RpcClient",
    "RpcError",
    "ContractGateway",
    "TransactionTracker",
    "load_descriptor",
    # Commands
    "CommandDispatcher",
    "CommandOutcome",
    # Configuration
    "Settings",
    "load_settings",
    "load_signer",
    # Errors
    "ResolveWalletError",
    "ValidationError",
    "InvalidAddressError",
    "InvalidNumberError",
    "MissingArgumentError",
    "UnknownCommandError",
    "ConfigurationError",
    "DescriptorError",
    "SigningError",
    "ContractCallError",
    "TransactionRejectedError",
    "ConfirmationTimeoutError",
    "format_error",
]

from .models import (
    AbiFunction,
    Address,
    CallRequest,
    ContractDescriptor,
    ReadResult,
    TxStatus,
    WideUint,
    WriteResult,
)
from .codec import to_checksum_address, to_display, to_wide, validate_address
from .errors import (
    ConfigurationError,
    ConfirmationTimeoutError,
    ContractCallError,
    DescriptorError,
    InvalidAddressError,
    InvalidNumberError,
    MissingArgumentError,
    ResolveWalletError,
    SigningError,
    TransactionRejectedError,
    UnknownCommandError,
    ValidationError,
    format_error,
)
from .chain.abi import load_descriptor
from .chain.gateway import ContractGateway
from .chain.rpc import RpcClient, RpcError
from .chain.tracker import TransactionTracker
from .config import Settings, load_settings
from .dispatcher import CommandDispatcher, CommandOutcome
from .keys import load_signer
