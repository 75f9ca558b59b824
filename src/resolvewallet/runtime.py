"""
Per-invocation wiring: settings -> descriptor -> gateway/tracker/dispatcher.

Nothing here is global; the CLI builds one ``CliState`` per process and
every collaborator receives its configuration through its constructor.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

import httpx
from eth_account.signers.local import LocalAccount

from .chain.abi import load_descriptor
from .chain.gateway import ContractGateway
from .chain.rpc import RpcClient
from .chain.tracker import TransactionTracker
from .config import Settings, load_settings
from .dispatcher import CommandDispatcher
from .keys import load_signer


@dataclass
class CliState:
    """Options collected by the CLI group, resolved lazily by subcommands."""

    env_file: Optional[Path] = None
    rpc_url: Optional[str] = None
    abi_path: Optional[Path] = None
    transport: Optional[httpx.BaseTransport] = None
    poll_interval: float = 2.0
    _settings: Optional[Settings] = field(default=None, repr=False)

    def settings(self) -> Settings:
        if self._settings is None:
            settings = load_settings(self.env_file)
            overrides = {}
            if self.rpc_url:
                overrides["rpc_url"] = self.rpc_url
            if self.abi_path:
                overrides["abi_path"] = self.abi_path
            if overrides:
                settings = replace(settings, **overrides)
            self._settings = settings
        return self._settings

    def dispatcher(self, confirm_timeout: Optional[float] = None) -> CommandDispatcher:
        """
        Build a dispatcher without a signer.

        Write commands attach one with ``signer()`` once their argument
        has been validated.
        """
        settings = self.settings()

        descriptor = load_descriptor(settings.abi_path, settings.contract)
        rpc = RpcClient(settings.rpc_url, transport=self.transport)
        gateway = ContractGateway(
            descriptor,
            rpc,
            chain_id=settings.chain_id,
            gas_limit=settings.gas_limit,
        )
        tracker = TransactionTracker(rpc, poll_interval=self.poll_interval)
        return CommandDispatcher(
            gateway,
            tracker=tracker,
            signer=None,
            confirm_timeout=confirm_timeout or settings.confirm_timeout,
        )

    def signer(self) -> LocalAccount:
        return load_signer(self.settings().private_key)
