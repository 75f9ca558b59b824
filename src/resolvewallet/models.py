from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


@dataclass(frozen=True)
class Address:
    """A 20-byte account identifier in canonical ``0x`` + lowercase hex form.

    Build these through ``codec.validate_address``; the constructor only
    checks the canonical shape.
    """

    value: str

    def __post_init__(self) -> None:
        body = self.value[2:]
        if (
            not self.value.startswith("0x")
            or len(body) != 40
            or body != body.lower()
            or any(c not in "0123456789abcdef" for c in body)
        ):
            raise ValueError(f"Address must be canonical 0x-lowercase hex: {self.value!r}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class WideUint:
    """Arbitrary-precision non-negative integer for amounts and ids."""

    value: int

    def __post_init__(self) -> None:
        # bool is an int subclass; True must not become 1 silently
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"WideUint requires an int, got {type(self.value).__name__}")
        if self.value < 0:
            raise ValueError(f"WideUint must be non-negative: {self.value}")

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


CallArg = Union[Address, WideUint]
ResultValue = Union[Address, WideUint, bool]


@dataclass(frozen=True)
class CallRequest:
    target: Address
    function_name: str
    args: tuple[CallArg, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.target, Address):
            raise TypeError("CallRequest target must be an Address")
        if not self.function_name:
            raise ValueError("CallRequest requires a function name")
        object.__setattr__(self, "args", tuple(self.args))
        for index, arg in enumerate(self.args):
            if not isinstance(arg, (Address, WideUint)):
                raise TypeError(
                    f"Argument {index} of {self.function_name} must be Address or "
                    f"WideUint, got {type(arg).__name__}"
                )


class TxStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass(frozen=True)
class ReadResult:
    function_name: str
    values: tuple[ResultValue, ...] = ()


@dataclass(frozen=True)
class WriteResult:
    transaction_id: str
    status: TxStatus = TxStatus.PENDING
    confirmed_block: Optional[WideUint] = None


@dataclass(frozen=True)
class AbiFunction:
    name: str
    inputs: tuple[str, ...]
    outputs: tuple[str, ...]
    state_mutability: str

    @property
    def read_only(self) -> bool:
        return self.state_mutability in ("view", "pure")

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.inputs)})"


@dataclass(frozen=True)
class ContractDescriptor:
    """Contract address plus the callable functions declared by its ABI."""

    address: Address
    functions: dict[str, tuple[AbiFunction, ...]] = field(default_factory=dict)

    def lookup(self, name: str) -> tuple[AbiFunction, ...]:
        return self.functions.get(name, ())
