"""Where the instructions of a transaction come from.

An operation either hands over a raw, ordered instruction list that still
needs a fee payer and a blockhash, or a transaction the liquidity SDK has
already built (and possibly co-signed). The assembler dispatches on the
variant instead of inspecting runtime types of SDK results.
"""

from dataclasses import dataclass
from typing import Sequence, Union

from solders.instruction import Instruction
from solders.transaction import Transaction, VersionedTransaction


@dataclass(frozen=True)
class RawInstructions:
    """Ordered instructions to be compiled into a fresh message."""

    instructions: Sequence[Instruction]

    def __post_init__(self):
        object.__setattr__(self, "instructions", tuple(self.instructions))

    def __len__(self) -> int:
        return len(self.instructions)


@dataclass(frozen=True)
class PrebuiltTransaction:
    """A transaction built upstream; reused verbatim."""

    transaction: Union[Transaction, VersionedTransaction]


InstructionSource = Union[RawInstructions, PrebuiltTransaction]
