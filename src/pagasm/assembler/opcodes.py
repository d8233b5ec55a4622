"""
Instruction Set Definition
==========================

This module defines the instruction set of the target machine: a paged,
accumulator-based computer with 16-bit words. Memory is divided into
pages of 64 words; an instruction word carries only a 6-bit operand, so
memory operands must live either on page zero or on the same page as
the instruction that uses them.

Instruction Word Layout
-----------------------
```
 11 10  9  8 | 7  6 | 5  4  3  2  1  0
 instruction | mode |     operand
```

All codes below are written in octal, the machine's native notation.

Addressing Modes
----------------
Non-jump instructions:

| Syntax | Mode          | Code | Meaning                          |
|--------|---------------|------|----------------------------------|
| x      | CURRENT_PAGE  | 000  | memory on the current page       |
| x      | ZERO_PAGE     | 100  | memory on page zero              |
| #n     | IMMEDIATE     | 200  | 6-bit literal                    |
| [x]    | INDIRECT      | 300  | pointer on the current page      |

Jump instructions:

| Syntax | Mode                  | Code | Meaning                     |
|--------|-----------------------|------|-----------------------------|
| [x]    | INDIRECT_CURRENT_PAGE | 000  | pointer on the current page |
| [x]    | INDIRECT_ZERO_PAGE    | 100  | pointer on page zero        |
| x      | DIRECT                | 200  | target on the current page  |
| A+n    | ACCUMULATOR           | 300  | accumulator plus offset     |

The parser assigns CURRENT_PAGE and INDIRECT_CURRENT_PAGE provisionally;
the code generator narrows them to their zero-page forms once the operand
value is known.
"""

from enum import Enum, auto
from typing import Optional


# =============================================================================
# Machine Constants
# =============================================================================

WORD_MASK = 0xFFFF          # Words and addresses are 16 bits
PAGE_SHIFT = 6              # 64 words per page
OPERAND_MASK = 0o77         # Operand field of an instruction word
MAX_SHORT_OPERAND = 63      # Largest immediate / accumulator offset


def page_of(address: int) -> int:
    """Return the page number containing an address."""
    return address >> PAGE_SHIFT


# =============================================================================
# Instruction Enumeration
# =============================================================================

class Instruction(Enum):
    """Instructions and assembler pseudo-operations."""
    ADD = auto()
    SUB = auto()
    RSB = auto()
    SHL = auto()
    CMP = auto()
    LDA = auto()
    STA = auto()
    OUT = auto()
    JMP = auto()
    JPC = auto()
    JPN = auto()
    JMS = auto()
    NOP = auto()
    SWP = auto()
    HLT = auto()

    # Pseudo-operations
    ORG = auto()   # Set location counter
    WRD = auto()   # Emit a full data word

    def __str__(self) -> str:
        return self.name


class Addressing(Enum):
    """Operand addressing modes."""
    CURRENT_PAGE = auto()
    ZERO_PAGE = auto()
    IMMEDIATE = auto()
    INDIRECT = auto()

    # Jump instructions only
    INDIRECT_CURRENT_PAGE = auto()
    INDIRECT_ZERO_PAGE = auto()
    DIRECT = auto()
    ACCUMULATOR = auto()

    # ORG and WRD only
    ASSEMBLER = auto()

    def __str__(self) -> str:
        """Return human-readable name for messages."""
        return self.name.lower().replace("_", "-")


# =============================================================================
# Encoding Tables
# =============================================================================

# Instruction class codes (bits 11..8). 0o7000 is an illegal opcode.
INSTRUCTION_CODES: dict[Instruction, int] = {
    Instruction.ADD: 0o0000,
    Instruction.SUB: 0o0400,
    Instruction.RSB: 0o1000,
    Instruction.SHL: 0o1400,
    Instruction.CMP: 0o2000,
    Instruction.LDA: 0o2400,
    Instruction.STA: 0o3000,
    Instruction.OUT: 0o3400,
    Instruction.JMP: 0o4000,
    Instruction.JPC: 0o4400,
    Instruction.JPN: 0o5000,
    Instruction.JMS: 0o5400,
    Instruction.NOP: 0o6000,
    Instruction.SWP: 0o6400,
    Instruction.HLT: 0o7400,
}

# Addressing mode codes (bits 7..6). Jump and non-jump modes share codes
# pairwise; the instruction class tells the machine which set applies.
ADDRESSING_CODES: dict[Addressing, int] = {
    Addressing.CURRENT_PAGE: 0o000,
    Addressing.ZERO_PAGE: 0o100,
    Addressing.IMMEDIATE: 0o200,
    Addressing.INDIRECT: 0o300,

    Addressing.INDIRECT_CURRENT_PAGE: 0o000,
    Addressing.INDIRECT_ZERO_PAGE: 0o100,
    Addressing.DIRECT: 0o200,
    Addressing.ACCUMULATOR: 0o300,

    Addressing.ASSEMBLER: 0o000,
}


# =============================================================================
# Instruction Groups
# =============================================================================

JUMP_INSTRUCTIONS = frozenset({
    Instruction.JMP,
    Instruction.JPC,
    Instruction.JPN,
    Instruction.JMS,
})

PSEUDO_INSTRUCTIONS = frozenset({
    Instruction.ORG,
    Instruction.WRD,
})

MNEMONICS = frozenset(inst.name for inst in Instruction)


# =============================================================================
# Lookup Functions
# =============================================================================

def lookup_instruction(mnemonic: str) -> Optional[Instruction]:
    """
    Look up an instruction by mnemonic.

    Matching is case-insensitive over ASCII letters only, and mnemonics
    are always exactly three characters.

    Returns:
        The Instruction, or None if the mnemonic is unknown
    """
    if len(mnemonic) != 3 or not mnemonic.isascii():
        return None
    name = mnemonic.upper()
    if name not in MNEMONICS:
        return None
    return Instruction[name]


def is_jump(instruction: Instruction) -> bool:
    """Check whether an instruction is a jump (JMP, JPC, JPN, JMS)."""
    return instruction in JUMP_INSTRUCTIONS


def is_pseudo(instruction: Instruction) -> bool:
    """Check whether an instruction is an assembler pseudo-operation."""
    return instruction in PSEUDO_INSTRUCTIONS
