from __future__ import annotations

WORD_BITS = 18

BYTE_BITS = 8
BYTE_MIN_SIGNED = -0x80
BYTE_MAX_SIGNED = 0x7F

OPCODE_BITS = 6
REGISTER_BITS = 2
INDEX_REGISTER_BITS = 2
INDIRECTION_BITS = 1
ADDRESS_BITS = 7
SHIFT_FLAG_BITS = 1
COUNT_BITS = 4
DEVID_BITS = 5

# Bit positions (MSB = 0) of the least-significant bit of each field.
OPCODE_LSB = 5
REGISTER_LSB = 7
INDEX_REGISTER_LSB = 9
INDIRECTION_LSB = 10
ADDRESS_LSB = 17
REGISTER_Y_LSB = 9
AL_LSB = 8
LR_LSB = 9
COUNT_LSB = 17
DEVID_LSB = 17

DEFAULT_INDEX_TO_FLAGS: tuple[int, ...] = (0x8, 0x4, 0x2, 0x1)
