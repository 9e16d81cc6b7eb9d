from isa18.word import (
    BitVector,
    Word,
    word,
    signed18,
    WORD_BITS,
    WORD_MASK,
)
from isa18.bits import (
    to_unsigned,
    to_unsigned_byte,
    to_signed,
    from_integer,
    resize,
    sign_extend,
    test_bit,
    copy_bits_into_word,
    register_to_word,
    format_bits,
    check_width,
)
from isa18.errors import (
    ErrorKind,
    EncodingError,
    UnknownOpcodeError,
    MalformedOperandError,
    WidthOverflowError,
)
from isa18.formats import InstructionFormat, FormatRegistry, default_registry
from isa18.writer import WordWriter, decode_word, format_octal, format_binary
from isa18.packer import (
    DecodedFields,
    InstructionPacker,
    PackError,
    PackResult,
    string_to_word,
)
from isa18.assembler import assemble, AssembleResult

__all__ = [
    "BitVector",
    "Word",
    "word",
    "signed18",
    "WORD_BITS",
    "WORD_MASK",
    "to_unsigned",
    "to_unsigned_byte",
    "to_signed",
    "from_integer",
    "resize",
    "sign_extend",
    "test_bit",
    "copy_bits_into_word",
    "register_to_word",
    "format_bits",
    "check_width",
    "ErrorKind",
    "EncodingError",
    "UnknownOpcodeError",
    "MalformedOperandError",
    "WidthOverflowError",
    "InstructionFormat",
    "FormatRegistry",
    "default_registry",
    "WordWriter",
    "decode_word",
    "format_octal",
    "format_binary",
    "DecodedFields",
    "InstructionPacker",
    "PackError",
    "PackResult",
    "string_to_word",
    "assemble",
    "AssembleResult",
]
