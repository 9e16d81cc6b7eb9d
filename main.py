import sys

from isa18.runner import run_source

SAMPLE_PROGRAM = """
LDR 3,0,31      ; R3 <- c(31)
LDA 1,0,10
AIR 1,5
LDX 1,20
STR 2,1,4,1     ; indirect through X1
MLT 0,2
NOT 2
SRC 3,3,1,1     ; logical shift left by 3
RRC 0,2,0,1
JZ  0,0,12
RFS 7
IN 1,0          ; read keyboard
OUT 1,1         ; write printer
"""


def main() -> None:
    sys.exit(run_source(SAMPLE_PROGRAM, output_format="octal", listing=True))


if __name__ == "__main__":
    main()
