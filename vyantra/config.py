"""
vyantra — Machine Constants
===========================

Fixed parameters of the machine. Nothing here is read from the
environment; the CLI overrides the step ceiling with --max-steps.
"""

# =============================================================================
#  WORD FORMAT
# =============================================================================
WORD_BITS = 32
WORD_MASK = (1 << WORD_BITS) - 1
WORD_MIN = -(1 << (WORD_BITS - 1))       # -2147483648
WORD_MAX = (1 << (WORD_BITS - 1)) - 1    #  2147483647


# =============================================================================
#  STACK
# =============================================================================
STACK_CAPACITY = 1024     # entries, not bytes
EMPTY_SP = -1             # stack pointer value of an empty stack


# =============================================================================
#  EXECUTION
# =============================================================================
# Machine.run() never enforces a ceiling (an infinite loop runs forever).
# Hosts that embed the machine drive step() themselves; this is the CLI default.
DEFAULT_MAX_STEPS = 1_000_000


# =============================================================================
#  LOGGING
# =============================================================================
LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
