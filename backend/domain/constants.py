"""
Domain constants used across services/routers.
"""

# Platform fee: 3% = 300 basis points. Fixed, not runtime-configurable.
PLATFORM_FEE_BPS = 300
BPS_DENOMINATOR = 10_000

# Amounts are unsigned 64-bit integers in minimal value units (microAlgos)
U64_MAX = 2**64 - 1

# Largest amount whose fee multiplication stays within u64
MAX_TIP_AMOUNT = U64_MAX // PLATFORM_FEE_BPS

# Memo limit, measured in UTF-8 bytes
MAX_MEMO_BYTES = 200
