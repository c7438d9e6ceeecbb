"""Engine-wide constants"""

SECONDS_PER_DAY = 86_400

# Rates are daily fractions scaled by RATE_FACTOR: 1% per day == 10**10
RATE_FACTOR = 10**12

# Claims and claim previews are expressed in multiples of ROUND_FACTOR
ROUND_FACTOR = 10_000

MIN_CLAIM_AMOUNT = 1_000_000

# Claim fee in RATE_FACTOR units (0 disables the fee)
FEE_RATE = 0

# Day boundaries fall at local midnight (UTC-3)
NEGATIVE_TIME_SHIFT = 3 * 60 * 60

ENABLE_YIELD_STATE_AUTO_INITIALIZATION = False
