"""Environment-driven settings for the queens core."""

import os

# ======= Board sizes =======
DEFAULT_SIZE = int(os.getenv("QUEENS_DEFAULT_SIZE", "7"))
# Bounds the interactive front-end offers; the core itself accepts any n >= 1.
MIN_SIZE = int(os.getenv("QUEENS_MIN_SIZE", "4"))
MAX_SIZE = int(os.getenv("QUEENS_MAX_SIZE", "10"))

# ======= Search caps =======
# 0 disables the cap. Boards in the 4..10 range never get close to the default.
NODE_LIMIT = int(os.getenv("QUEENS_NODE_LIMIT", "2000000"))
