# skill_system/config.py

import os
from pathlib import Path
from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


# --- Layout ---

# Default node box, matching the card size the drawing surface renders.
NODE_WIDTH = float(os.getenv("SKILL_TREE_NODE_WIDTH", "220"))
NODE_HEIGHT = float(os.getenv("SKILL_TREE_NODE_HEIGHT", "80"))

# Clear space between boxes. Separations are box extent + gap.
RANK_GAP = float(os.getenv("SKILL_TREE_RANK_GAP", "150"))
NODE_GAP = float(os.getenv("SKILL_TREE_NODE_GAP", "50"))

# Barycenter crossing reduction
CROSSING_PASSES = int(os.getenv("SKILL_TREE_CROSSING_PASSES", "4"))
CROSSING_NODE_LIMIT = int(os.getenv("SKILL_TREE_CROSSING_NODE_LIMIT", "2000"))


# --- Prerequisite matching ---

FUZZY_MAX_DISTANCE = int(os.getenv("SKILL_TREE_FUZZY_MAX_DISTANCE", "2"))
FUZZY_MAX_RATIO = float(os.getenv("SKILL_TREE_FUZZY_MAX_RATIO", "0.2"))


# --- Viewport ---

MOBILE_BREAKPOINT = int(os.getenv("SKILL_TREE_MOBILE_BREAKPOINT", "768"))
