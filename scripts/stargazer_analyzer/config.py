#------------------------------------------------------------
#                          config.py
#   Centralizes file paths, pipeline constants and JSON
#                  config loading helpers.

import json
import os
import sys
from typing import List

# Environment variable names for configuration
ENV_GITHUB_TOKEN = "GITHUB_TOKEN"
ENV_GITHUB_USERNAME = "GITHUB_USERNAME"
ENV_CACHE_PATH = "STARGAZER_CACHE_PATH"
ENV_OUTPUT_PATH = "STARGAZER_OUTPUT_PATH"

# Default values for configuration parameters
DEFAULT_GITHUB_USERNAME = "Dicklesworthstone"
DEFAULT_REPOS_TO_ANALYZE = (
    "mcp_agent_mail",
    "beads_viewer",
    "cass_memory_system",
    "ultimate_bug_scanner",
    "ntm",
    "simultaneous_launch_button",
    "coding_agent_session_search",
    "claude_code_agent_farm",
    "llm_aided_ocr",
    "swiss_army_llama",
    "your-source-to-prompt.html",
    "bulk_transcribe_youtube_videos_from_playlist",
    "sqlalchemy_data_model_visualizer",
    "visual_astar_python",
    "mindmap-generator",
    "ultimate_mcp_client",
    "ultimate_mcp_server",
    "fast_vector_similarity",
    "automatic_log_collector_and_analyzer",
    "model_guided_research",
)

# Constants for GitHub API interaction
GITHUB_API_ACCEPT_HEADER = "application/vnd.github+json"
GITHUB_API_BASE_URL = "https://api.github.com"
GITHUB_REQUEST_TIMEOUT_SECONDS = 30
GITHUB_STARGAZERS_PER_PAGE = 100
GITHUB_USER_REPOS_PER_PAGE = 100

# Crawl limits and pacing. Delays are in seconds.
MAX_STARGAZERS_PER_REPO = 1000
MAX_USERS_TO_PROCESS = 1000
ENRICHMENT_BATCH_SIZE = 20
CACHE_FLUSH_EVERY_BATCHES = 5
REPO_DELAY_SECONDS = 1.0
BATCH_DELAY_SECONDS = 1.0
RATE_LIMIT_DELAY_SECONDS = 15.0
MAX_REQUEST_ATTEMPTS = 3

# Cache entries older than this are ignored and re-fetched.
CACHE_TTL_SECONDS = 7 * 24 * 60 * 60

# A stargazer is a "legend" when either threshold is met.
LEGEND_FOLLOWERS_THRESHOLD = 5000
LEGEND_STARS_THRESHOLD = 30000

# Influence score weights.
SCORE_WEIGHT_TOTAL_STARS = 2.5
SCORE_WEIGHT_FOLLOWERS = 2.0
SCORE_WEIGHT_CONTRIBUTIONS = 0.1
SCORE_WEIGHT_RECENT_ACTIVITY = 0.1

# Not a measured signal. Kept as a fixed input until an activity source exists.
RECENT_ACTIVITY_PLACEHOLDER = 50

# Output sizes for the intelligence artifact.
TOP_STARGAZERS_LIMIT = 100
TOP_COMPANIES_LIMIT = 20
REPO_TOP_STARGAZERS_LIMIT = 10
REPO_TOP_COMPANIES_LIMIT = 5
STALE_DATA_MAX_AGE_DAYS = 7

# Messages shown for configuration problems.
MISSING_TOKEN_MESSAGE = "Error: GITHUB_TOKEN environment variable is required"
USAGE_MESSAGE = "Usage: GITHUB_TOKEN=xxx python scripts/analyze_stargazers.py"
INVALID_REPO_LIST_WARNING = "WARNING: could not read repo list at {path}; using built-in defaults"

# Directory paths for the project and configuration files.
SCRIPTS_DIR = os.path.dirname(os.path.dirname(__file__))
ROOT_DIR = os.path.dirname(SCRIPTS_DIR)
CONFIG_DIR = os.path.join(SCRIPTS_DIR, "config")
REPOS_TO_ANALYZE_PATH = os.path.join(CONFIG_DIR, "repos_to_analyze.json")
DEFAULT_CACHE_PATH = os.path.join(ROOT_DIR, ".stargazer-cache.json")
DEFAULT_OUTPUT_PATH = os.path.join(ROOT_DIR, "lib", "data", "stargazer-intelligence.json")

# This function does resolve a file path from the environment.
# Relative overrides are taken from the repository root.
def resolve_path(env_name: str, default: str) -> str:
    configured = os.environ.get(env_name, "").strip()
    if not configured:
        return default
    if os.path.isabs(configured):
        return configured
    return os.path.join(ROOT_DIR, configured)

# This function does load JSON content from disk safely.
# It returns None when the file is missing or invalid.
def _load_json(path: str):
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as file_handle:
            return json.load(file_handle)
    except (OSError, ValueError):
        return None

# This function does load the list of repositories to analyze.
# It keeps first-seen order and falls back to the built-in list.
def load_repos_to_analyze(path: str = REPOS_TO_ANALYZE_PATH) -> List[str]:
    data = _load_json(path)
    if data is None and os.path.exists(path):
        print(INVALID_REPO_LIST_WARNING.format(path=path), file=sys.stderr)
    if not isinstance(data, list):
        data = list(DEFAULT_REPOS_TO_ANALYZE)

    repos: List[str] = []
    for item in data:
        name = str(item).strip()
        if name and name not in repos:
            repos.append(name)
    return repos or list(DEFAULT_REPOS_TO_ANALYZE)

