#!/usr/bin/env python3
"""
Analyze the stargazers of the configured repositories and write the
aggregated intelligence used by the Notable Stargazers feature.

Environment variables:
  GITHUB_TOKEN: Personal access token (required)
  GITHUB_USERNAME: Owner of the analyzed repositories (default: Dicklesworthstone)
  STARGAZER_CACHE_PATH: Cache file location (default: .stargazer-cache.json)
  STARGAZER_OUTPUT_PATH: Output location (default: lib/data/stargazer-intelligence.json)
"""

import sys

from stargazer_analyzer.controller import main

if __name__ == "__main__":
    sys.exit(main())
