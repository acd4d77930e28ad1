#------------------------------------------------------------
#                     scoring_service.py
#      Computes influence scores and applies the legend
#                          filter.

from typing import List, Optional
from ..config import (
    LEGEND_FOLLOWERS_THRESHOLD,
    LEGEND_STARS_THRESHOLD,
    RECENT_ACTIVITY_PLACEHOLDER,
    SCORE_WEIGHT_CONTRIBUTIONS,
    SCORE_WEIGHT_FOLLOWERS,
    SCORE_WEIGHT_RECENT_ACTIVITY,
    SCORE_WEIGHT_TOTAL_STARS,
)
from ..models import NotableStargazer, UserProfile

def calculate_score(total_stars: int, followers: int, contributions: int, recent_activity: int) -> float:
    return (
        total_stars * SCORE_WEIGHT_TOTAL_STARS
        + followers * SCORE_WEIGHT_FOLLOWERS
        + contributions * SCORE_WEIGHT_CONTRIBUTIONS
        + recent_activity * SCORE_WEIGHT_RECENT_ACTIVITY
    )

def is_legend(followers: int, total_stars: int) -> bool:
    return followers >= LEGEND_FOLLOWERS_THRESHOLD or total_stars >= LEGEND_STARS_THRESHOLD

# This function does project a profile into a notable stargazer.
# It returns None for users below both legend thresholds.
def build_notable(profile: UserProfile, repos_starred: List[str]) -> Optional[NotableStargazer]:
    if not is_legend(profile.followers, profile.total_stars):
        return None

    return NotableStargazer(
        login=profile.login,
        name=profile.display_name,
        avatar_url=profile.avatar_url,
        company=profile.company,
        bio=profile.bio,
        score=calculate_score(
            profile.total_stars,
            profile.followers,
            profile.contributions,
            RECENT_ACTIVITY_PLACEHOLDER,
        ),
        followers=profile.followers,
        total_stars=profile.total_stars,
        repos_starred=tuple(repos_starred),
    )
