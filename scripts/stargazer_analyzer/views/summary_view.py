#------------------------------------------------------------
#                      summary_view.py
#        Renders the end-of-run summary printed to the
#                         console.

from typing import List
from ..models import StargazerIntelligence
from ..services.intelligence_service import format_reach

SUMMARY_HEADER = "=== Summary ==="
SUMMARY_TOTAL_TEMPLATE = "Total unique stargazers: {count:,}"
SUMMARY_NOTABLE_TEMPLATE = "Notable stargazers: {count:,}"
SUMMARY_REACH_TEMPLATE = "Combined reach: {reach:,} ({short})"
SUMMARY_COMPANIES_TEMPLATE = "Top companies: {companies}"
SUMMARY_TOP_TEMPLATE = "Top stargazer: {name} (score: {score:,})"
SUMMARY_COMPANY_PREVIEW = 5
NO_COMPANIES_LABEL = "none"

# This function does render the summary lines for a finished run.
# notable_count is the number of legends before top-N truncation.
def render_summary(intelligence: StargazerIntelligence, notable_count: int) -> str:
    companies = [company.name for company in intelligence.top_companies[:SUMMARY_COMPANY_PREVIEW]]
    lines: List[str] = [
        SUMMARY_HEADER,
        SUMMARY_TOTAL_TEMPLATE.format(count=intelligence.total_unique_stargazers),
        SUMMARY_NOTABLE_TEMPLATE.format(count=notable_count),
        SUMMARY_REACH_TEMPLATE.format(
            reach=intelligence.combined_reach,
            short=format_reach(intelligence.combined_reach),
        ),
        SUMMARY_COMPANIES_TEMPLATE.format(companies=", ".join(companies) or NO_COMPANIES_LABEL),
    ]
    if intelligence.top_stargazers:
        top = intelligence.top_stargazers[0]
        lines.append(SUMMARY_TOP_TEMPLATE.format(name=top.name, score=round(top.score)))
    return "\n".join(lines)
