#------------------------------------------------------------
#                    identity_service.py
#     Merges per-repository stargazer lists into one index
#                     of unique logins.

from dataclasses import dataclass, field
from typing import Dict, List

@dataclass
class IdentityIndex:
    unique_logins: List[str] = field(default_factory=list)
    repos_by_login: Dict[str, List[str]] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.unique_logins)

# This function does build the login -> starred-repos index.
# Repos are listed in the order the login first appears in them.
def resolve_identities(stargazers_by_repo: Dict[str, List[str]]) -> IdentityIndex:
    index = IdentityIndex()
    for repo, logins in stargazers_by_repo.items():
        for login in logins:
            repos = index.repos_by_login.get(login)
            if repos is None:
                repos = index.repos_by_login[login] = []
                index.unique_logins.append(login)
            if repo not in repos:
                repos.append(repo)
    return index
