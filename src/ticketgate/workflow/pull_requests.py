"""PR Reference Extractor - Finds pull-request links in comments and derives review aliases."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ticketgate.config import DEFAULT_ORG_PREFIX, DEFAULT_REVIEW_COMMAND
from ticketgate.workflow.models import Comment, PullRequestAlias, PullRequestReference

PR_URL_PATTERN = re.compile(r"https?://\S*/pull/\d+", re.IGNORECASE)
PR_PARTS_PATTERN = re.compile(
    r"https?://(?P<host>[^/\s]+)/(?P<org>[^/\s]+)/(?P<repo>[^/\s]+)/pull/(?P<number>\d+)",
    re.IGNORECASE,
)

DEFAULT_CHECKOUT_ROOT = "~/dev"

# Local checkouts whose directory is not simply ~/dev/<repo>
REPO_PATHS: dict[str, str] = {
    "AdobeStock/client-lib-js": "~/dev/client-lib-js",
    "AdobeStock/stock-web": "~/dev/stock-web",
    "AdobeStock/stock-landing-web-service": "~/dev/stock-landing-web-service",
    "AdobeStock/stock-legal-terms": "~/dev/stock-legal-terms",
    "AdobeStock/stock-search-app": "~/dev/stock-search-app",
}

NO_COMMAND = "No command available"


def _comment_body(comment: Comment | Mapping[str, str]) -> str:
    if isinstance(comment, Mapping):
        return comment.get("body") or ""
    return comment.body


def extract_pull_request_links(comments: Iterable[Comment | Mapping[str, str]]) -> list[str]:
    """Collect pull-request URLs from comment bodies.

    Order follows the comments, then position inside each body. Duplicates
    are kept.
    """
    links: list[str] = []
    for comment in comments:
        links.extend(PR_URL_PATTERN.findall(_comment_body(comment)))
    return links


def repo_path(repo: str, repo_paths: Mapping[str, str] = REPO_PATHS) -> str:
    """Local working directory for an "<org>/<repo>" name."""
    known = repo_paths.get(repo)
    if known:
        return known
    return f"{DEFAULT_CHECKOUT_ROOT}/{repo.split('/')[-1]}"


def generate_pr_alias(
    url: str,
    repo_paths: Mapping[str, str] = REPO_PATHS,
    review_command: str = DEFAULT_REVIEW_COMMAND,
    git_host: str = "",
) -> PullRequestAlias | None:
    """Derive the local review command for a pull-request URL.

    Args:
        url: Pull-request URL of the form https://<host>/<org>/<repo>/pull/<n>.
        repo_paths: Known repositories and their local checkout paths.
        review_command: Tool invoked with the PR number inside the checkout.
        git_host: When set, only URLs on this host produce an alias.

    Returns:
        The alias, or None when the URL does not have the expected shape.
    """
    match = PR_PARTS_PATTERN.match(url)
    if match is None:
        return None
    if git_host and match["host"].lower() != git_host.lower():
        return None

    repo = f"{match['org']}/{match['repo']}"
    pr_number = match["number"]
    return PullRequestAlias(
        repo=repo,
        pr_number=pr_number,
        alias_command=f"cd {repo_path(repo, repo_paths)} && {review_command} {pr_number}",
    )


@dataclass(frozen=True)
class PullRequestFormatter:
    """Turns extracted URLs into PullRequestReferences under one set of rules."""

    repo_paths: Mapping[str, str] = field(default_factory=lambda: dict(REPO_PATHS))
    review_command: str = DEFAULT_REVIEW_COMMAND
    git_host: str = ""
    org_prefix: str = DEFAULT_ORG_PREFIX

    def alias(self, url: str) -> PullRequestAlias | None:
        return generate_pr_alias(
            url,
            repo_paths=self.repo_paths,
            review_command=self.review_command,
            git_host=self.git_host,
        )

    def label(self, alias: PullRequestAlias | None) -> str:
        """Display label: PR number and repo name without the org prefix."""
        if alias is None:
            return "PR - repo"
        repo = alias.repo
        prefix = self.org_prefix.rstrip("/")
        if prefix and repo.startswith(f"{prefix}/"):
            repo = repo[len(prefix) + 1 :]
        return f"{alias.pr_number} - {repo}"

    def format(self, urls: Iterable[str]) -> list[PullRequestReference]:
        references = []
        for url in urls:
            alias = self.alias(url)
            references.append(
                PullRequestReference(
                    url=url,
                    label=self.label(alias),
                    alias_command=alias.alias_command if alias else None,
                )
            )
        return references

    def references_from_comments(
        self, comments: Iterable[Comment | Mapping[str, str]]
    ) -> list[PullRequestReference]:
        return self.format(extract_pull_request_links(comments))


def format_pull_requests(
    urls: Iterable[str], org_prefix: str = DEFAULT_ORG_PREFIX, **rules: Any
) -> list[PullRequestReference]:
    """Build references for ``urls`` with default aliasing rules.

    Extra keyword arguments are passed to PullRequestFormatter.
    """
    return PullRequestFormatter(org_prefix=org_prefix, **rules).format(urls)
