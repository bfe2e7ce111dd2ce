#!/usr/bin/env python3

import os
import argparse
import yaml
from github import Github, Auth
from github.GithubException import GithubException
import requests
from typing import Any, Callable, Dict, List, Optional, Union
import sys

from pr_stats import MergedPR, is_bot, day_and_time_of_day, year_and_quarter
from pr_reporter import print_summary, print_records, print_developer_activity, print_debug_table

MAX_PAGE_SIZE = 100

FETCH_ERRORS = (GithubException, requests.exceptions.RequestException)

DEFAULT_CONFIG = {
    'github': {
        'owner': 'codeready-toolchain',
        'repo': 'member-operator',
        # Fetch extra because not every closed PR was merged. 0 fetches all.
        'num_prs': 10,
    }
}

class EnrichmentError(Exception):
    """Raised when comments, commits or reviews for a single PR cannot be fetched."""
    pass

def page_size(num_prs: int) -> int:
    if 0 < num_prs < MAX_PAGE_SIZE:
        return num_prs
    return MAX_PAGE_SIZE

def login_of(user) -> str:
    # Deleted accounts come back without a user object
    if user is None or user.login is None:
        return 'ghost'
    return user.login

def human_logins(items) -> List[str]:
    """Authors of the given comments or reviews, bots removed, duplicates kept."""
    return [login for login in (login_of(item.user) for item in items) if not is_bot(login)]

def scan_first_responses(created_at, comments) -> Dict[str, Any]:
    """Find the first response and the first human response among PR comments.

    The first comment overall sets the first-responder fields. The scan stops at
    the first comment not written by a bot, which sets the first-human-responder
    fields. Returns keyword arguments for MergedPR; fields stay at their defaults
    when nobody responded.
    """
    fields: Dict[str, Any] = {}
    for comment in comments:
        login = login_of(comment.user)
        day, time_of_day = day_and_time_of_day(comment.created_at)
        latency = comment.created_at - created_at
        if 'first_responder' not in fields:
            fields.update(
                first_responder=login,
                first_response_day=day,
                first_response_time_of_day=time_of_day,
                time_to_first_response=latency,
            )
        if not is_bot(login):
            fields.update(
                first_human_responder=login,
                first_human_response_day=day,
                first_human_response_time_of_day=time_of_day,
                time_to_first_human_response=latency,
            )
            break
    return fields

def validate_config(config: Dict) -> None:
    if not isinstance(config, dict) or 'github' not in config:
        raise KeyError("Missing 'github' section")

    github_config = config['github']
    if not isinstance(github_config, dict):
        raise ValueError("'github' must be a mapping")

    required_fields = ['owner', 'repo']
    missing_fields = [field for field in required_fields if field not in github_config]
    if missing_fields:
        raise KeyError(f"Missing required fields: {', '.join(missing_fields)}")

    for field in required_fields:
        if not isinstance(github_config[field], str) or not github_config[field].strip():
            raise ValueError(f"'{field}' must be a non-empty string")

    num_prs = github_config.get('num_prs', DEFAULT_CONFIG['github']['num_prs'])
    if isinstance(num_prs, bool) or not isinstance(num_prs, int) or num_prs < 0:
        raise ValueError("'num_prs' must be a non-negative integer (0 fetches all closed PRs)")

def load_config(config_path: Optional[str] = None) -> Dict:
    """Load and validate a YAML config file, or return the defaults when no path is given."""
    if config_path is None:
        return {'github': dict(DEFAULT_CONFIG['github'])}

    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)

    validate_config(config)
    github_config = dict(DEFAULT_CONFIG['github'])
    github_config.update(config['github'])
    return {'github': github_config}

class MergedPRAnalyzer:
    def __init__(self, config: Union[str, Dict], github_client, debug: bool = False):
        if isinstance(config, str):
            self.config = load_config(config)
        else:
            self.config = config

        self.owner = self.config['github']['owner']
        self.repo_name = self.config['github']['repo']
        self.num_prs = self.config['github'].get('num_prs', DEFAULT_CONFIG['github']['num_prs'])
        self.debug = debug
        self.github = github_client

    def _print_progress(self, message: str):
        """Print a progress message and flush to ensure immediate display."""
        print(message, end='', flush=True)

    def fetch_closed_prs(self) -> List:
        """Page through closed PRs until num_prs is reached or the pages run out.

        The client pages at min(100, num_prs) while listing and is put back to its
        own page size afterwards, so per-PR reads keep the default first page.
        Any API or network error propagates; a failed page leaves nothing to report on.
        """
        self._print_progress(f"Fetching closed PRs for {self.owner}/{self.repo_name}... ")

        client_per_page = self.github.per_page
        self.github.per_page = page_size(self.num_prs)
        try:
            per_page = self.github.per_page
            repo = self.github.get_repo(f"{self.owner}/{self.repo_name}")
            pulls = repo.get_pulls(state='closed')

            prs = []
            page = 0
            while True:
                batch = pulls.get_page(page)
                prs.extend(batch)
                if (self.num_prs > 0 and len(prs) >= self.num_prs) or len(batch) < per_page:
                    break
                page += 1
        finally:
            self.github.per_page = client_per_page

        if self.num_prs > 0:
            prs = prs[:self.num_prs]

        self._print_progress(f"Found {len(prs)} closed PRs.\n")
        return prs

    def _fetch_first_page(self, pr, what: str, fetch: Callable) -> List:
        # Only the first page, at the client's default size
        try:
            return list(fetch().get_page(0))
        except FETCH_ERRORS as e:
            raise EnrichmentError(f"Error fetching {what} for PR #{pr.number}: {e}") from e

    def enrich_pr(self, pr) -> Optional[MergedPR]:
        """Build a MergedPR record, or None when the PR was never merged.

        Raises:
            EnrichmentError: If comments, commits or reviews cannot be fetched
        """
        if pr.created_at is None or pr.merged_at is None:
            return None

        creation_day, creation_time_of_day = day_and_time_of_day(pr.created_at)
        merge_day, merge_time_of_day = day_and_time_of_day(pr.merged_at)
        year, quarter = year_and_quarter(pr.created_at)

        comments = self._fetch_first_page(pr, 'comments', pr.get_issue_comments)
        first_responses = scan_first_responses(pr.created_at, comments)

        commits = self._fetch_first_page(pr, 'commits', pr.get_commits)
        commenters = human_logins(comments)

        reviews = self._fetch_first_page(pr, 'reviews', pr.get_reviews)
        reviewers = human_logins(reviews)

        return MergedPR(
            number=pr.number,
            title=pr.title,
            creator=login_of(pr.user),
            created_at=pr.created_at,
            merged_at=pr.merged_at,
            duration=pr.merged_at - pr.created_at,
            year=year,
            quarter=quarter,
            creation_day=creation_day,
            creation_time_of_day=creation_time_of_day,
            merge_day=merge_day,
            merge_time_of_day=merge_time_of_day,
            commits=len(commits),
            commenters=tuple(commenters),
            reviewers=tuple(reviewers),
            **first_responses
        )

    def build_records(self, prs: List) -> List[MergedPR]:
        """Enrich every merged PR, skipping (and reporting) PRs whose details fail to load."""
        merged = [pr for pr in prs if pr.created_at is not None and pr.merged_at is not None]
        self._print_progress(f"Enriching {len(merged)} merged PRs...\n")

        records = []
        for i, pr in enumerate(merged, 1):
            if self.debug:
                self._print_progress(f"Processing PR {i}/{len(merged)}: #{pr.number}\n")
            try:
                record = self.enrich_pr(pr)
            except EnrichmentError as e:
                print(e)
                continue
            records.append(record)

        self._print_progress(f"Done! {len(records)} PRs analyzed.\n\n")
        return records

def main():
    parser = argparse.ArgumentParser(
        description='Report merge times, response times and top contributors for merged GitHub PRs',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  Basic usage (codeready-toolchain/member-operator, last 10 closed PRs):
    GITHUB_TOKEN=... python merged_pr_analyzer.py

  Use a config file for another repository:
    python merged_pr_analyzer.py --config config.yaml

  Also show per-developer activity:
    python merged_pr_analyzer.py --developers

  Show the fetched PRs and enrichment progress:
    python merged_pr_analyzer.py --debug
'''
    )
    parser.add_argument(
        '--config',
        help='Path to config file (default: built-in repository settings)'
    )
    parser.add_argument(
        '--developers',
        action='store_true',
        help='Show per-developer PR activity'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Show detailed PR information'
    )
    args = parser.parse_args()

    config_path = os.getenv('CONFIG_PATH', args.config)
    try:
        config = load_config(config_path)
    except yaml.YAMLError as e:
        print("Error: Invalid YAML format in config file.")
        print(f"\nYAML Error details: {e}")
        sys.exit(1)
    except (OSError, KeyError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    token = os.environ.get('GITHUB_TOKEN')
    if not token:
        print("Error: GITHUB_TOKEN environment variable is not set")
        sys.exit(1)

    github = Github(auth=Auth.Token(token))
    analyzer = MergedPRAnalyzer(config, github_client=github, debug=args.debug)

    try:
        prs = analyzer.fetch_closed_prs()
    except FETCH_ERRORS as e:
        print(f"\nError fetching pull requests: {e}")
        sys.exit(1)

    if args.debug:
        print_debug_table(prs)

    records = analyzer.build_records(prs)
    print_summary(records)
    print_records(records)
    if args.developers:
        print_developer_activity(records)

if __name__ == "__main__":
    main()
