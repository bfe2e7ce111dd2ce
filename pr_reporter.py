from datetime import timedelta
from typing import List, Sequence

import pr_stats
from pr_stats import MergedPR, to_utc

SEPARATOR = "-" * 40

def format_duration(duration: timedelta) -> str:
    """Format a duration to whole seconds, e.g. '1 day, 2:03:04'."""
    return str(timedelta(seconds=int(duration.total_seconds())))

def format_names(names: Sequence[str]) -> str:
    return f"[{', '.join(names)}]"

def print_summary(records: List[MergedPR]):
    print(f"Average merge time: {format_duration(pr_stats.average_merge_time(records))}")
    print(f"Average time to first human response: {format_duration(pr_stats.average_time_to_first_human_response(records))}")
    # Covers every first responder, not only bots
    print(f"Average time to first bot response: {format_duration(pr_stats.average_time_to_first_response(records))}")
    print(f"Average number of comments per PR: {pr_stats.average_comments(records):.2f}")
    print(f"Average number of reviewers per PR: {pr_stats.average_reviewers(records):.2f}")
    print(f"Average number of commits per PR: {pr_stats.average_commits(records):.2f}")

    print(f"Day of the week with the most PRs created: {pr_stats.busiest_creation_day(records)}")
    print(f"Time of the day with the most PRs created: {pr_stats.busiest_creation_time(records)}")
    print(f"Day of the week with the most PRs merged: {pr_stats.busiest_merge_day(records)}")
    print(f"Time of the day with the most PRs merged: {pr_stats.busiest_merge_time(records)}")
    print(f"Day of the week with the most first human responses: {pr_stats.busiest_first_human_response_day(records)}")
    print(f"Time of the day with the most first human responses: {pr_stats.busiest_first_human_response_time(records)}")
    print(f"Day of the week with the most PR reviews: {pr_stats.busiest_first_response_day(records)}")
    print(f"Time of the day with the most PR reviews: {pr_stats.busiest_first_response_time(records)}")

    print(f"Names of all developers who created, merged, reviewed, commented on, or approved PRs: "
          f"{format_names(pr_stats.all_developers(records))}")

    print(f"Top reviewer: {pr_stats.top_reviewer(records)}")
    print(f"Top commenter: {pr_stats.top_commenter(records)}")
    print(f"Top creator: {pr_stats.top_creator(records)}")
    print(f"Top first human responder: {pr_stats.top_first_human_responder(records)}")
    print(f"Top first responder: {pr_stats.top_first_responder(records)}")
    print(f"Top merger: {pr_stats.top_merger(records)}")

    print(SEPARATOR)

def format_pr_line(record: MergedPR) -> str:
    """Describe one merged PR in a single sentence."""
    human_response = "did not have a first human response"
    if record.first_human_responder:
        human_response = (
            f"had a first human response by {record.first_human_responder} "
            f"on a {record.first_human_response_day} in the {record.first_human_response_time_of_day} "
            f"after {format_duration(record.time_to_first_human_response)}"
        )

    return (
        f"PR #{record.number}: {record.title} was created by {record.creator} "
        f"on a {record.creation_day} in the {record.creation_time_of_day}, "
        f"had a first response by {record.first_responder} on a {record.first_response_day} "
        f"in the {record.first_response_time_of_day} after {format_duration(record.time_to_first_response)}, "
        f"{human_response}, "
        f"was merged on a {record.merge_day} in the {record.merge_time_of_day} in {record.quarter}-{record.year}, "
        f"took {format_duration(record.duration)} to merge, "
        f"included {record.commits} commits, "
        f"and had {len(record.commenters)} review comments by {format_names(record.commenters)}, "
        f"reviewed by {len(record.reviewers)} people {format_names(record.reviewers)}"
    )

def print_records(records: List[MergedPR]):
    for record in records:
        print(format_pr_line(record))

def print_developer_activity(records: List[MergedPR]):
    activity = pr_stats.developer_activity(records)
    print("\nPer-developer activity:")
    print(f"{'Developer':<30} {'Created':<10} {'Reviewed':<10} {'Commented':<10} {'First Human Responses':<10}")
    print("-" * 85)
    for name, dev in sorted(activity.items()):
        print(f"{name:<30} {dev.prs_created:<10} {dev.prs_reviewed:<10} "
              f"{dev.prs_commented_on:<10} {dev.first_human_responses:<10}")

def print_debug_table(prs):
    """Print the fetched closed PRs, merged or not."""
    print("\nDetailed PR Information:")
    print("-" * 80)
    print(f"{'PR #':<6} {'Opened':<20} {'Merged':<20} {'Author Login':<30}")
    print("-" * 80)
    for pr in prs:
        created_at = to_utc(pr.created_at).strftime('%Y-%m-%d %H:%M') if pr.created_at is not None else 'N/A'
        merged_at = to_utc(pr.merged_at).strftime('%Y-%m-%d %H:%M') if pr.merged_at is not None else 'not merged'
        author_login = pr.user.login if pr.user and pr.user.login is not None else 'N/A'
        print(f"{pr.number:<6} {created_at:<20} {merged_at:<20} {author_login:<30}")
    print()
