from datetime import datetime, timezone, timedelta
from typing import Dict, List, Iterable, Tuple
from dataclasses import dataclass
from collections import Counter
from statistics import mean

BOT_SUFFIX = '[bot]'

WEEKDAYS = ('Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday')

AFTER_MIDNIGHT = 'after midnight [UTC 00:00-06:00)'
MORNING = 'morning [UTC 06:00-12:00)'
AFTERNOON = 'afternoon [UTC 12:00-17:00)'
EVENING = 'evening [UTC 17:00-20:00)'
NIGHT = 'night [UTC 20:00-00:00)'

@dataclass(frozen=True)
class MergedPR:
    number: int
    title: str
    creator: str
    created_at: datetime
    merged_at: datetime
    duration: timedelta
    year: int
    quarter: str
    creation_day: str
    creation_time_of_day: str
    merge_day: str
    merge_time_of_day: str
    commits: int
    commenters: Tuple[str, ...] = ()
    reviewers: Tuple[str, ...] = ()
    # Empty handle and zero latency when nobody responded
    first_responder: str = ''
    first_response_day: str = ''
    first_response_time_of_day: str = ''
    time_to_first_response: timedelta = timedelta(0)
    first_human_responder: str = ''
    first_human_response_day: str = ''
    first_human_response_time_of_day: str = ''
    time_to_first_human_response: timedelta = timedelta(0)

@dataclass
class DeveloperActivity:
    name: str
    prs_created: int = 0
    prs_reviewed: int = 0
    prs_commented_on: int = 0
    first_human_responses: int = 0

def is_bot(login: str) -> bool:
    """Return True for automated accounts such as 'dependabot[bot]'."""
    return login.endswith(BOT_SUFFIX)

def to_utc(instant: datetime) -> datetime:
    # Older PyGithub releases hand back naive datetimes that are already UTC
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)

def time_of_day(hour: int) -> str:
    if hour < 6:
        return AFTER_MIDNIGHT
    if hour < 12:
        return MORNING
    if hour < 17:
        return AFTERNOON
    if hour < 20:
        return EVENING
    return NIGHT

def day_and_time_of_day(instant: datetime) -> Tuple[str, str]:
    """Return the UTC weekday name and time-of-day bucket for an instant."""
    utc = to_utc(instant)
    return WEEKDAYS[utc.weekday()], time_of_day(utc.hour)

def year_and_quarter(instant: datetime) -> Tuple[int, str]:
    utc = to_utc(instant)
    return utc.year, f"Q{(utc.month - 1) // 3 + 1}"

def most_common(values: Iterable[str]) -> str:
    """Most frequent value; ties go to the value seen first. Empty input gives ''."""
    counts = Counter(values)
    if not counts:
        return ''
    return counts.most_common(1)[0][0]

def _average_duration(durations: List[timedelta]) -> timedelta:
    return timedelta(seconds=mean(d.total_seconds() for d in durations)) if durations else timedelta(0)

def _average_count(counts: List[int]) -> float:
    return mean(counts) if counts else 0.0

def average_merge_time(records: List[MergedPR]) -> timedelta:
    return _average_duration([r.duration for r in records])

def average_time_to_first_human_response(records: List[MergedPR]) -> timedelta:
    """Mean over all records; PRs nobody answered count as zero latency."""
    return _average_duration([r.time_to_first_human_response for r in records])

def average_time_to_first_response(records: List[MergedPR]) -> timedelta:
    """Mean latency of the first comment from any account, bots included."""
    return _average_duration([r.time_to_first_response for r in records])

def average_comments(records: List[MergedPR]) -> float:
    return _average_count([len(r.commenters) for r in records])

def average_reviewers(records: List[MergedPR]) -> float:
    return _average_count([len(r.reviewers) for r in records])

def average_commits(records: List[MergedPR]) -> float:
    return _average_count([r.commits for r in records])

def busiest_creation_day(records: List[MergedPR]) -> str:
    return most_common(r.creation_day for r in records)

def busiest_creation_time(records: List[MergedPR]) -> str:
    return most_common(r.creation_time_of_day for r in records)

def busiest_merge_day(records: List[MergedPR]) -> str:
    return most_common(r.merge_day for r in records)

def busiest_merge_time(records: List[MergedPR]) -> str:
    return most_common(r.merge_time_of_day for r in records)

def busiest_first_human_response_day(records: List[MergedPR]) -> str:
    return most_common(r.first_human_response_day for r in records if r.first_human_responder)

def busiest_first_human_response_time(records: List[MergedPR]) -> str:
    return most_common(r.first_human_response_time_of_day for r in records if r.first_human_responder)

def busiest_first_response_day(records: List[MergedPR]) -> str:
    return most_common(r.first_response_day for r in records)

def busiest_first_response_time(records: List[MergedPR]) -> str:
    return most_common(r.first_response_time_of_day for r in records)

def top_reviewer(records: List[MergedPR]) -> str:
    return most_common(reviewer for r in records for reviewer in r.reviewers)

def top_commenter(records: List[MergedPR]) -> str:
    return most_common(commenter for r in records for commenter in r.commenters)

def top_creator(records: List[MergedPR]) -> str:
    return most_common(r.creator for r in records)

def top_first_human_responder(records: List[MergedPR]) -> str:
    return most_common(r.first_human_responder for r in records if r.first_human_responder)

def top_first_responder(records: List[MergedPR]) -> str:
    return most_common(r.first_responder for r in records)

def top_merger(records: List[MergedPR]) -> str:
    # Counts creators rather than pr.merged_by, matching earlier reports
    return most_common(r.creator for r in records)

def all_developers(records: List[MergedPR]) -> List[str]:
    """Sorted handles of everyone who created, commented on or reviewed a PR."""
    names = set()
    for r in records:
        names.add(r.creator)
        names.update(r.commenters)
        names.update(r.reviewers)
    return sorted(names)

def developer_activity(records: List[MergedPR]) -> Dict[str, DeveloperActivity]:
    """Per-developer PR counts; each role counts a given PR at most once."""
    activity: Dict[str, DeveloperActivity] = {}

    def get(name: str) -> DeveloperActivity:
        if name not in activity:
            activity[name] = DeveloperActivity(name)
        return activity[name]

    for r in records:
        get(r.creator).prs_created += 1
        for reviewer in set(r.reviewers):
            get(reviewer).prs_reviewed += 1
        for commenter in set(r.commenters):
            get(commenter).prs_commented_on += 1
        if r.first_human_responder:
            get(r.first_human_responder).first_human_responses += 1

    return activity
