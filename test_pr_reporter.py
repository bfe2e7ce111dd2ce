import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock
import pr_stats
from pr_reporter import (
    format_duration, format_pr_line, print_summary, print_records, print_developer_activity, print_debug_table
)
from test_pr_stats import make_record

@pytest.fixture
def answered_record():
    return make_record(
        number=12,
        title='Fix flaky test',
        creator='alice',
        duration=timedelta(days=1, hours=2, minutes=3, seconds=4),
        commits=2,
        commenters=('bob', 'carol'),
        reviewers=('bob',),
        first_responder='ci[bot]',
        first_response_day='Monday',
        first_response_time_of_day=pr_stats.MORNING,
        time_to_first_response=timedelta(minutes=5),
        first_human_responder='bob',
        first_human_response_day='Monday',
        first_human_response_time_of_day=pr_stats.AFTERNOON,
        time_to_first_human_response=timedelta(hours=3, microseconds=250),
    )

def test_format_duration():
    assert format_duration(timedelta(0)) == '0:00:00'
    assert format_duration(timedelta(hours=3, minutes=4, seconds=5, microseconds=900)) == '3:04:05'
    assert format_duration(timedelta(days=2, hours=1)) == '2 days, 1:00:00'

def test_format_pr_line_with_human_response(answered_record):
    line = format_pr_line(answered_record)

    assert line.startswith(
        f"PR #12: Fix flaky test was created by alice on a Monday in the {pr_stats.MORNING}, "
        f"had a first response by ci[bot] on a Monday in the {pr_stats.MORNING} after 0:05:00, "
        f"had a first human response by bob on a Monday in the {pr_stats.AFTERNOON} after 3:00:00, "
    )
    assert f"was merged on a Monday in the {pr_stats.MORNING} in Q1-2024" in line
    assert "took 1 day, 2:03:04 to merge" in line
    assert "included 2 commits" in line
    assert line.endswith("and had 2 review comments by [bob, carol], reviewed by 1 people [bob]")

def test_format_pr_line_without_human_response():
    line = format_pr_line(make_record(number=3))

    assert "did not have a first human response" in line
    assert "had 0 review comments by [], reviewed by 0 people []" in line

def test_print_summary(answered_record, capsys):
    records = [answered_record, make_record(number=13, creator='alice', duration=timedelta(hours=4))]

    print_summary(records)

    out = capsys.readouterr().out
    assert "Average merge time: 15:01:32" in out
    assert "Average number of comments per PR: 1.00" in out
    assert "Average number of commits per PR: 1.50" in out
    assert "Day of the week with the most PRs created: Monday" in out
    assert "Time of the day with the most first human responses: " + pr_stats.AFTERNOON in out
    assert "Names of all developers who created, merged, reviewed, commented on, or approved PRs: [alice, bob, carol]" in out
    assert "Top reviewer: bob" in out
    assert "Top first human responder: bob" in out
    assert "Top merger: alice" in out
    assert out.rstrip().endswith("-" * 40)

def test_print_summary_empty(capsys):
    print_summary([])

    out = capsys.readouterr().out
    assert "Average merge time: 0:00:00" in out
    assert "Average number of reviewers per PR: 0.00" in out
    assert "Top creator: \n" in out
    assert "approved PRs: []" in out

def test_print_records(answered_record, capsys):
    print_records([answered_record, make_record(number=13)])

    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("PR #12:")
    assert lines[1].startswith("PR #13:")

def test_print_developer_activity(answered_record, capsys):
    print_developer_activity([answered_record])

    out = capsys.readouterr().out
    assert "Per-developer activity:" in out
    rows = {line.split()[0]: line.split()[1:] for line in out.splitlines()[3:] if line.strip()}
    assert rows['alice'] == ['1', '0', '0', '0']
    assert rows['bob'] == ['0', '1', '1', '1']
    assert rows['carol'] == ['0', '0', '1', '0']

def test_print_debug_table(capsys):
    merged = Mock()
    merged.number = 5
    merged.created_at = datetime(2024, 1, 2, 3, 4, tzinfo=timezone.utc)
    merged.merged_at = datetime(2024, 1, 3, 8, 0, tzinfo=timezone.utc)
    merged.user.login = 'alice'

    closed = Mock()
    closed.number = 6
    closed.created_at = datetime(2024, 1, 4, 10, 0, tzinfo=timezone.utc)
    closed.merged_at = None
    closed.user.login = 'bob'

    print_debug_table([merged, closed])

    out = capsys.readouterr().out
    assert "Detailed PR Information:" in out
    assert "2024-01-02 03:04" in out
    assert "2024-01-03 08:00" in out
    assert "not merged" in out
    assert "alice" in out
    assert "bob" in out
