"""Tests for parsing bd --json output."""

import json

import pytest

from sitrep.integrations.beads.types import BeadsIssue, parse_bd_issue_list, parse_bd_stats


def test_parse_bd_stats_short_keys() -> None:
    stats = parse_bd_stats(
        json.dumps(
            {
                "total": 10,
                "open": 4,
                "in_progress": 2,
                "blocked": 1,
                "closed": 3,
                "ready": 3,
                "average_lead_time": 5.5,
            }
        )
    )

    assert stats.to_dict() == {
        "total": 10,
        "open": 4,
        "in_progress": 2,
        "blocked": 1,
        "closed": 3,
        "ready": 3,
        "average_lead_time": 5.5,
    }


def test_parse_bd_stats_issues_suffix_keys() -> None:
    stats = parse_bd_stats(
        json.dumps(
            {
                "total_issues": 7,
                "open_issues": 3,
                "in_progress_issues": 1,
                "blocked_issues": 0,
                "closed_issues": 3,
                "ready_issues": 2,
                "average_lead_time_hours": 12,
            }
        )
    )

    assert stats.total == 7
    assert stats.open == 3
    assert stats.ready == 2
    assert stats.average_lead_time == 12.0


def test_parse_bd_stats_rejects_non_object() -> None:
    with pytest.raises(ValueError):
        parse_bd_stats("[]")


def test_parse_bd_stats_rejects_non_json() -> None:
    with pytest.raises(ValueError):
        parse_bd_stats("Error: database locked")


@pytest.mark.parametrize("stdout", ["", "  \n", "null"])
def test_parse_bd_issue_list_empty_output(stdout: str) -> None:
    assert parse_bd_issue_list(stdout) == []


def test_parse_bd_issue_list_reads_issue_fields() -> None:
    stdout = json.dumps(
        [
            {
                "id": "bd-1",
                "title": "Fix login",
                "status": "in_progress",
                "priority": 9,
                "issue_type": "bug",
                "created_at": "2024-01-14T10:00:00Z",
                "updated_at": "2024-01-15T10:00:00Z",
                "labels": ["auth", 3],
                "assignee": "sam",
                "dependency_count": -1,
            }
        ]
    )

    [issue] = parse_bd_issue_list(stdout)

    assert issue.id == "bd-1"
    assert issue.priority == 4
    assert issue.labels == ["auth"]
    assert issue.assignee == "sam"
    assert issue.dependency_count == 0
    assert issue.closed_at is None
    assert "closed_at" not in issue.to_dict()


def test_issue_defaults_for_missing_fields() -> None:
    issue = BeadsIssue.from_dict({"id": "bd-2"})

    assert issue.priority == 2
    assert issue.status == "open"
    assert issue.issue_type == "task"
    assert issue.labels == []


def test_parse_bd_issue_list_rejects_object() -> None:
    with pytest.raises(ValueError, match="Expected issue list"):
        parse_bd_issue_list('{"id": "bd-1"}')


def test_issue_without_id_is_rejected() -> None:
    with pytest.raises(ValueError, match="without id"):
        parse_bd_issue_list('[{"title": "no id"}]')


def test_non_list_labels_are_ignored() -> None:
    issue = BeadsIssue.from_dict({"id": "bd-3", "labels": 5})

    assert issue.labels == []
