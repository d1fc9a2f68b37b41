# tests/v1/test_api_reports.py
"""Tests for abuse report endpoints."""

from fastapi import status


def test_report_comment(client, make_comment, test_user, other_auth_token) -> None:
    comment = make_comment(test_user)

    response = client.post(
        f"/api/v1/comments/{comment.id}/reports",
        json={"reason": "harassment", "details": "Targets another reader"},
        headers=other_auth_token,
    )

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["comment_id"] == comment.id
    assert data["reported_user_id"] == test_user.id
    assert data["is_resolved"] is False


def test_report_requires_reason(client, make_comment, test_user, other_auth_token) -> None:
    comment = make_comment(test_user)

    response = client.post(
        f"/api/v1/comments/{comment.id}/reports",
        json={"reason": ""},
        headers=other_auth_token,
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_report_missing_comment(client, other_auth_token) -> None:
    response = client.post(
        "/api/v1/comments/999/reports",
        json={"reason": "spam"},
        headers=other_auth_token,
    )

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_reported_comment_disappears_at_threshold(
    client, test_post, make_comment, make_user, headers_for, test_user, other_auth_token
) -> None:
    comment = make_comment(test_user)

    for _ in range(3):
        response = client.post(
            f"/api/v1/comments/{comment.id}/reports",
            json={"reason": "abuse"},
            headers=headers_for(make_user()),
        )
        assert response.status_code == status.HTTP_201_CREATED

    listing = client.get(f"/api/v1/posts/{test_post.id}/comments", headers=other_auth_token)
    assert comment.id not in [c["id"] for c in listing.json()]
