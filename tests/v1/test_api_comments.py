# tests/v1/test_api_comments.py
"""Tests for comment endpoints."""

from fastapi import status

from newsdesk.models import Comment


def test_create_comment(client, test_post, auth_token) -> None:
    response = client.post(
        f"/api/v1/posts/{test_post.id}/comments",
        json={"content": "Thanks for the update"},
        headers=auth_token,
    )

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["content"] == "Thanks for the update"
    assert data["post_id"] == test_post.id
    assert "is_hidden" not in data


def test_create_comment_requires_auth(client, test_post) -> None:
    response = client.post(
        f"/api/v1/posts/{test_post.id}/comments",
        json={"content": "Anonymous thoughts"},
    )

    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}


def test_invalid_token_is_rejected(client, test_post) -> None:
    response = client.post(
        f"/api/v1/posts/{test_post.id}/comments",
        json={"content": "Hello"},
        headers={"Authorization": "Bearer not-a-token"},
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_invalid_comment_returns_400(client, test_post, auth_token) -> None:
    response = client.post(
        f"/api/v1/posts/{test_post.id}/comments",
        json={"content": "<script>alert(1)</script>"},
        headers=auth_token,
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "dangerous" in response.json()["detail"]


def test_blocked_comment_returns_422(client, test_post, auth_token, add_keyword) -> None:
    add_keyword("spam", "block")

    response = client.post(
        f"/api/v1/posts/{test_post.id}/comments",
        json={"content": "this is SPAM content"},
        headers=auth_token,
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["detail"] == "Comment contains prohibited content"


def test_comment_on_missing_post_returns_404(client, auth_token) -> None:
    response = client.post(
        "/api/v1/posts/9999/comments",
        json={"content": "Hello there"},
        headers=auth_token,
    )

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_shadow_banned_author_sees_success(
    client, db_session, test_post, test_user, auth_token, other_auth_token
) -> None:
    test_user.is_shadow_banned = True
    db_session.flush()

    response = client.post(
        f"/api/v1/posts/{test_post.id}/comments",
        json={"content": "Nobody will notice"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    comment_id = response.json()["id"]

    own_view = client.get(f"/api/v1/posts/{test_post.id}/comments", headers=auth_token)
    other_view = client.get(f"/api/v1/posts/{test_post.id}/comments", headers=other_auth_token)
    anonymous_view = client.get(f"/api/v1/posts/{test_post.id}/comments")

    assert [c["id"] for c in own_view.json()] == [comment_id]
    assert other_view.json() == []
    assert anonymous_view.json() == []


def test_list_comments_with_replies(client, test_post, auth_token, other_auth_token) -> None:
    parent = client.post(
        f"/api/v1/posts/{test_post.id}/comments",
        json={"content": "Parent comment"},
        headers=auth_token,
    ).json()
    reply = client.post(
        f"/api/v1/posts/{test_post.id}/comments",
        json={"content": "A reply", "parent_comment_id": parent["id"]},
        headers=other_auth_token,
    ).json()

    listing = client.get(f"/api/v1/posts/{test_post.id}/comments")
    replies = client.get(f"/api/v1/comments/{parent['id']}/replies")

    assert [c["id"] for c in listing.json()] == [parent["id"], reply["id"]]
    assert [c["id"] for c in replies.json()] == [reply["id"]]
    assert replies.json()[0]["parent_comment_id"] == parent["id"]


def test_delete_own_comment(client, db_session, test_post, auth_token) -> None:
    created = client.post(
        f"/api/v1/posts/{test_post.id}/comments",
        json={"content": "Delete me"},
        headers=auth_token,
    ).json()

    response = client.delete(f"/api/v1/comments/{created['id']}", headers=auth_token)

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert db_session.get(Comment, created["id"]) is None


def test_delete_other_users_comment_forbidden(
    client, test_post, auth_token, other_auth_token
) -> None:
    created = client.post(
        f"/api/v1/posts/{test_post.id}/comments",
        json={"content": "Keep me"},
        headers=auth_token,
    ).json()

    response = client.delete(f"/api/v1/comments/{created['id']}", headers=other_auth_token)

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_delete_missing_comment_returns_404(client, auth_token) -> None:
    response = client.delete("/api/v1/comments/31337", headers=auth_token)

    assert response.status_code == status.HTTP_404_NOT_FOUND
