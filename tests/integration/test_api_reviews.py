"""Integration tests for the review HTTP API.

The app runs against the SQLite test database through a real
ReviewCycleService; requests go through httpx ASGITransport. Payloads use
camelCase keys.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import timedelta
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from docman.database.models.review_assignment import AssignmentStatus
from docman.notifications.sender import InAppNotificationSender
from docman.review.cycle import ReviewCycleService
from docman.web.app import create_app

from .conftest import NOW


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Client for an app wired to the test database with in-app notifications."""
    app = create_app()
    app.state.session_factory = session_factory
    app.state.review_service = ReviewCycleService(
        session_factory,
        notifier=InAppNotificationSender(session_factory),
        clock=lambda: NOW,
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.mark.asyncio
async def test_create_assignments(client, people, make_document) -> None:
    document = await make_document(title="Medication Storage", author=people.author)

    response = await client.post(
        "/reviews/",
        json={
            "documentId": str(document.id),
            "assignments": [
                {"assignee": str(people.alice.id), "dueDate": "2024-01-22T12:00:00Z", "notes": "Pharmacy"},
                {"assignee": str(people.bob.id), "dueDate": "2024-01-29T12:00:00Z"},
            ],
        },
        headers={"X-User-ID": str(people.author.id)},
    )

    assert response.status_code == 201
    body = response.json()
    assert len(body) == 2
    first = body[0]
    assert first["assignee"]["firstname"] == "Alice"
    assert first["assignedBy"]["id"] == str(people.author.id)
    assert first["document"]["title"] == "Medication Storage"
    assert first["status"] == "pending"
    assert first["requiresUpdates"] is False
    assert first["notes"] == "Pharmacy"

    notifications = await client.get(f"/notifications/user/{people.alice.id}")
    [notification] = notifications.json()
    assert notification["type"] == "document_assigned"
    assert notification["message"] == 'Ada Author has assigned you the document "Medication Storage"'
    assert notification["isRead"] is False


@pytest.mark.asyncio
async def test_create_assignments_requires_at_least_one(client, people, make_document) -> None:
    document = await make_document(author=people.author)

    response = await client.post(
        "/reviews/", json={"documentId": str(document.id), "assignments": []}
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_assignments_unknown_document(client, people) -> None:
    missing = uuid4()

    response = await client.post(
        "/reviews/",
        json={
            "documentId": str(missing),
            "assignments": [{"assignee": str(people.alice.id), "dueDate": "2024-01-22T12:00:00Z"}],
        },
    )

    assert response.status_code == 404
    assert response.json() == {"detail": f"Document {missing} not found"}


@pytest.mark.asyncio
async def test_update_assignment_completes_document(
    client, people, make_document, make_assignment
) -> None:
    document = await make_document(author=people.author, reviewers=[people.alice])
    assignment = await make_assignment(document, people.alice)

    response = await client.put(
        f"/reviews/{assignment.id}",
        json={"status": "completed"},
        headers={"X-User-ID": str(people.carol.id)},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "completed"
    assert body["completedBy"]["firstname"] == "Carol"
    assert body["completedDate"].startswith("2024-01-15T12:00:00")

    review = (await client.get(f"/documents/{document.id}/review")).json()
    assert review["reviewCompleted"] is True
    assert review["reviewCompletedById"] == str(people.carol.id)
    assert review["summary"] == {"completed": 1, "total": 1, "percentage": 100}

    notifications = (await client.get(f"/notifications/user/{people.author.id}")).json()
    assert [n["type"] for n in notifications] == ["document_review_completed"]


@pytest.mark.asyncio
async def test_update_assignment_in_progress_status(
    client, people, make_document, make_assignment
) -> None:
    document = await make_document(author=people.author, reviewers=[people.alice])
    assignment = await make_assignment(document, people.alice)

    response = await client.put(f"/reviews/{assignment.id}", json={"status": "in-progress"})

    assert response.json()["status"] == AssignmentStatus.in_progress.value
    assert response.json()["completedDate"] is None


@pytest.mark.asyncio
async def test_update_assignment_requires_updates(
    client, people, make_document, make_assignment
) -> None:
    document = await make_document(author=people.author, reviewers=[people.alice])
    assignment = await make_assignment(document, people.alice)

    response = await client.put(
        f"/reviews/{assignment.id}",
        json={"requiresUpdates": True, "updateNotes": "Update the contact list"},
    )

    assert response.status_code == 200
    assert response.json()["requiresUpdates"] is True

    author_assignments = (await client.get(f"/reviews/user/{people.author.id}")).json()
    assert len(author_assignments) == 1
    assert author_assignments[0]["notes"] == (
        "Updates required based on review: Update the contact list"
    )
    assert author_assignments[0]["updateAssignmentId"] == str(assignment.id)

    notifications = (await client.get(f"/notifications/user/{people.author.id}")).json()
    assert notifications[0]["title"] == "Document Update Required"


@pytest.mark.asyncio
async def test_update_unknown_assignment(client) -> None:
    response = await client.put(f"/reviews/{uuid4()}", json={"status": "completed"})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_user_assignments_status_filter(
    client, people, make_document, make_assignment
) -> None:
    document = await make_document(author=people.author)
    await make_assignment(document, people.alice, status=AssignmentStatus.completed)

    completed = await client.get(f"/reviews/user/{people.alice.id}", params={"status": "completed"})
    pending = await client.get(f"/reviews/user/{people.alice.id}", params={"status": "pending"})
    invalid = await client.get(f"/reviews/user/{people.alice.id}", params={"status": "finished"})
    unknown = await client.get(f"/reviews/user/{uuid4()}")

    assert len(completed.json()) == 1
    assert pending.json() == []
    assert invalid.status_code == 400
    assert "Invalid status" in invalid.json()["detail"]
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_list_document_assignments(client, people, make_document, make_assignment) -> None:
    document = await make_document(author=people.author, reviewers=[people.alice])
    await make_assignment(document, people.alice, age=timedelta(days=2))
    latest = await make_assignment(document, people.alice, age=timedelta(days=1))

    response = await client.get(f"/reviews/document/{document.id}")

    assert [a["id"] for a in response.json()] == [str(latest.id)]


@pytest.mark.asyncio
async def test_overdue_and_mark_overdue(client, people, make_document, make_assignment) -> None:
    document = await make_document(author=people.author)
    late = await make_assignment(document, people.alice, due_date=NOW - timedelta(days=1))

    overdue = await client.get("/reviews/overdue")
    marked = await client.post("/maintenance/mark-overdue")

    assert [a["id"] for a in overdue.json()] == [str(late.id)]
    assert marked.json() == {"count": 1}


@pytest.mark.asyncio
async def test_force_complete_with_evaluation(
    client, people, make_document, make_assignment
) -> None:
    document = await make_document(author=people.author, reviewers=[people.alice, people.bob])
    await make_assignment(document, people.alice)
    await make_assignment(document, people.bob)

    response = await client.post(
        f"/documents/{document.id}/review/force-complete",
        params={"evaluate": "true"},
        headers={"X-User-ID": str(people.author.id)},
    )

    body = response.json()
    assert body["completed"] == 2
    assert body["decision"]["transition"] == "completed"
    assert body["decision"]["isComplete"] is True


@pytest.mark.asyncio
async def test_reset_reopens_completed_document(
    client, people, make_document, make_assignment
) -> None:
    document = await make_document(
        author=people.author, reviewers=[people.alice], review_completed=True
    )
    await make_assignment(document, people.alice, status=AssignmentStatus.completed)

    response = await client.post(f"/documents/{document.id}/review/reset")

    assert response.json()["reset"] == 1
    assert response.json()["decision"]["transition"] == "reopened"


@pytest.mark.asyncio
async def test_purge_duplicates_endpoint(client, people, make_document, make_assignment) -> None:
    document = await make_document(author=people.author)
    await make_assignment(document, people.alice, age=timedelta(days=2))
    await make_assignment(document, people.alice, age=timedelta(days=1))
    await make_assignment(document, None)

    duplicates = await client.post(
        "/maintenance/purge-duplicates", params={"document_id": str(document.id)}
    )

    assert duplicates.json() == {"count": 2}


@pytest.mark.asyncio
async def test_mark_notification_read(client, people, make_document) -> None:
    document = await make_document(title="Visitor Policy", author=people.author)
    await client.post(
        "/reviews/",
        json={
            "documentId": str(document.id),
            "assignments": [{"assignee": str(people.bob.id), "dueDate": "2024-01-22T12:00:00Z"}],
        },
    )
    [notification] = (await client.get(f"/notifications/user/{people.bob.id}")).json()

    response = await client.put(f"/notifications/{notification['id']}/read")
    unread = await client.get(
        f"/notifications/user/{people.bob.id}", params={"unread_only": "true"}
    )
    missing = await client.put(f"/notifications/{uuid4()}/read")

    assert response.json()["isRead"] is True
    assert unread.json() == []
    assert missing.status_code == 404
    assert missing.json() == {"detail": "Notification not found"}
