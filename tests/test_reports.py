"""
Report lifecycle tests: creation side effects, status transitions and reads.
"""
import asyncio

import pytest
from fastapi import BackgroundTasks

from app.core.settings import settings
from app.models.report import ReportCreate
from app.models.tables import Notification, Report
from app.models.user import CurrentUser
from app.services.report_service import ReportService


@pytest.fixture
def citizen(register_user):
    return register_user(name="Asha", email="asha@example.com")


@pytest.fixture
def officer(register_user):
    return register_user(name="Officer Two", role="ward_officer", ward_id=2, email="officer2@example.com")


@pytest.fixture
def admin(register_user):
    return register_user(name="Admin", role="admin", email="admin@example.com")


def get_status(client, report_id):
    return client.get(f'/reports/{report_id}').json()


class TestCreateReport:

    def test_requires_authentication(self, client, report_payload):
        assert client.post('/reports', json=report_payload).status_code == 401

    def test_status_forced_to_pending(self, client, citizen, report_payload):
        resp = client.post('/reports', json={**report_payload, "status": "resolved"}, headers=citizen["headers"])
        assert resp.status_code == 201
        assert resp.json()["message"] == "Report created"

        report = get_status(client, resp.json()["id"])
        assert report["status"] == "pending"
        assert report["resolved_at"] is None

    def test_unknown_ward_is_not_found(self, client, citizen, report_payload):
        resp = client.post('/reports', json={**report_payload, "ward_id": 99}, headers=citizen["headers"])
        assert resp.status_code == 404

    def test_invalid_urgency_rejected(self, client, citizen, report_payload):
        resp = client.post('/reports', json={**report_payload, "urgency": "apocalyptic"}, headers=citizen["headers"])
        assert resp.status_code == 422

    def test_image_urls_round_trip_as_list(self, client, citizen, create_report):
        report_id = create_report(citizen["headers"], image_urls=["a.jpg", "b.jpg"])
        assert get_status(client, report_id)["image_urls"] == ["a.jpg", "b.jpg"]

    def test_image_urls_default_to_empty(self, client, citizen, create_report):
        report_id = create_report(citizen["headers"], image_urls=None)
        assert get_status(client, report_id)["image_urls"] == []

    def test_citizen_may_report_in_any_ward(self, client, register_user, create_report):
        local = register_user(role="volunteer", ward_id=1)
        report_id = create_report(local["headers"], ward_id=5)
        assert get_status(client, report_id)["ward_id"] == 5

    def test_officers_of_ward_are_notified(self, client, citizen, officer, register_user, create_report, db_session):
        other_ward_officer = register_user(role="ward_officer", ward_id=3)

        report_id = create_report(citizen["headers"])

        mine = client.get('/notifications', headers=officer["headers"]).json()
        assert len(mine) == 1
        assert mine[0]["read_status"] is False
        assert "Garbage Pile" in mine[0]["message"]

        theirs = client.get('/notifications', headers=other_ward_officer["headers"]).json()
        assert theirs == []

        # Reporter is not notified in-app
        assert client.get('/notifications', headers=citizen["headers"]).json() == []
        assert db_session.query(Report).filter(Report.id == report_id).count() == 1

    def test_notification_message_truncates_description(self, client, citizen, officer, create_report, report_payload):
        create_report(citizen["headers"])
        message = client.get('/notifications', headers=officer["headers"]).json()[0]["message"]

        expected = f"New Garbage Pile report in your ward: {report_payload['description'][:50]}..."
        assert message == expected

    def test_emails_sent_to_reporter_and_ward_officers(self, client, citizen, officer, create_report, mailer):
        create_report(citizen["headers"])

        assert mailer.subjects_for(citizen["email"]) == ["Report Confirmation: Garbage Pile"]
        assert mailer.subjects_for(officer["email"]) == ["New Civic Report in Your Ward: Garbage Pile"]
        assert mailer.sent[0]["data"]["ward_name"] == "Anna Nagar"

    def test_email_failure_does_not_fail_request(self, client, citizen, officer, create_report, mailer, db_session):
        mailer.succeed = False
        create_report(citizen["headers"])

        assert len(mailer.sent) == 2
        assert db_session.query(Notification).filter(Notification.user_id == officer["id"]).count() == 1


class TestListAndDetail:

    def test_newest_first_with_names(self, client, citizen, create_report):
        first = create_report(citizen["headers"], category="Clogged Drain")
        second = create_report(citizen["headers"], category="Dead Animal")

        reports = client.get('/reports').json()
        assert [r["id"] for r in reports] == [second, first]
        assert reports[0]["reporter_name"] == "Asha"
        assert reports[0]["ward_name"] == "Anna Nagar"

    def test_filters(self, client, citizen, officer, create_report):
        drain = create_report(citizen["headers"], category="Clogged Drain", ward_id=2)
        create_report(citizen["headers"], category="Garbage Pile", ward_id=4)
        client.patch(f'/reports/{drain}/status', json={"status": "verified"}, headers=officer["headers"])

        assert [r["id"] for r in client.get('/reports', params={"category": "Clogged Drain"}).json()] == [drain]
        assert [r["ward_id"] for r in client.get('/reports', params={"ward_id": 4}).json()] == [4]
        assert [r["id"] for r in client.get('/reports', params={"status": "verified"}).json()] == [drain]
        assert client.get('/reports', params={"status": "verified", "ward_id": 4}).json() == []

    def test_unknown_status_filter_rejected(self, client):
        assert client.get('/reports', params={"status": "lost"}).status_code == 400

    def test_detail_includes_comments_oldest_first(self, client, citizen, register_user, create_report):
        neighbour = register_user(name="Neighbour")
        report_id = create_report(citizen["headers"])

        client.post('/community/comments', json={"report_id": report_id, "content": "Seen it too"}, headers=neighbour["headers"])
        client.post('/community/comments', json={"report_id": report_id, "content": "Still there"}, headers=citizen["headers"])

        detail = client.get(f'/reports/{report_id}').json()
        assert [c["content"] for c in detail["comments"]] == ["Seen it too", "Still there"]
        assert [c["user_name"] for c in detail["comments"]] == ["Neighbour", "Asha"]

    def test_missing_report_is_404(self, client):
        resp = client.get('/reports/12345')
        assert resp.status_code == 404
        assert resp.json()["error"] == "Report not found"


class TestStatusTransitions:

    def test_full_lifecycle_stamps_resolution_only_when_resolved(self, client, citizen, officer, create_report):
        report_id = create_report(citizen["headers"])

        for step in ("verified", "in_progress"):
            resp = client.patch(f'/reports/{report_id}/status', json={"status": step}, headers=officer["headers"])
            assert resp.status_code == 200
            assert resp.json() == {"message": "Status updated"}
            report = get_status(client, report_id)
            assert report["status"] == step
            assert report["resolved_at"] is None

        client.patch(f'/reports/{report_id}/status', json={"status": "resolved"}, headers=officer["headers"])
        report = get_status(client, report_id)
        assert report["status"] == "resolved"
        assert report["resolved_at"] is not None

        client.patch(f'/reports/{report_id}/status', json={"status": "closed"}, headers=officer["headers"])
        report = get_status(client, report_id)
        assert report["status"] == "closed"
        assert report["resolved_at"] is None

    @pytest.mark.parametrize("role", ["citizen", "volunteer"])
    def test_non_officer_forbidden_and_status_unchanged(self, client, register_user, citizen, create_report, role):
        report_id = create_report(citizen["headers"])
        caller = register_user(role=role)

        resp = client.patch(f'/reports/{report_id}/status', json={"status": "verified"}, headers=caller["headers"])
        assert resp.status_code == 403
        assert get_status(client, report_id)["status"] == "pending"

    def test_non_officer_forbidden_even_for_missing_report(self, client, citizen):
        resp = client.patch('/reports/999/status', json={"status": "verified"}, headers=citizen["headers"])
        assert resp.status_code == 403

    def test_requires_token(self, client, citizen, create_report):
        report_id = create_report(citizen["headers"])
        assert client.patch(f'/reports/{report_id}/status', json={"status": "verified"}).status_code == 401

    def test_officer_outside_ward_forbidden(self, client, citizen, register_user, create_report):
        report_id = create_report(citizen["headers"], ward_id=2)
        outsider = register_user(role="ward_officer", ward_id=6)

        resp = client.patch(f'/reports/{report_id}/status', json={"status": "verified"}, headers=outsider["headers"])
        assert resp.status_code == 403
        assert get_status(client, report_id)["status"] == "pending"

    def test_admin_may_act_in_any_ward(self, client, citizen, admin, create_report):
        report_id = create_report(citizen["headers"], ward_id=7)
        resp = client.patch(f'/reports/{report_id}/status', json={"status": "verified"}, headers=admin["headers"])
        assert resp.status_code == 200

    @pytest.mark.parametrize("target", ["in_progress", "resolved", "closed"])
    def test_skipping_states_rejected(self, client, citizen, officer, create_report, target):
        report_id = create_report(citizen["headers"])
        resp = client.patch(f'/reports/{report_id}/status', json={"status": target}, headers=officer["headers"])

        assert resp.status_code == 400
        assert resp.json()["code"] == "VALIDATION_ERROR"
        assert get_status(client, report_id)["status"] == "pending"

    def test_backward_move_rejected(self, client, citizen, officer, create_report):
        report_id = create_report(citizen["headers"])
        client.patch(f'/reports/{report_id}/status', json={"status": "verified"}, headers=officer["headers"])

        resp = client.patch(f'/reports/{report_id}/status', json={"status": "pending"}, headers=officer["headers"])
        assert resp.status_code == 400
        assert get_status(client, report_id)["status"] == "verified"

    def test_same_status_is_noop(self, client, citizen, officer, create_report):
        report_id = create_report(citizen["headers"])
        for step in ("verified", "in_progress", "resolved"):
            client.patch(f'/reports/{report_id}/status', json={"status": step}, headers=officer["headers"])
        stamped = get_status(client, report_id)["resolved_at"]

        resp = client.patch(f'/reports/{report_id}/status', json={"status": "resolved"}, headers=officer["headers"])
        assert resp.status_code == 200
        assert get_status(client, report_id)["resolved_at"] == stamped

    def test_unknown_status_value_rejected(self, client, citizen, officer, create_report):
        report_id = create_report(citizen["headers"])
        resp = client.patch(f'/reports/{report_id}/status', json={"status": "archived"}, headers=officer["headers"])
        assert resp.status_code == 422

    def test_missing_report_is_404_for_officer(self, client, officer):
        resp = client.patch('/reports/999/status', json={"status": "verified"}, headers=officer["headers"])
        assert resp.status_code == 404


class TestRelaxedTransitions:

    @pytest.fixture(autouse=True)
    def relaxed(self, monkeypatch):
        monkeypatch.setattr(settings, "STRICT_STATUS_TRANSITIONS", False)

    def test_any_status_accepted_and_resolution_tracked(self, client, citizen, officer, create_report):
        report_id = create_report(citizen["headers"])

        jump = client.patch(f'/reports/{report_id}/status', json={"status": "resolved"}, headers=officer["headers"])
        assert jump.status_code == 200
        report = get_status(client, report_id)
        assert report["status"] == "resolved"
        assert report["resolved_at"] is not None

        back = client.patch(f'/reports/{report_id}/status', json={"status": "verified"}, headers=officer["headers"])
        assert back.status_code == 200
        report = get_status(client, report_id)
        assert report["status"] == "verified"
        assert report["resolved_at"] is None

    def test_reapplying_resolved_stamps_again(self, client, citizen, officer, create_report, db_session):
        report_id = create_report(citizen["headers"])
        client.patch(f'/reports/{report_id}/status', json={"status": "resolved"}, headers=officer["headers"])

        db_session.query(Report).filter(Report.id == report_id).update({Report.resolved_at: None})
        db_session.commit()

        again = client.patch(f'/reports/{report_id}/status', json={"status": "resolved"}, headers=officer["headers"])
        assert again.status_code == 200
        assert get_status(client, report_id)["resolved_at"] is not None

    def test_role_and_ward_checks_still_apply(self, client, citizen, register_user, create_report):
        report_id = create_report(citizen["headers"], ward_id=2)
        outsider = register_user(role="ward_officer", ward_id=5)

        assert client.patch(f'/reports/{report_id}/status', json={"status": "closed"}, headers=citizen["headers"]).status_code == 403
        assert client.patch(f'/reports/{report_id}/status', json={"status": "closed"}, headers=outsider["headers"]).status_code == 403


class SlowMailer:
    """Mailer whose sends take a while; records when each one actually ran."""

    def __init__(self):
        self.sent = []

    async def send_report_email(self, to, subject, report_data):
        await asyncio.sleep(0.05)
        self.sent.append(to)
        return True


class TestEmailDelivery:

    @pytest.fixture
    def service(self, db_session):
        return ReportService(db_session, SlowMailer())

    def test_create_returns_before_any_email_is_sent(self, service, citizen, officer, register_user, report_payload):
        register_user(role="ward_officer", ward_id=2)
        background = BackgroundTasks()
        creator = CurrentUser(id=citizen["id"], email=citizen["email"], role="citizen")

        report = service.create_report(ReportCreate(**report_payload), creator, background)

        assert report.id is not None
        assert service.mailer.sent == []
        assert len(background.tasks) == 3

        asyncio.run(background())
        assert service.mailer.sent[0] == citizen["email"]
        assert len(service.mailer.sent) == 3

    def test_report_copy_is_queued(self, service, citizen, create_report):
        report_id = create_report(citizen["headers"])
        background = BackgroundTasks()
        caller = CurrentUser(id=citizen["id"], email=citizen["email"], role="citizen")

        service.send_report_copy(report_id, caller, background)

        assert service.mailer.sent == []
        asyncio.run(background())
        assert service.mailer.sent == [citizen["email"]]


class TestSendEmail:

    def test_copy_sent_to_caller(self, client, citizen, register_user, create_report, mailer):
        report_id = create_report(citizen["headers"])
        reader = register_user(email="reader@example.com")
        mailer.sent.clear()

        resp = client.post(f'/reports/{report_id}/send-email', headers=reader["headers"])
        assert resp.status_code == 200
        assert resp.json()["message"] == "Email sent successfully"
        assert mailer.subjects_for("reader@example.com") == ["Report Copy: Garbage Pile"]

    def test_unknown_report(self, client, citizen):
        assert client.post('/reports/4040/send-email', headers=citizen["headers"]).status_code == 404

    def test_requires_token(self, client):
        assert client.post('/reports/1/send-email').status_code == 401


class TestScenarios:

    def test_asha_report_reaches_ward_two_officer(self, client, register_user, mailer):
        resp = client.post('/auth/register', json={"name": "Asha", "email": "asha.s@example.com", "password": "asha-pw"})
        assert resp.status_code == 201
        officer = register_user(name="Ward 2 Officer", role="ward_officer", ward_id=2)

        token = client.post('/auth/login', json={"email": "asha.s@example.com", "password": "asha-pw"}).json()["token"]
        headers = {"Authorization": f"Bearer {token}"}

        created = client.post('/reports', json={
            "ward_id": 2,
            "category": "Garbage Pile",
            "urgency": "high",
            "description": "Overflowing heap outside the school gate",
            "lat": 9.93,
            "lng": 78.14,
        }, headers=headers)
        assert created.status_code == 201

        listed = client.get('/reports').json()
        mine = [r for r in listed if r["id"] == created.json()["id"]]
        assert len(mine) == 1
        assert mine[0]["status"] == "pending"

        notes = client.get('/notifications', headers=officer["headers"]).json()
        unread = [n for n in notes if not n["read_status"]]
        assert len(unread) == 1
        assert "Garbage Pile" in unread[0]["message"]

    def test_officer_resolves_then_citizen_rates(self, client, citizen, officer, admin, create_report):
        report_id = create_report(citizen["headers"])

        for step in ("verified", "in_progress"):
            client.patch(f'/reports/{report_id}/status', json={"status": step}, headers=officer["headers"])
            assert get_status(client, report_id)["resolved_at"] is None

        client.patch(f'/reports/{report_id}/status', json={"status": "resolved"}, headers=officer["headers"])
        assert get_status(client, report_id)["resolved_at"] is not None

        resp = client.post('/feedback', json={"rating": 4, "report_id": report_id}, headers=citizen["headers"])
        assert resp.status_code == 201

        feedback = client.get('/feedback', headers=admin["headers"]).json()
        assert feedback[0]["report_id"] == report_id
        assert feedback[0]["rating"] == 4
        assert feedback[0]["report_category"] == "Garbage Pile"
