from datetime import date, timedelta
from decimal import Decimal

from app.models.transaction import Transaction


class TestAccountCreation:
    """Tests for creating accounts"""

    def test_create_account_success(self, client, book, collaborator_headers):
        data = {"book_id": book.id, "name": "Chase Checking", "starting_amount": "1000.00"}

        response = client.post("/api/accounts", headers=collaborator_headers, json=data)

        assert response.status_code == 201
        account = response.json()
        assert account["name"] == "Chase Checking"
        assert account["account_type"] == "debit"
        assert account["starting_amount"] == 1000.00
        assert account["book_id"] == book.id

    def test_create_credit_account(self, client, book, admin_headers):
        data = {"book_id": book.id, "name": "Visa", "account_type": "credit"}
        response = client.post("/api/accounts", headers=admin_headers, json=data)

        assert response.status_code == 201
        assert response.json()["account_type"] == "credit"
        assert response.json()["starting_amount"] == 0.00

    def test_create_account_missing_name(self, client, book, admin_headers):
        response = client.post("/api/accounts", headers=admin_headers, json={"book_id": book.id})
        assert response.status_code == 422

    def test_viewer_cannot_create(self, client, book, viewer_headers):
        response = client.post("/api/accounts", headers=viewer_headers, json={"book_id": book.id, "name": "X"})
        assert response.status_code == 403

    def test_unknown_book(self, client, admin_headers):
        response = client.post("/api/accounts", headers=admin_headers, json={"book_id": 404, "name": "X"})
        assert response.status_code == 404


class TestAccountReads:
    def test_list_book_accounts(self, client, book, account, viewer_headers):
        response = client.get(f"/api/accounts?book_id={book.id}", headers=viewer_headers)

        assert response.status_code == 200
        assert response.json()["total"] == 1
        assert response.json()["accounts"][0]["id"] == account.id

    def test_outsider_cannot_list(self, client, book, outsider_headers):
        response = client.get(f"/api/accounts?book_id={book.id}", headers=outsider_headers)
        assert response.status_code == 403

    def test_get_account(self, client, account, viewer_headers, outsider_headers):
        assert client.get(f"/api/accounts/{account.id}", headers=viewer_headers).status_code == 200
        assert client.get(f"/api/accounts/{account.id}", headers=outsider_headers).status_code == 403

    def test_get_missing_account(self, client, admin_headers):
        assert client.get("/api/accounts/999", headers=admin_headers).status_code == 404


class TestAccountUpdateAndDelete:
    def test_update(self, client, account, collaborator_headers):
        response = client.put(
            f"/api/accounts/{account.id}", headers=collaborator_headers, json={"name": "Joint Checking"}
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Joint Checking"

    def test_explicit_null_rejected(self, client, account, collaborator_headers):
        for field in ("name", "account_type", "starting_amount"):
            response = client.put(
                f"/api/accounts/{account.id}", headers=collaborator_headers, json={field: None}
            )
            assert response.status_code == 422, field

        assert client.get(f"/api/accounts/{account.id}", headers=collaborator_headers).json()["name"] == "Checking"

    def test_note_can_be_cleared(self, client, db_session, account, collaborator_headers):
        account.note = "joint"
        db_session.commit()

        response = client.put(f"/api/accounts/{account.id}", headers=collaborator_headers, json={"note": None})
        assert response.status_code == 200
        assert response.json()["note"] is None

    def test_viewer_cannot_update(self, client, account, viewer_headers):
        response = client.put(f"/api/accounts/{account.id}", headers=viewer_headers, json={"name": "X"})
        assert response.status_code == 403
        assert response.json()["detail"] == "write access required"

    def test_delete_cascades_to_transactions(self, client, db_session, account, transaction, collaborator_headers):
        response = client.delete(f"/api/accounts/{account.id}", headers=collaborator_headers)

        assert response.status_code == 204
        assert db_session.query(Transaction).count() == 0
        assert client.get(f"/api/accounts/{account.id}", headers=collaborator_headers).status_code == 404


class TestAccountBalance:
    def _book(self, db_session, account, amount, on, exercised):
        db_session.add(
            Transaction(
                account_id=account.id, description="Entry", amount=Decimal(amount), date=on, exercised=exercised
            )
        )
        db_session.commit()

    def test_exercised_and_projected(self, client, db_session, account, viewer_headers):
        self._book(db_session, account, "1500.00", date(2026, 3, 1), True)
        self._book(db_session, account, "-84.20", date(2026, 3, 14), False)
        self._book(db_session, account, "-900.00", date(2026, 4, 1), False)

        response = client.get(
            f"/api/accounts/{account.id}/balance?up_to_date=2026-03-31", headers=viewer_headers
        )

        assert response.status_code == 200
        balance = response.json()
        assert balance["account_id"] == account.id
        assert balance["up_to_date"] == "2026-03-31"
        assert balance["exercised_balance"] == 1500.00
        assert balance["projected_balance"] == 1415.80

    def test_defaults_to_today(self, client, db_session, account, viewer_headers):
        today = date.today()
        self._book(db_session, account, "10.00", today, True)
        self._book(db_session, account, "99.00", today + timedelta(days=1), True)

        balance = client.get(f"/api/accounts/{account.id}/balance", headers=viewer_headers).json()

        assert balance["up_to_date"] == today.isoformat()
        assert balance["exercised_balance"] == 10.00
        assert balance["projected_balance"] == 10.00

    def test_account_without_transactions(self, client, account, viewer_headers):
        balance = client.get(f"/api/accounts/{account.id}/balance", headers=viewer_headers).json()
        assert balance["exercised_balance"] == 0
        assert balance["projected_balance"] == 0

    def test_outsider_cannot_read_balance(self, client, account, outsider_headers):
        response = client.get(f"/api/accounts/{account.id}/balance", headers=outsider_headers)
        assert response.status_code == 403

    def test_missing_account(self, client, admin_headers):
        assert client.get("/api/accounts/999/balance", headers=admin_headers).status_code == 404
