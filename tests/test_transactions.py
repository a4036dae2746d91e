from datetime import date
from decimal import Decimal

from app.models.book import Book
from app.models.category import Category
from app.models.transaction import Transaction


class TestTransactionCreation:
    """Tests for creating transactions"""

    def test_create_transaction_success(self, client, account, category, collaborator_headers):
        data = {
            "account_id": account.id,
            "category_id": category.id,
            "description": "Farmers market",
            "amount": "-32.50",
            "date": "2026-04-02",
        }

        response = client.post("/api/transactions", headers=collaborator_headers, json=data)

        assert response.status_code == 201
        transaction = response.json()
        assert transaction["amount"] == -32.50
        assert transaction["category_id"] == category.id
        assert transaction["exercised"] is False
        assert transaction["date"] == "2026-04-02"

    def test_viewer_cannot_create(self, client, account, viewer_headers):
        data = {"account_id": account.id, "description": "X", "amount": "1.00", "date": "2026-04-02"}
        response = client.post("/api/transactions", headers=viewer_headers, json=data)
        assert response.status_code == 403

    def test_unknown_account(self, client, admin_headers):
        data = {"account_id": 999, "description": "X", "amount": "1.00", "date": "2026-04-02"}
        response = client.post("/api/transactions", headers=admin_headers, json=data)
        assert response.status_code == 404

    def test_category_from_other_book_rejected(self, client, db_session, team, account, admin_headers):
        other_book = Book(team_id=team.id, name="Side Business")
        db_session.add(other_book)
        db_session.commit()
        foreign = Category(book_id=other_book.id, name="Supplies")
        db_session.add(foreign)
        db_session.commit()

        data = {
            "account_id": account.id,
            "category_id": foreign.id,
            "description": "Paper",
            "amount": "-5.00",
            "date": "2026-04-02",
        }
        response = client.post("/api/transactions", headers=admin_headers, json=data)
        assert response.status_code == 400


class TestTransactionListing:
    def _seed(self, db_session, account, category):
        for day, amount, category_id in [
            (1, "-10.00", category.id),
            (5, "-20.00", None),
            (9, "1500.00", None),
            (12, "-30.00", category.id),
        ]:
            db_session.add(
                Transaction(
                    account_id=account.id,
                    category_id=category_id,
                    description=f"Entry {day}",
                    amount=Decimal(amount),
                    date=date(2026, 5, day),
                )
            )
        db_session.commit()

    def test_newest_first(self, client, db_session, account, category, viewer_headers):
        self._seed(db_session, account, category)

        response = client.get(f"/api/transactions?account_id={account.id}", headers=viewer_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 4
        assert [t["date"] for t in body["transactions"]] == [
            "2026-05-12",
            "2026-05-09",
            "2026-05-05",
            "2026-05-01",
        ]

    def test_filters_and_pagination(self, client, db_session, account, category, viewer_headers):
        self._seed(db_session, account, category)
        base = f"/api/transactions?account_id={account.id}"

        by_date = client.get(f"{base}&start_date=2026-05-05&end_date=2026-05-10", headers=viewer_headers)
        assert by_date.json()["total"] == 2

        by_category = client.get(f"{base}&category_id={category.id}", headers=viewer_headers)
        assert by_category.json()["total"] == 2

        page = client.get(f"{base}&limit=1&offset=1", headers=viewer_headers)
        assert page.json()["total"] == 4
        assert len(page.json()["transactions"]) == 1
        assert page.json()["transactions"][0]["date"] == "2026-05-09"

    def test_outsider_cannot_list(self, client, account, outsider_headers):
        response = client.get(f"/api/transactions?account_id={account.id}", headers=outsider_headers)
        assert response.status_code == 403


class TestTransactionUpdateAndDelete:
    def test_get(self, client, transaction, viewer_headers):
        response = client.get(f"/api/transactions/{transaction.id}", headers=viewer_headers)
        assert response.status_code == 200
        assert response.json()["description"] == "Weekly shop"

    def test_partial_update(self, client, transaction, collaborator_headers):
        response = client.put(
            f"/api/transactions/{transaction.id}", headers=collaborator_headers, json={"exercised": True}
        )
        assert response.status_code == 200
        assert response.json()["exercised"] is True
        assert response.json()["amount"] == -84.20

    def test_explicit_null_rejected(self, client, transaction, collaborator_headers):
        for field in ("description", "amount", "date", "exercised"):
            response = client.put(
                f"/api/transactions/{transaction.id}", headers=collaborator_headers, json={field: None}
            )
            assert response.status_code == 422, field

        stored = client.get(f"/api/transactions/{transaction.id}", headers=collaborator_headers).json()
        assert stored["amount"] == -84.20
        assert stored["date"] == "2026-03-14"

    def test_category_can_be_cleared(self, client, transaction, collaborator_headers):
        response = client.put(
            f"/api/transactions/{transaction.id}", headers=collaborator_headers, json={"category_id": None}
        )
        assert response.status_code == 200
        assert response.json()["category_id"] is None

    def test_viewer_cannot_update(self, client, transaction, viewer_headers):
        response = client.put(f"/api/transactions/{transaction.id}", headers=viewer_headers, json={"note": "x"})
        assert response.status_code == 403

    def test_delete(self, client, transaction, collaborator_headers):
        assert client.delete(f"/api/transactions/{transaction.id}", headers=collaborator_headers).status_code == 204
        assert client.get(f"/api/transactions/{transaction.id}", headers=collaborator_headers).status_code == 404

    def test_hidden_with_deleted_book(self, client, book, transaction, admin_headers):
        client.delete(f"/api/books/{book.id}", headers=admin_headers)
        assert client.get(f"/api/transactions/{transaction.id}", headers=admin_headers).status_code == 404
