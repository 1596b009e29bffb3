"""Pytest fixtures for the LankaPOS API."""

import pytest
from fastapi.testclient import TestClient

from database import Store
from main import app, get_store, get_suggester


class StubSuggester:
    """Records what it was asked and answers with a canned JSON array."""

    def __init__(self, answer='[{"itemName": "White Sugar 1kg", "suggestedRestockQuantity": 40}]', error=None):
        self.answer = answer
        self.error = error
        self.calls = []

    def suggest(self, recent_sales_data):
        self.calls.append(recent_sales_data)
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture
def store() -> Store:
    return Store()


@pytest.fixture
def small_store() -> Store:
    # Item X from the sale scenarios: price 100, stock 5
    return Store(
        items=[
            {"id": "ITM001", "name": "X", "price": 100, "stock": 5},
            {"id": "ITM002", "name": "Y", "price": 40, "stock": 50, "category": "Snacks"},
        ],
        low_stock_threshold=10,
    )


@pytest.fixture
def suggester() -> StubSuggester:
    return StubSuggester()


@pytest.fixture
def client(store, suggester):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_suggester] = lambda: suggester
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
