"""
Restock suggestions from recent sales.

Recent sale lines are serialized to JSON and handed to a ``RestockSuggester``,
which returns a JSON array of ``{itemName, suggestedRestockQuantity}``. The
default suggester asks a Gemini model through the Generative Language REST
API; tests substitute their own.
"""
import json
import logging
from typing import Optional, Protocol, Union

import requests

import config
from database import Store
from schemas import RestockError, RestockSuggestionsOut

logger = logging.getLogger(__name__)

NO_SALES_PLACEHOLDER = [{"itemName": "No sales data available", "suggestedRestockQuantity": "N/A"}]
FAILURE_MESSAGE = "Failed to generate restocking suggestions."

PROMPT_TEMPLATE = """You are an inventory management expert for a grocery store. Analyze the recent sales data and provide restocking suggestions.

Recent Sales Data:
{recent_sales_data}

Based on this data, suggest reasonable restocking levels for each item. Respond with a JSON array of objects, each containing the item name and suggested restock quantity, using the keys "itemName" and "suggestedRestockQuantity". Make sure the response is parseable as JSON.
"""


class RestockSuggestionError(Exception):
    """Raised when the suggestion backend cannot produce a usable answer."""


class RestockSuggester(Protocol):
    def suggest(self, recent_sales_data: str) -> str:
        ...


def format_sales_data(store: Store, limit: Optional[int] = None) -> str:
    """Serialize the line items of the last ``limit`` sales for the model."""
    if limit is None:
        limit = config.RECENT_SALES_LIMIT
    records = [
        {
            "itemName": line.name,
            "quantitySold": line.quantity,
            "saleDate": sale.timestamp.date().isoformat(),
        }
        for sale in store.recent_sales(limit)
        for line in sale.items
    ]
    return json.dumps(records)


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


class GeminiRestockSuggester:
    """Restock suggestions from a Gemini model over the REST API."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 api_base: Optional[str] = None, timeout: Optional[int] = None):
        self.api_key = api_key if api_key is not None else config.GEMINI_API_KEY
        self.model = model or config.GEMINI_MODEL
        self.api_base = (api_base or config.GEMINI_API_BASE).rstrip("/")
        self.timeout = timeout if timeout is not None else config.GEMINI_TIMEOUT

    def suggest(self, recent_sales_data: str) -> str:
        if not self.api_key:
            raise RestockSuggestionError("GEMINI_API_KEY is not configured")

        payload = {
            "contents": [{"parts": [{"text": PROMPT_TEMPLATE.format(recent_sales_data=recent_sales_data)}]}],
            "generationConfig": {"responseMimeType": "application/json"},
        }
        try:
            resp = requests.post(
                f"{self.api_base}/models/{self.model}:generateContent",
                params={"key": self.api_key},
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RestockSuggestionError(f"Request to {self.model} failed: {e}") from e
        if resp.status_code >= 400:
            raise RestockSuggestionError(f"{self.model} returned HTTP {resp.status_code}: {resp.text[:200]}")

        try:
            body = resp.json()
            text = body["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise RestockSuggestionError("Unexpected response shape from model") from e

        text = _strip_code_fence(text)
        try:
            parsed = json.loads(text)
        except ValueError as e:
            raise RestockSuggestionError("Model output is not valid JSON") from e
        if not isinstance(parsed, list):
            raise RestockSuggestionError("Model output is not a JSON array")
        return text


def get_restock_suggestions(store: Store, suggester: RestockSuggester) -> Union[RestockSuggestionsOut, RestockError]:
    """
    Ask ``suggester`` for restock quantities based on recent sales.

    With no sales on record the placeholder suggestion is returned and the
    suggester is not called. Any failure from the suggester becomes a
    ``RestockError``; nothing is retried.
    """
    try:
        sales_data = format_sales_data(store)
        if sales_data == "[]":
            return RestockSuggestionsOut(restock_suggestions=json.dumps(NO_SALES_PLACEHOLDER))
        return RestockSuggestionsOut(restock_suggestions=suggester.suggest(sales_data))
    except Exception:
        logger.exception("Error getting restock suggestions")
        return RestockError(error=FAILURE_MESSAGE)
