"""
GraphQL Subscription Tests

Tests for bookAdded over the graphql-transport-ws protocol.

These tests use isolated_client, so the WebSocket and every HTTP request
get their own database session, as they do when the API is deployed.
"""

import time

from fastapi.testclient import TestClient
from sqlalchemy import Engine

from library_api.services.events import EventType
from tests.graphql_helpers import graphql_query
from tests.test_mutations import ADD_BOOK, NEW_BOOK

BOOK_ADDED = """
subscription {
    bookAdded {
        title
        genres
        author { name bookCount books { title } }
    }
}
"""

BOOK_ADDED_NESTED = """
subscription {
    bookAdded {
        title
        author {
            bookCount
            books { title author { bookCount } }
        }
    }
}
"""


def wait_for_subscribers(client: TestClient, expected: int, timeout: float = 2.0) -> None:
    """Block until the event bus has the expected number of bookAdded streams."""
    pubsub = client.app.state.pubsub
    deadline = time.monotonic() + timeout
    while pubsub.subscriber_count(EventType.BOOK_ADDED) != expected:
        if time.monotonic() > deadline:
            raise AssertionError(
                f"expected {expected} subscribers, "
                f"found {pubsub.subscriber_count(EventType.BOOK_ADDED)}"
            )
        time.sleep(0.01)


def wait_for_idle_pool(engine: Engine, timeout: float = 2.0) -> None:
    """Block until no pooled connection is checked out."""
    deadline = time.monotonic() + timeout
    while engine.pool.checkedout() != 0:
        if time.monotonic() > deadline:
            raise AssertionError(
                f"{engine.pool.checkedout()} connections still checked out"
            )
        time.sleep(0.01)


def open_subscription(websocket, query: str = BOOK_ADDED, operation_id: str = "1") -> None:
    websocket.send_json({"type": "connection_init"})
    assert websocket.receive_json()["type"] == "connection_ack"
    websocket.send_json({
        "id": operation_id,
        "type": "subscribe",
        "payload": {"query": query},
    })


class TestBookAddedSubscription:
    """Tests for the bookAdded subscription."""

    def test_subscriber_receives_added_book(
        self, isolated_client: TestClient, isolated_token: str
    ):
        client = isolated_client
        with client.websocket_connect("/graphql", subprotocols=["graphql-transport-ws"]) as ws:
            open_subscription(ws)
            wait_for_subscribers(client, 1)

            result = graphql_query(client, ADD_BOOK, variables=NEW_BOOK, token=isolated_token)
            assert "errors" not in result

            message = ws.receive_json()
            assert message == {
                "id": "1",
                "type": "next",
                "payload": {
                    "data": {
                        "bookAdded": {
                            "title": "Refactoring to patterns",
                            "genres": ["refactoring", "patterns"],
                            "author": {
                                "name": "Joshua Kerievsky",
                                "bookCount": 1,
                                "books": [{"title": "Refactoring to patterns"}],
                            },
                        }
                    }
                },
            }

            # Nothing else is queued ahead of the pong
            ws.send_json({"type": "ping"})
            assert ws.receive_json()["type"] == "pong"

            ws.send_json({"id": "1", "type": "complete"})

    def test_nested_author_reflects_latest_books(
        self, isolated_client: TestClient, isolated_token: str, file_engine: Engine
    ):
        client = isolated_client
        with client.websocket_connect("/graphql", subprotocols=["graphql-transport-ws"]) as ws:
            open_subscription(ws, query=BOOK_ADDED_NESTED)
            wait_for_subscribers(client, 1)

            graphql_query(client, ADD_BOOK, variables=NEW_BOOK, token=isolated_token)
            first = ws.receive_json()["payload"]["data"]["bookAdded"]
            assert first["author"]["bookCount"] == 1
            assert first["author"]["books"] == [
                {"title": "Refactoring to patterns", "author": {"bookCount": 1}},
            ]

            # The open subscription holds no connection between events
            wait_for_idle_pool(file_engine)

            graphql_query(
                client,
                ADD_BOOK,
                variables={**NEW_BOOK, "title": "Second one"},
                token=isolated_token,
            )
            second = ws.receive_json()["payload"]["data"]["bookAdded"]
            assert second["author"]["bookCount"] == 2
            assert second["author"]["books"] == [
                {"title": "Refactoring to patterns", "author": {"bookCount": 2}},
                {"title": "Second one", "author": {"bookCount": 2}},
            ]

            wait_for_idle_pool(file_engine)

    def test_every_subscriber_receives_the_book(
        self, isolated_client: TestClient, isolated_token: str
    ):
        client = isolated_client
        with client.websocket_connect("/graphql", subprotocols=["graphql-transport-ws"]) as first, \
                client.websocket_connect("/graphql", subprotocols=["graphql-transport-ws"]) as second:
            open_subscription(first)
            open_subscription(second)
            wait_for_subscribers(client, 2)

            graphql_query(client, ADD_BOOK, variables=NEW_BOOK, token=isolated_token)

            for ws in (first, second):
                message = ws.receive_json()
                assert message["type"] == "next"
                assert message["payload"]["data"]["bookAdded"]["title"] == "Refactoring to patterns"

    def test_events_arrive_in_mutation_order(
        self, isolated_client: TestClient, isolated_token: str
    ):
        client = isolated_client
        titles = ["First book", "Second book", "Third book"]

        with client.websocket_connect("/graphql", subprotocols=["graphql-transport-ws"]) as ws:
            open_subscription(ws)
            wait_for_subscribers(client, 1)

            for title in titles:
                graphql_query(
                    client, ADD_BOOK, variables={**NEW_BOOK, "title": title}, token=isolated_token
                )

            received = [ws.receive_json()["payload"]["data"]["bookAdded"]["title"] for _ in titles]
            assert received == titles

    def test_late_subscriber_gets_no_replay(
        self, isolated_client: TestClient, isolated_token: str
    ):
        client = isolated_client
        graphql_query(client, ADD_BOOK, variables=NEW_BOOK, token=isolated_token)

        with client.websocket_connect("/graphql", subprotocols=["graphql-transport-ws"]) as ws:
            open_subscription(ws)
            wait_for_subscribers(client, 1)

            graphql_query(
                client,
                ADD_BOOK,
                variables={**NEW_BOOK, "title": "Working effectively with legacy code"},
                token=isolated_token,
            )

            message = ws.receive_json()
            assert message["payload"]["data"]["bookAdded"]["title"] == (
                "Working effectively with legacy code"
            )

    def test_failed_mutation_publishes_nothing(
        self, isolated_client: TestClient, isolated_token: str
    ):
        client = isolated_client
        with client.websocket_connect("/graphql", subprotocols=["graphql-transport-ws"]) as ws:
            open_subscription(ws)
            wait_for_subscribers(client, 1)

            # Rejected: no token
            graphql_query(client, ADD_BOOK, variables=NEW_BOOK)
            # Rejected: invalid title
            graphql_query(client, ADD_BOOK, variables={**NEW_BOOK, "title": "R"}, token=isolated_token)

            ws.send_json({"type": "ping"})
            assert ws.receive_json()["type"] == "pong"

    def test_disconnect_unsubscribes(self, isolated_client: TestClient):
        client = isolated_client
        with client.websocket_connect("/graphql", subprotocols=["graphql-transport-ws"]) as ws:
            open_subscription(ws)
            wait_for_subscribers(client, 1)

        wait_for_subscribers(client, 0)
