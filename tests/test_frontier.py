import pytest

from a11yscan.errors import FrontierEmpty
from a11yscan.frontier import Frontier


def test_seed_is_discovered_and_queued() -> None:
    frontier = Frontier(max_pages=5)
    frontier.seed("https://example.com")

    assert frontier.discovered == ("https://example.com",)
    assert frontier.seen("https://example.com")
    assert len(frontier) == 1
    assert frontier.dequeue_next() == "https://example.com"
    assert not frontier


def test_dequeue_on_empty_raises() -> None:
    with pytest.raises(FrontierEmpty):
        Frontier(max_pages=1).dequeue_next()


def test_offer_ignores_seen_urls() -> None:
    frontier = Frontier(max_pages=5)
    frontier.seed("a")
    assert frontier.offer("b") is True
    assert frontier.offer("b") is False
    assert frontier.offer("a") is False
    assert frontier.discovered == ("a", "b")


def test_offer_is_fifo() -> None:
    frontier = Frontier(max_pages=10)
    frontier.seed("a")
    for url in ("b", "c", "d"):
        frontier.offer(url)
    assert [frontier.dequeue_next() for _ in range(4)] == ["a", "b", "c", "d"]


def test_cap_bounds_discovery_and_queue() -> None:
    frontier = Frontier(max_pages=3)
    frontier.seed("a")
    assert frontier.offer("b")
    assert frontier.offer("c")
    assert frontier.is_full
    assert frontier.offer("d") is False
    assert not frontier.seen("d")
    assert frontier.discovered == ("a", "b", "c")
    assert len(frontier) == 3


def test_discovery_record_survives_dequeue() -> None:
    frontier = Frontier(max_pages=3)
    frontier.seed("a")
    frontier.offer("b")
    frontier.dequeue_next()
    frontier.dequeue_next()
    assert frontier.discovered == ("a", "b")
    assert frontier.offer("a") is False
