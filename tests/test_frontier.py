# File: tests/test_frontier.py
import pytest

from site_harvest.crawler.frontier import Frontier

SEED = "http://example.com/"


def drain(frontier: Frontier) -> list[str]:
    out = []
    while (url := frontier.pop()) is not None:
        out.append(url)
        frontier.mark_visited(url)
    return out


def test_pop_order_is_fifo():
    f = Frontier(max_pages=10)
    f.reset(SEED)
    for path in ("a", "b", "c"):
        assert f.offer(f"http://example.com/{path}", referrer=SEED)
    assert drain(f) == [SEED, "http://example.com/a", "http://example.com/b", "http://example.com/c"]


def test_offer_rejects_pending_in_flight_and_visited():
    f = Frontier(max_pages=10)
    f.reset(SEED)
    assert not f.offer(SEED)  # pending
    url = f.pop()
    assert not f.offer(url)  # in flight
    f.mark_visited(url)
    assert not f.offer(url)  # visited
    assert f.offer("http://example.com/x", referrer=SEED)
    assert not f.offer("http://example.com/x", referrer=SEED)
    assert len(f) == 1


def test_offer_rejects_other_hosts_relative_to_referrer():
    f = Frontier(max_pages=10)
    f.reset(SEED)
    assert not f.offer("http://other.com/page", referrer=SEED)
    # domain check is against the referring page, not the seed
    assert f.offer("http://cdn.example.com/page", referrer="http://cdn.example.com/index")
    assert "http://other.com/page" not in f


def test_offer_compares_host_only():
    f = Frontier(max_pages=10)
    f.reset(SEED)
    assert f.offer("http://example.com:8080/page", referrer=SEED)
    assert f.offer("https://EXAMPLE.com/page", referrer=SEED)
    assert not f.offer("http://sub.example.com/page", referrer=SEED)


@pytest.mark.parametrize("url", ["mailto:a@example.com", "ftp://example.com/file", "/relative", ""])
def test_offer_rejects_non_http(url):
    f = Frontier(max_pages=10)
    assert not f.offer(url)


def test_fragment_is_stripped_but_slash_and_case_are_not():
    f = Frontier(max_pages=10)
    f.reset(SEED)
    assert not f.offer("http://example.com/#top", referrer=SEED)
    assert f.offer("http://example.com/docs", referrer=SEED)
    assert not f.offer("http://example.com/docs#intro", referrer=SEED)
    assert f.offer("http://example.com/docs/", referrer=SEED)
    assert f.offer("http://example.com/Docs", referrer=SEED)


def test_ceiling_discards_remaining_pending():
    f = Frontier(max_pages=2)
    f.reset(SEED)
    for i in range(5):
        f.offer(f"http://example.com/p{i}", referrer=SEED)
    assert drain(f) == [SEED, "http://example.com/p0"]
    assert f.exhausted
    assert len(f) == 0
    assert f.pop() is None
    assert f.done


def test_offer_after_ceiling_is_rejected():
    f = Frontier(max_pages=1)
    f.reset(SEED)
    assert f.pop() == SEED
    assert not f.offer("http://example.com/late", referrer=SEED)
    assert len(f) == 0
    f.mark_visited(SEED)
    assert f.done


def test_ceiling_counts_dispatches_not_completions():
    f = Frontier(max_pages=2)
    f.reset(SEED)
    f.offer("http://example.com/a", referrer=SEED)
    f.offer("http://example.com/b", referrer=SEED)
    assert f.pop() == SEED
    assert f.pop() == "http://example.com/a"
    # nothing marked visited yet, but two fetches are already out
    assert f.pop() is None
    assert f.in_flight == 2
    assert not f.done


def test_reset_clears_previous_run():
    f = Frontier(max_pages=1)
    f.reset(SEED)
    drain(f)
    f.reset("http://other.com/")
    assert f.dispatched == 0
    assert f.visited == frozenset()
    assert drain(f) == ["http://other.com/"]


def test_max_pages_must_be_positive():
    with pytest.raises(ValueError):
        Frontier(max_pages=0)


def test_membership_ignores_fragment():
    f = Frontier(max_pages=5)
    f.reset(SEED)
    assert "http://example.com/#top" in f
    assert "http://example.com/other" not in f
    assert 42 not in f
