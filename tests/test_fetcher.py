import asyncio
import logging

import pytest
from pydantic import ValidationError

from conftest import FakeTransport, FullBatchTransport, make_items
from explorer.discovery.fetcher import BatchFetcher, SearchSuperseded
from explorer.discovery.googlebooks_service import TransportFailure
from explorer.discovery.schemas import ResultCollection, SearchDirectives


def run(transport, fetch_cap, text="dune", **kwargs):
    directives = SearchDirectives(text=text, **kwargs)
    return asyncio.run(BatchFetcher(transport).run(directives, fetch_cap))


def test_short_first_batch_stops_after_one_call():
    transport = FakeTransport({"dune": make_items(3)})

    result = run(transport, fetch_cap=50)

    assert len(transport.requests) == 1
    assert transport.requests[0].max_results == 40
    assert [item.id for item in result.items] == ["vol-0", "vol-1", "vol-2"]
    assert result.reported_total == 3


def test_second_batch_is_capped_to_remaining_items():
    transport = FullBatchTransport(total_items=1000)

    result = run(transport, fetch_cap=50)

    assert len(transport.requests) == 2
    assert [r.max_results for r in transport.requests] == [40, 10]
    assert [r.start_index for r in transport.requests] == [0, 40]
    assert len(result.items) == 50
    assert result.reported_total == 1000
    assert result.fetch_cap == 50


@pytest.mark.parametrize("fetch_cap", [1, 39, 40, 41, 80, 95, 200])
def test_items_never_exceed_fetch_cap(fetch_cap):
    transport = FullBatchTransport(total_items=10_000)

    result = run(transport, fetch_cap=fetch_cap)

    assert len(result.items) == fetch_cap
    assert all(r.max_results <= 40 for r in transport.requests)


def test_stops_when_cursor_reaches_reported_total():
    transport = FakeTransport({"dune": make_items(120)}, total_items=80)

    result = run(transport, fetch_cap=200)

    assert len(transport.requests) == 2
    assert len(result.items) == 80
    assert result.reported_total == 80


def test_exhausted_remote_across_several_batches():
    transport = FakeTransport({"dune": make_items(95)}, total_items=5000)

    result = run(transport, fetch_cap=200)

    assert [r.start_index for r in transport.requests] == [0, 40, 80]
    assert len(result.items) == 95


def test_directives_are_forwarded_to_every_batch():
    transport = FakeTransport({"dune": make_items(60)})

    run(transport, fetch_cap=60, language_restrict="en", order_by="newest")

    assert len(transport.requests) == 2
    for request in transport.requests:
        assert request.query == "dune"
        assert request.language_restrict == "en"
        assert request.order_by == "newest"


def test_transport_failure_propagates():
    transport = FakeTransport({"dune": make_items(100)}, fail_on_call=2)

    with pytest.raises(TransportFailure):
        run(transport, fetch_cap=100)
    assert len(transport.requests) == 2


def test_superseded_run_is_abandoned_after_the_batch():
    transport = FakeTransport({"dune": make_items(100)})
    directives = SearchDirectives(text="dune")

    with pytest.raises(SearchSuperseded):
        asyncio.run(BatchFetcher(transport).run(directives, 100, is_current=lambda: False))
    assert len(transport.requests) == 1


def test_fetch_cap_must_be_positive():
    with pytest.raises(ValueError):
        run(FakeTransport(), fetch_cap=0)


def test_batch_progress_is_logged_at_debug(caplog):
    transport = FakeTransport({"dune": make_items(3)})

    with caplog.at_level(logging.DEBUG, logger="explorer.discovery"):
        run(transport, fetch_cap=50)

    messages = [record.getMessage() for record in caplog.records]
    assert any(m.startswith("Batch at 0 returned 3/40 items") for m in messages)
    assert any("finished after 3 items" in m for m in messages)


def test_module_loggers_follow_configured_level():
    for name in ("fetcher", "googlebooks_service", "session"):
        logger = logging.getLogger(f"explorer.discovery.{name}")
        assert logger.level == logging.NOTSET


def test_result_collection_rejects_items_beyond_cap():
    with pytest.raises(ValidationError):
        ResultCollection(items=make_items(3), fetch_cap=2)

    assert len(ResultCollection(items=make_items(2), fetch_cap=2).items) == 2
