from __future__ import annotations

import logging

import pytest

from moving_count.application.series import MovingCountSeries
from moving_count.common.exceptions.base import SampleTooSoonError
from moving_count.common.logger import PipelineLogger
from moving_count.infra.store.memory_store import MemorySampleStore
from tests.factory_builders import build_counter


def test_bind_adds_fields_without_touching_parent(caplog: pytest.LogCaptureFixture) -> None:
    logger = PipelineLogger.get_logger("bind_check", "app")
    bound = logger.bind(series="page_views")

    with caplog.at_level(logging.INFO, logger="bind_check.app"):
        bound.info("bound", extra={"purged": 2})
        logger.info("plain")

    bound_record, plain_record = caplog.records[-2:]
    assert bound_record.component == "app"
    assert bound_record.series == "page_views"
    assert bound_record.purged == 2
    assert not hasattr(plain_record, "series")
    assert logger.context == {}


def test_get_logger_attaches_queue_handler_once() -> None:
    PipelineLogger.get_logger("handler_check", "store")
    PipelineLogger.get_logger("handler_check", "store")

    handlers = logging.getLogger("handler_check.store").handlers
    assert len(handlers) == 1


@pytest.mark.asyncio
async def test_rejected_sample_is_logged_with_series(caplog: pytest.LogCaptureFixture) -> None:
    series = MovingCountSeries("page_views", MemorySampleStore())
    await series.record(build_counter(a=1), 1000)

    with caplog.at_level(logging.WARNING, logger="series.app"):
        with pytest.raises(SampleTooSoonError):
            await series.record(build_counter(a=1), 1030)

    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert record.series == "page_views"
    assert record.error_code == "sample_too_soon"
