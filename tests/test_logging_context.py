"""Tests for request-scoped correlation IDs."""

import logging
from contextvars import copy_context

from booking_engine.logging_context import (
    NO_REQUEST_ID,
    RequestIdFilter,
    get_request_id,
    get_request_logger,
    in_request_scope,
    request_scope,
    set_request_id,
)


class TestRequestScope:
    def test_fresh_id_restored_on_exit(self):
        assert get_request_id() == NO_REQUEST_ID
        with request_scope() as request_id:
            assert request_id.startswith("REQ-")
            assert get_request_id() == request_id
        assert get_request_id() == NO_REQUEST_ID

    def test_consecutive_scopes_get_different_ids(self):
        with request_scope() as first:
            pass
        with request_scope() as second:
            pass
        assert first != second

    def test_nested_scope_reuses_outer_id(self):
        with request_scope() as outer:
            with request_scope() as inner:
                assert inner == outer

    def test_restored_after_exception(self):
        try:
            with request_scope():
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert get_request_id() == NO_REQUEST_ID

    def test_caller_id_is_kept(self):
        def run():
            set_request_id("REQ-from-caller")
            with request_scope() as request_id:
                assert request_id == "REQ-from-caller"
            return get_request_id()

        assert copy_context().run(run) == "REQ-from-caller"

    def test_decorator(self):
        @in_request_scope
        def operation():
            return get_request_id()

        assert operation().startswith("REQ-")
        assert get_request_id() == NO_REQUEST_ID


class TestRequestLogger:
    def test_filter_attached_once(self):
        logger = get_request_logger("tests.request_logger")
        get_request_logger("tests.request_logger")
        assert sum(isinstance(f, RequestIdFilter) for f in logger.filters) == 1

    def test_records_carry_id(self, caplog):
        logger = get_request_logger("tests.request_logger")
        caplog.set_level(logging.INFO, logger="tests.request_logger")
        with request_scope() as request_id:
            logger.info("inside")
        logger.info("outside")
        assert [r.request_id for r in caplog.records] == [request_id, NO_REQUEST_ID]
