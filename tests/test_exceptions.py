"""Tests for exception hierarchy."""

import pytest

from a2a_task_client.exceptions import (
    A2AClientError,
    A2AConnectionError,
    A2ATimeoutError,
    ContentTypeNotSupportedError,
    MalformedPartError,
    MalformedResponseError,
    PollingError,
    PreconditionError,
    ProtocolError,
    TaskNotCancelableError,
    TaskNotFoundError,
    TaskTimeoutError,
    TransportError,
    UnsupportedOperationError,
    _raise_for_rpc_error,
)


class TestExceptionHierarchy:
    """Test exception inheritance and hierarchy."""

    def test_all_inherit_from_base(self) -> None:
        for exc_class in (
            PreconditionError,
            TransportError,
            ProtocolError,
            MalformedResponseError,
            MalformedPartError,
            TaskTimeoutError,
        ):
            assert issubclass(exc_class, A2AClientError)

    def test_transport_subclasses(self) -> None:
        assert issubclass(A2AConnectionError, TransportError)
        assert issubclass(A2ATimeoutError, TransportError)

    def test_protocol_subclasses(self) -> None:
        assert issubclass(TaskNotFoundError, ProtocolError)
        assert issubclass(TaskNotCancelableError, ProtocolError)
        assert issubclass(UnsupportedOperationError, ProtocolError)
        assert issubclass(ContentTypeNotSupportedError, ProtocolError)

    def test_polling_error_is_malformed_response(self) -> None:
        assert issubclass(PollingError, MalformedResponseError)

    def test_kinds_are_distinguishable(self) -> None:
        """No error kind is a subclass of another kind."""
        kinds = [
            PreconditionError,
            TransportError,
            ProtocolError,
            MalformedResponseError,
            MalformedPartError,
            TaskTimeoutError,
        ]
        for a in kinds:
            for b in kinds:
                if a is not b:
                    assert not issubclass(a, b)

    def test_exception_instantiation(self) -> None:
        exc = A2AClientError("Test message")
        assert str(exc) == "Test message"
        assert exc.__cause__ is None

        cause = ValueError("Original error")
        exc = A2AClientError("Test message", cause=cause)
        assert exc.__cause__ is cause


class TestExceptionContext:
    def test_transport_error_attributes(self) -> None:
        exc = TransportError("boom", status_code=502, body="bad gateway", url="http://a")
        assert exc.status_code == 502
        assert exc.body == "bad gateway"
        assert exc.url == "http://a"

    def test_transport_error_defaults(self) -> None:
        exc = A2AConnectionError("refused")
        assert exc.status_code is None
        assert exc.body is None

    def test_protocol_error_attributes(self) -> None:
        exc = ProtocolError("Test error", code=-32001, data={"details": "Not found"})
        assert exc.code == -32001
        assert exc.data == {"details": "Not found"}

    def test_malformed_part_error_attributes(self) -> None:
        exc = MalformedPartError("bad part", artifact_index=2, part_index=5)
        assert exc.artifact_index == 2
        assert exc.part_index == 5
        assert "artifact 2, part 5" in str(exc)

    def test_malformed_part_error_without_indices(self) -> None:
        exc = MalformedPartError("bad part")
        assert str(exc) == "bad part"
        assert exc.artifact_index is None

    def test_task_timeout_attributes(self) -> None:
        exc = TaskTimeoutError("late", task_id="t1", last_state="working", timeout=5)
        assert exc.task_id == "t1"
        assert exc.last_state == "working"
        assert exc.timeout == 5

    def test_malformed_response_keeps_response(self) -> None:
        exc = MalformedResponseError("no result", response={"jsonrpc": "2.0"})
        assert exc.response == {"jsonrpc": "2.0"}


class TestErrorCodeMapping:
    """Test error code to exception mapping."""

    @pytest.mark.parametrize(
        ("code", "exc_class"),
        [
            (-32001, TaskNotFoundError),
            (-32002, TaskNotCancelableError),
            (-32004, UnsupportedOperationError),
            (-32005, ContentTypeNotSupportedError),
        ],
    )
    def test_known_codes(self, code: int, exc_class: type[ProtocolError]) -> None:
        with pytest.raises(exc_class) as exc_info:
            _raise_for_rpc_error({"code": code, "message": "nope"})
        assert exc_info.value.code == code

    def test_invalid_params_is_generic_protocol_error(self) -> None:
        with pytest.raises(ProtocolError) as exc_info:
            _raise_for_rpc_error({"code": -32602, "message": "Invalid params"})

        assert type(exc_info.value) is ProtocolError
        assert exc_info.value.code == -32602
        assert "Invalid params" in str(exc_info.value)

    def test_data_is_preserved(self) -> None:
        with pytest.raises(TaskNotFoundError) as exc_info:
            _raise_for_rpc_error(
                {"code": -32001, "message": "gone", "data": {"task_id": "123"}}
            )
        assert exc_info.value.data == {"task_id": "123"}

    def test_attribute_style_error(self) -> None:
        class MockError:
            code = -32099
            message = "Unknown error"
            data = {"custom": "data"}

        with pytest.raises(ProtocolError) as exc_info:
            _raise_for_rpc_error(MockError())
        assert exc_info.value.code == -32099
        assert exc_info.value.data == {"custom": "data"}

    def test_missing_fields_fall_back(self) -> None:
        with pytest.raises(ProtocolError) as exc_info:
            _raise_for_rpc_error({})
        assert exc_info.value.code == 0
        assert "Unknown error" in str(exc_info.value)
