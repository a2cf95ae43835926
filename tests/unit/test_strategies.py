"""
Unit Tests for Strategy Factories and Emitter Composition
=========================================================

Test Coverage
-------------
- Dedicated emitters (ignoring_each, awaiting_each, awaiting_all, awaiting_all_settled)
- Custom strategy factories and custom primary aggregation
- Chaining, removal, capturing `emit`
- Emission log context visible to listeners
"""

import pytest

from emitkit import (
    DefaultStrategy,
    Emitter,
    Fulfilled,
    Rejected,
    StrategyFactoryError,
    default_strategy,
)
from emitkit.core.event.strategies import await_all
from emitkit.core.logging import get_log_context


# ============================================================================
# DEDICATED EMITTERS
# ============================================================================


@pytest.mark.unit
class TestIgnoringEachEmitter:
    """Emitter.ignoring_each() only supports the synchronous mode."""

    def test_emit_invokes_listeners_and_returns_none(self, mocker):
        emitter = Emitter.ignoring_each()
        first = mocker.Mock(return_value=1)
        second = mocker.Mock(return_value=2)
        emitter.on("stuff", first).on("stuff", second)

        assert emitter.emit("stuff", 42) is None

        first.assert_called_once_with(42)
        second.assert_called_once_with(42)

    def test_emit_has_no_secondary_modes(self):
        emitter = Emitter.ignoring_each()

        assert not hasattr(emitter.emit, "await_all")

    def test_sync_error_propagates(self, mocker):
        emitter = Emitter.ignoring_each()
        after = mocker.Mock()
        emitter.on("stuff", mocker.Mock(side_effect=KeyError("boom"))).on("stuff", after)

        with pytest.raises(KeyError):
            emitter.emit("stuff")

        after.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
class TestAwaitingEmitters:
    """Dedicated async emitters."""

    async def test_awaiting_each(self, mocker):
        emitter = Emitter.awaiting_each()
        order = []

        async def first(value):
            order.append(("first", value))

        async def second(value):
            order.append(("second", value))

        emitter.on("stuff", first).on("stuff", second)

        assert await emitter.emit("stuff", 42) is None
        assert order == [("first", 42), ("second", 42)]

    async def test_awaiting_all(self, mocker):
        emitter = Emitter.awaiting_all()
        emitter.on("stuff", mocker.AsyncMock(return_value="a"))
        emitter.on("stuff", mocker.Mock(return_value="b"))

        assert await emitter.emit("stuff") == ["a", "b"]

    async def test_awaiting_all_settled(self, mocker):
        emitter = Emitter.awaiting_all_settled()
        error = ValueError("nope")
        emitter.on("stuff", mocker.AsyncMock(side_effect=error))
        emitter.on("stuff", mocker.AsyncMock(return_value="ok"))

        assert await emitter.emit("stuff") == [Rejected(error), Fulfilled("ok")]

    @pytest.mark.parametrize(
        "build", [Emitter.awaiting_each, Emitter.awaiting_all, Emitter.awaiting_all_settled]
    )
    async def test_listeners_run_when_result_is_dropped(self, mocker, drain, build):
        emitter = build()
        listener = mocker.AsyncMock(return_value="ok")
        emitter.on("stuff", listener)

        emitter.emit("stuff")
        listener.assert_called_once()
        await drain()

        listener.assert_awaited_once()

    async def test_awaiting_all_sync_error_raises_at_call_site(self, mocker):
        emitter = Emitter.awaiting_all()
        after = mocker.AsyncMock()
        emitter.on("stuff", mocker.Mock(side_effect=KeyError("boom"))).on("stuff", after)

        with pytest.raises(KeyError):
            emitter.emit("stuff")

        after.assert_not_called()


# ============================================================================
# CUSTOM STRATEGIES
# ============================================================================


@pytest.mark.unit
class TestCustomStrategies:
    """Emitter.with_strategy_factory() is the extension point."""

    def test_factory_receives_fresh_registry_once(self, mocker):
        factory = mocker.Mock(return_value=lambda event, *args: None)

        Emitter.with_strategy_factory(factory)

        factory.assert_called_once()

    def test_collecting_strategy(self, mocker):
        """A factory can aggregate results however it likes."""

        def collecting(registry):
            def emit(event, *args, **kwargs):
                return list(registry.invocations(event, *args, **kwargs))

            return emit

        emitter = Emitter.with_strategy_factory(collecting)
        emitter.on("sum", lambda a, b: a + b).on("sum", lambda a, b: a * b)

        assert emitter.emit("sum", 3, 4) == [7, 12]

    def test_factory_returning_non_callable_is_rejected(self):
        with pytest.raises(StrategyFactoryError) as exc_info:
            Emitter.with_strategy_factory(lambda registry: "not a strategy")

        assert exc_info.value.details["produced_type"] == "str"
        assert isinstance(exc_info.value, TypeError)

    @pytest.mark.asyncio
    async def test_default_strategy_with_custom_primary(self, mocker):
        """The primary call can use another aggregation; the methods stay available."""
        emitter = Emitter.with_strategy_factory(
            lambda registry: default_strategy(registry, await_all)
        )
        listener = mocker.Mock(return_value=5)
        emitter.on("stuff", listener)

        assert await emitter.emit("stuff") == [5]
        assert await emitter.emit.await_all_settled("stuff") == [Fulfilled(5)]
        assert emitter.emit.ignore_each("stuff") is None
        assert listener.call_count == 3


# ============================================================================
# EMITTER SURFACE
# ============================================================================


@pytest.mark.unit
class TestEmitterSurface:
    """on / once / off / emit as seen by callers."""

    def test_on_and_once_are_chainable(self, emitter, mocker):
        assert emitter.on("a", mocker.Mock()).once("b", mocker.Mock()) is emitter
        assert emitter.listener_count() == 2
        assert emitter.event_names() == ["a", "b"]

    def test_create_uses_default_strategy(self, emitter):
        assert isinstance(emitter.emit, DefaultStrategy)

    def test_off_removes_listener(self, emitter, mocker):
        listener = mocker.Mock()
        emitter.on("stuff", listener)

        assert emitter.off("stuff", listener) is emitter
        emitter.emit("stuff")

        listener.assert_not_called()

    def test_off_unknown_listener_is_noop(self, emitter, mocker):
        emitter.off("stuff", mocker.Mock())

        assert emitter.listener_count() == 0

    def test_captured_emit_keeps_behavior(self, mocker):
        """emit can be stored on another object and still drive this emitter."""

        class Door:
            def __init__(self):
                self._emitter = Emitter.create()
                self._emit = self._emitter.emit

            def on(self, event, listener):
                self._emitter.on(event, listener)
                return self

            def open(self):
                self._emit("opened", "front")

        listener = mocker.Mock()
        door = Door().on("opened", listener)

        door.open()

        listener.assert_called_once_with("front")

    def test_emitters_do_not_share_listeners(self, mocker):
        listener = mocker.Mock()
        first = Emitter.create().on("stuff", listener)
        second = Emitter.create()

        second.emit("stuff")
        listener.assert_not_called()

        first.emit("stuff")
        listener.assert_called_once()

    def test_listener_sees_emission_log_context(self, emitter):
        seen = {}

        def listener():
            seen.update(get_log_context())

        emitter.on("saved", listener)
        emitter.emit("saved")

        assert seen["event_name"] == "saved"
        assert seen["strategy"] == "ignore_each"
        assert "event_name" not in get_log_context()

    @pytest.mark.asyncio
    async def test_nested_emission_restores_outer_context(self, emitter):
        seen = []

        def outer():
            emitter.emit("inner")
            seen.append(get_log_context()["event_name"])

        def inner():
            seen.append(get_log_context()["event_name"])

        emitter.on("outer", outer).on("inner", inner)

        await emitter.emit.await_each("outer")

        assert seen == ["inner", "outer"]

    def test_nested_emission_keeps_correlation_id(self, emitter):
        seen = []

        def outer():
            seen.append(get_log_context()["correlation_id"])
            emitter.emit("inner")

        def inner():
            seen.append(get_log_context()["correlation_id"])

        emitter.on("outer", outer).on("inner", inner)

        emitter.emit("outer")

        assert len(seen) == 2
        assert seen[0] == seen[1]
