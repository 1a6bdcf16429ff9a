# tests/test_stage_resolver.py
"""
Tests for the stage resolver fixpoint loop.
"""
import pytest

from docplane.boot.resolver import StageResolver
from docplane.core.exceptions import DeadlockError
from docplane.registry import Plugin

from tests.utils.call_counter import CallCounter


def counted_plugin(component_id, counter, ready):
    """Plugin whose boot hook counts calls per pass and asks `ready` for the answer."""
    def boot(stage, pass_):
        counter.inc(component_id)
        counter.inc(f"{component_id}:{stage}:{pass_}")
        return ready(stage, pass_)
    return Plugin(component_id, boot=boot)


class TestFixpoint:

    @pytest.mark.asyncio
    async def test_dependency_chain_converges_in_chain_length_passes(self, registry, context):
        """
        GIVEN c -> b -> a registered in reverse dependency order
        WHEN the compile stage is bootstrapped
        THEN it converges in 3 passes, each component called once per pending pass
        """
        counter = CallCounter()
        booted = set()

        def after(name, dependency):
            def ready(stage, pass_):
                if dependency is None or dependency in booted:
                    booted.add(name)
                    return None
                return f"{name} waits for {dependency}"
            return ready

        registry.register(counted_plugin("c", counter, after("c", "b")))
        registry.register(counted_plugin("b", counter, after("b", "a")))
        registry.register(counted_plugin("a", counter, after("a", None)))

        passes = await StageResolver(registry, context).bootstrap("compile")

        assert passes == 3
        assert booted == {"a", "b", "c"}
        counter.assert_exact("a", 1)
        counter.assert_exact("b", 2)
        counter.assert_exact("c", 3)
        for name in ("a", "b", "c"):
            for pass_ in (1, 2, 3):
                counter.assert_max(f"{name}:compile:{pass_}", 1)

    @pytest.mark.asyncio
    async def test_satisfied_component_is_not_called_again(self, registry, context):
        counter = CallCounter()
        registry.register(counted_plugin("ready", counter, lambda s, p: None))
        registry.register(counted_plugin("slow", counter, lambda s, p: None if p >= 4 else "not yet"))

        passes = await StageResolver(registry, context).bootstrap("link")

        assert passes == 4
        counter.assert_exact("ready", 1)
        counter.assert_exact("slow", 4)

    @pytest.mark.asyncio
    async def test_async_boot_hooks_are_awaited(self, registry, context):
        calls = []

        async def boot(stage, pass_):
            calls.append((stage, pass_))
            return [] if pass_ == 2 else ["pending"]

        registry.register(Plugin("async", boot=boot))

        passes = await StageResolver(registry, context).bootstrap("compile")

        assert passes == 2
        assert calls == [("compile", 1), ("compile", 2)]

    @pytest.mark.asyncio
    async def test_blank_reason_list_is_still_pending(self, registry, context):
        counter = CallCounter()
        registry.register(counted_plugin("blank", counter, lambda s, p: None if p == 3 else [""]))

        passes = await StageResolver(registry, context).bootstrap("compile")

        assert passes == 3
        counter.assert_exact("blank", 3)

    @pytest.mark.asyncio
    async def test_nothing_to_boot_takes_zero_passes(self, registry, context):
        assert await StageResolver(registry, context).bootstrap("compile") == 0

    @pytest.mark.asyncio
    async def test_unknown_stage_is_rejected(self, registry, context):
        with pytest.raises(ValueError):
            await StageResolver(registry, context).bootstrap("prelink")


class TestDeadlock:

    @pytest.mark.asyncio
    async def test_never_ready_component_deadlocks_after_exactly_100_passes(self, registry, context):
        """
        GIVEN a component that waits on a collection that is never registered
        WHEN the link stage is bootstrapped
        THEN DeadlockError names exactly that component, after 100 passes
        """
        counter = CallCounter()
        registry.register(counted_plugin("fine", counter, lambda s, p: None))
        registry.register(counted_plugin("stuck", counter, lambda s, p: [f"waiting on ghost (pass {p})"]))

        with pytest.raises(DeadlockError) as exc_info:
            await StageResolver(registry, context).bootstrap("link")

        err = exc_info.value
        assert err.stage == "link"
        assert err.pending == ["stuck"]
        assert err.reasons == ["waiting on ghost (pass 100)"]
        assert "after 100 passes" in str(err)
        assert "stuck" in str(err)
        counter.assert_exact("stuck", 100)
        counter.assert_exact("fine", 1)

    @pytest.mark.asyncio
    async def test_cycle_reports_every_pending_component(self, registry, context):
        booted = set()

        def needs(name, other):
            def boot(stage, pass_):
                if other in booted:
                    booted.add(name)
                    return None
                return f"{name} needs {other}"
            return boot

        registry.register(Plugin("x", name="X", boot=needs("x", "y")))
        registry.register(Plugin("y", name="Y", boot=needs("y", "x")))

        with pytest.raises(DeadlockError) as exc_info:
            await StageResolver(registry, context).bootstrap("compile")

        assert exc_info.value.pending == ["X", "Y"]
        assert exc_info.value.reasons == ["x needs y", "y needs x"]

    @pytest.mark.asyncio
    async def test_pass_cap_is_configurable(self, registry, context):
        counter = CallCounter()
        registry.register(counted_plugin("stuck", counter, lambda s, p: "no"))

        with pytest.raises(DeadlockError):
            await StageResolver(registry, context, max_passes=5).bootstrap("compile")

        counter.assert_exact("stuck", 5)


class TestPostLink:

    @pytest.mark.asyncio
    async def test_post_link_components_are_remembered(self, registry, context):
        counter = CallCounter()
        plugin = registry.register(counted_plugin("p", counter, lambda s, p: None))
        resolver = StageResolver(registry, context)

        await resolver.bootstrap("compile")
        assert not context.is_satisfied(plugin)

        await resolver.bootstrap("post-link")
        assert context.is_satisfied(plugin)

        # Later bootstraps skip it in every stage
        assert await resolver.bootstrap("compile") == 0
        assert await resolver.bootstrap("post-link") == 0
        counter.assert_exact("p", 2)

    @pytest.mark.asyncio
    async def test_forget_allows_a_component_to_boot_again(self, registry, context):
        counter = CallCounter()
        registry.register(counted_plugin("p", counter, lambda s, p: None))
        resolver = StageResolver(registry, context)
        await resolver.bootstrap("post-link")

        registry.forget("p")
        context.forget_component("p")
        registry.register(counted_plugin("p", counter, lambda s, p: None))

        assert await resolver.bootstrap("post-link") == 1
        counter.assert_exact("p", 2)
