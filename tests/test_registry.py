"""Tests for warren.routing.registry — duplicates, conflicts, ordering."""

import itertools
import random

import pytest

from warren.errors import ConfigurationError, DuplicateRouteError, RegistryStateError
from warren.routing.handlers import HandlerSet
from warren.routing.registry import RegistryState, RouteRegistry, describe_route
from warren.routing.route import RouteDefinition, RouteMeta, RoutePriority


async def _noop(request):
    return None


def _route(
    url_path: str,
    priority: RoutePriority | None = None,
    *,
    file_path: str | None = None,
    tags: tuple[str, ...] = (),
    methods: tuple[str, ...] = ("GET",),
    middlewares: tuple = (),
) -> RouteDefinition:
    if priority is None:
        if "*" in url_path:
            priority = RoutePriority.CATCH_ALL
        elif ":" in url_path:
            priority = RoutePriority.DYNAMIC
        else:
            priority = RoutePriority.STATIC
    params = tuple(
        part[1:] if part.startswith(":") else "rest"
        for part in url_path.split("/")
        if part.startswith(":") or part == "*"
    )
    return RouteDefinition(
        url_path=url_path,
        file_path=file_path or f"{url_path.strip('/') or 'index'}.py",
        priority=priority,
        params=params,
        handlers=HandlerSet({method: _noop for method in methods}),
        meta=RouteMeta(tags=tags) if tags else None,
        middlewares=middlewares,
    )


class RecordingDispatcher:
    def __init__(self) -> None:
        self.mounted: list[tuple[str, HandlerSet]] = []

    def mount(self, pattern: str, handlers: HandlerSet) -> None:
        self.mounted.append((pattern, handlers))


class TestRegister:
    def test_register_one(self) -> None:
        registry = RouteRegistry()
        route = _route("/users")
        registry.register(route)
        assert registry.get_all_routes() == [route]
        assert len(registry) == 1

    def test_register_many_keeps_insertion_order(self) -> None:
        registry = RouteRegistry()
        routes = [_route("/b"), _route("/a"), _route("/c/:id")]
        for route in routes:
            registry.register(route)
        assert registry.get_all_routes() == routes

    def test_duplicate_rejected(self) -> None:
        registry = RouteRegistry()
        registry.register(_route("/users", file_path="users.py"))
        with pytest.raises(DuplicateRouteError) as exc_info:
            registry.register(_route("/users", file_path="users/index.py"))
        error = exc_info.value
        assert error.url_path == "/users"
        assert error.existing_file == "users.py"
        assert error.new_file == "users/index.py"
        assert "users.py" in str(error) and "users/index.py" in str(error)

    def test_duplicate_not_stored(self) -> None:
        registry = RouteRegistry()
        registry.register(_route("/users"))
        with pytest.raises(DuplicateRouteError):
            registry.register(_route("/users"))
        assert len(registry) == 1

    def test_duplicate_is_exact_string_match(self) -> None:
        """Semantically equal patterns with different text are not duplicates."""
        registry = RouteRegistry()
        registry.register(_route("/users/:id"))
        registry.register(_route("/users/:userId"))
        assert len(registry) == 2


class TestConflicts:
    def test_param_name_conflict_warns(self, caplog) -> None:
        registry = RouteRegistry()
        registry.register(_route("/users/:id", file_path="users/[id].py"))
        with caplog.at_level("WARNING", logger="warren.routes"):
            registry.register(_route("/users/:userId", file_path="users/[userId].py"))
        assert len(registry.conflicts) == 1
        conflict = registry.conflicts[0]
        assert conflict.existing_path == "/users/:id"
        assert conflict.new_file == "users/[userId].py"
        assert "Potential route conflict" in caplog.text

    def test_nested_param_conflict(self) -> None:
        registry = RouteRegistry()
        registry.register(_route("/orgs/:org/repos/:repo"))
        registry.register(_route("/orgs/:owner/repos/:name"))
        assert len(registry.conflicts) == 1

    def test_static_vs_dynamic_no_conflict(self) -> None:
        registry = RouteRegistry()
        registry.register(_route("/users/me"))
        registry.register(_route("/users/:id"))
        assert registry.conflicts == ()

    def test_different_static_segment_no_conflict(self) -> None:
        registry = RouteRegistry()
        registry.register(_route("/users/:id"))
        registry.register(_route("/posts/:id"))
        assert registry.conflicts == ()

    def test_different_depth_no_conflict(self) -> None:
        registry = RouteRegistry()
        registry.register(_route("/users/:id"))
        registry.register(_route("/users/:id/posts/:postId"))
        assert registry.conflicts == ()

    def test_param_position_mismatch_no_conflict(self) -> None:
        registry = RouteRegistry()
        registry.register(_route("/a/:x/b"))
        registry.register(_route("/a/b/:y"))
        assert registry.conflicts == ()

    def test_conflict_does_not_block(self) -> None:
        registry = RouteRegistry()
        registry.register(_route("/users/:id"))
        registry.register(_route("/users/:userId"))
        dispatcher = RecordingDispatcher()
        registry.apply_to_dispatcher(dispatcher)
        assert len(dispatcher.mounted) == 2

    def test_trailing_slash_twin_is_not_a_conflict(self) -> None:
        registry = RouteRegistry()
        registry.register(_route("/users/:id", file_path="users/[id].py"))
        registry.register(_route("/users/:id/", file_path="legacy.py"))
        assert registry.conflicts == ()


class TestSorting:
    def test_priority_order(self) -> None:
        registry = RouteRegistry()
        registry.register(_route("/users/*"))
        registry.register(_route("/users/:id"))
        registry.register(_route("/users"))
        assert [r.url_path for r in registry.get_sorted_routes()] == [
            "/users",
            "/users/:id",
            "/users/*",
        ]

    def test_deeper_first_within_tier(self) -> None:
        registry = RouteRegistry()
        registry.register(_route("/api"))
        registry.register(_route("/api/users"))
        registry.register(_route("/api/users/settings"))
        assert [r.url_path for r in registry.get_sorted_routes()] == [
            "/api/users/settings",
            "/api/users",
            "/api",
        ]

    def test_alphabetical_tie_break(self) -> None:
        registry = RouteRegistry()
        for path in ("/zebra", "/apple", "/banana"):
            registry.register(_route(path))
        assert [r.url_path for r in registry.get_sorted_routes()] == [
            "/apple",
            "/banana",
            "/zebra",
        ]

    def test_root_sorts_after_deeper_static(self) -> None:
        registry = RouteRegistry()
        registry.register(_route("/"))
        registry.register(_route("/health"))
        assert [r.url_path for r in registry.get_sorted_routes()] == ["/health", "/"]

    def test_invariants_hold_for_any_registration_order(self) -> None:
        paths = [
            "/",
            "/users",
            "/users/me",
            "/users/:id",
            "/users/:id/posts",
            "/users/:id/posts/:postId",
            "/docs/*",
            "/:org/files/*",
            "/about",
        ]
        expected = None
        rng = random.Random(7)
        for _ in range(20):
            shuffled = paths[:]
            rng.shuffle(shuffled)
            registry = RouteRegistry()
            for path in shuffled:
                registry.register(_route(path))
            ordered = registry.get_sorted_routes()

            for a, b in itertools.combinations(ordered, 2):
                assert a.priority <= b.priority
                if a.priority == b.priority:
                    assert a.segment_count >= b.segment_count

            result = [r.url_path for r in ordered]
            if expected is None:
                expected = result
            assert result == expected

    def test_sorting_does_not_mutate_registration_order(self) -> None:
        registry = RouteRegistry()
        registry.register(_route("/b/*"))
        registry.register(_route("/a"))
        registry.get_sorted_routes()
        assert [r.url_path for r in registry.get_all_routes()] == ["/b/*", "/a"]


class TestApply:
    def test_mounts_in_sorted_order(self) -> None:
        registry = RouteRegistry()
        for path in ("/users/*", "/users/:id", "/users", "/users/me"):
            registry.register(_route(path))
        dispatcher = RecordingDispatcher()
        applied = registry.apply_to_dispatcher(dispatcher)
        assert [pattern for pattern, _ in dispatcher.mounted] == [
            "/users/me",
            "/users",
            "/users/:id",
            "/users/*",
        ]
        assert [r.url_path for r in applied] == [p for p, _ in dispatcher.mounted]

    def test_state_transition(self) -> None:
        registry = RouteRegistry()
        assert registry.state is RegistryState.OPEN
        registry.apply_to_dispatcher(RecordingDispatcher())
        assert registry.state is RegistryState.APPLIED

    def test_register_after_apply_rejected(self) -> None:
        registry = RouteRegistry()
        registry.register(_route("/users"))
        registry.apply_to_dispatcher(RecordingDispatcher())
        with pytest.raises(RegistryStateError):
            registry.register(_route("/posts"))
        assert len(registry) == 1

    def test_apply_twice_rejected(self) -> None:
        registry = RouteRegistry()
        registry.apply_to_dispatcher(RecordingDispatcher())
        with pytest.raises(RegistryStateError):
            registry.apply_to_dispatcher(RecordingDispatcher())

    def test_middlewares_attached(self) -> None:
        async def audit(request, next):
            return await next(request)

        registry = RouteRegistry()
        route = _route("/users", middlewares=(audit,))
        registry.register(route)
        registry.apply_to_dispatcher(RecordingDispatcher())
        assert route.handlers.middlewares == (audit,)

    def test_failed_mount_leaves_handlers_untouched(self) -> None:
        async def audit(request, next):
            return await next(request)

        class FailsOnce(RecordingDispatcher):
            def __init__(self) -> None:
                super().__init__()
                self.failed = False

            def mount(self, pattern: str, handlers: HandlerSet) -> None:
                if pattern == "/docs/*" and not self.failed:
                    self.failed = True
                    raise ConfigurationError(f"cannot mount {pattern}")
                super().mount(pattern, handlers)

        registry = RouteRegistry()
        route = _route("/users", middlewares=(audit,))
        registry.register(route)
        registry.register(_route("/docs/*"))
        dispatcher = FailsOnce()

        with pytest.raises(ConfigurationError):
            registry.apply_to_dispatcher(dispatcher)
        assert registry.state is RegistryState.OPEN
        assert route.handlers.middlewares == ()

        registry.apply_to_dispatcher(RecordingDispatcher())
        assert route.handlers.middlewares == (audit,)

    def test_logs_each_route(self, caplog) -> None:
        registry = RouteRegistry()
        registry.register(_route("/users/:id", file_path="users/[id].py"))
        with caplog.at_level("INFO", logger="warren.routes"):
            registry.apply_to_dispatcher(RecordingDispatcher())
        assert "Registering 1 routes" in caplog.text
        assert "users/[id].py" in caplog.text


class TestIntrospection:
    def _registry(self) -> RouteRegistry:
        registry = RouteRegistry()
        registry.register(_route("/users", tags=("users",), methods=("GET", "POST")))
        registry.register(_route("/users/:id", tags=("users", "detail")))
        registry.register(_route("/docs/*", tags=("docs",)))
        registry.register(_route("/health"))
        return registry

    def test_stats(self) -> None:
        stats = self._registry().get_stats()
        assert stats.total == 4
        assert stats.by_priority == {"static": 2, "dynamic": 1, "catch_all": 1}
        assert stats.by_method["GET"] == 4
        assert stats.by_method["POST"] == 1
        assert stats.by_method["DELETE"] == 0
        assert stats.by_tag == {"users": 2, "detail": 1, "docs": 1}

    def test_routes_by_tag(self) -> None:
        routes = self._registry().get_routes_by_tag("users")
        assert [r.url_path for r in routes] == ["/users", "/users/:id"]

    def test_route_groups_sorted_by_name(self) -> None:
        groups = self._registry().get_route_groups()
        assert [g.name for g in groups] == ["detail", "docs", "users"]
        assert len(groups[2].routes) == 2

    def test_find_routes_by_meta(self) -> None:
        routes = self._registry().find_routes_by_meta(lambda meta: "docs" in meta.tags)
        assert [r.url_path for r in routes] == ["/docs/*"]

    def test_describe_route(self) -> None:
        line = describe_route(_route("/users/:id", file_path="users/[id].py", tags=("users",)))
        assert line.startswith("D /users/:id")
        assert "-> users/[id].py" in line
        assert "params: [id]" in line
        assert "tags: [users]" in line
