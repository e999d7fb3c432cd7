import asyncio

import pytest

from valueholder.factory import LazyLoadingValueHolderFactory
from valueholder.proxy import LazyLoadingValueHolder
from valueholder.surface import proxy_delete, proxy_get, proxy_has, proxy_invoke, proxy_set


class _Greeter:
    def __init__(self, name: str = "world") -> None:
        self.name = name
        self.bar = "baz"

    def greet(self, greeting: str, punctuation: str = "!") -> str:
        return f"{greeting}, {self.name}{punctuation}"

    def collect(self, *items, **options):
        return items, options

    def rename(self, name: str) -> "_Greeter":
        self.name = name
        return self

    @property
    def shout(self) -> str:
        return self.name.upper()

    @staticmethod
    def kind() -> str:
        return "greeter"


class _Bag:
    def __init__(self, *items) -> None:
        self.items = list(items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __contains__(self, item) -> bool:
        return item in self.items

    def __getitem__(self, key):
        return self.items[key]

    def __setitem__(self, key, value) -> None:
        self.items[key] = value

    def __eq__(self, other) -> bool:
        return list(self) == list(other)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class _Money:
    def __init__(self, cents: int) -> None:
        self.cents = cents

    def __repr__(self) -> str:
        return f"_Money({self.cents})"

    def __eq__(self, other) -> bool:
        return isinstance(other, _Money) and other.cents == self.cents

    def __add__(self, other) -> "_Money":
        return _Money(self.cents + int(other))

    def __radd__(self, other) -> "_Money":
        return _Money(int(other) + self.cents)

    def __mod__(self, divisor: int) -> "_Money":
        return _Money(self.cents % divisor)

    def __rmod__(self, dividend: int) -> int:
        return dividend % self.cents

    def __floordiv__(self, divisor: int) -> "_Money":
        return _Money(self.cents // divisor)

    def __or__(self, other: "_Money") -> "_Money":
        return _Money(max(self.cents, other.cents))

    def __invert__(self) -> "_Money":
        return _Money(-self.cents)

    def __round__(self, ndigits=None) -> "_Money":
        return _Money(round(self.cents, ndigits))

    def __int__(self) -> int:
        return self.cents


class _Settings(dict):
    def pick(self, *keys):
        return {key: self[key] for key in keys}


class _Session:
    def __init__(self) -> None:
        self.opened = False

    async def __aenter__(self):
        self.opened = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.opened = False
        return False

    async def fetch(self, key: str) -> str:
        return f"{key}:{self.opened}"


class _Recorder:
    def __init__(self, build) -> None:
        self.build = build
        self.calls: list[tuple[str, dict]] = []

    def __call__(self, value_holder, proxy, operation, parameters):
        self.calls.append((operation, dict(parameters)))
        value_holder.value = self.build()
        proxy.set_proxy_initializer(None)
        return True


def _make_proxy(target, build):
    recorder = _Recorder(build)
    return LazyLoadingValueHolderFactory().create_proxy(target, recorder), recorder


def test_method_call_passes_bound_parameters():
    proxy, recorder = _make_proxy(_Greeter, _Greeter)

    assert proxy.greet("Hello") == "Hello, world!"
    assert recorder.calls == [("greet", {"greeting": "Hello", "punctuation": "!"})]

    assert proxy.greet("Hi", punctuation="?") == "Hi, world?"
    assert len(recorder.calls) == 1


def test_variadic_method_parameters_keep_their_names():
    proxy, recorder = _make_proxy(_Greeter, _Greeter)

    assert proxy.collect(1, 2, flag=True) == ((1, 2), {"flag": True})
    assert recorder.calls == [("collect", {"items": (1, 2), "options": {"flag": True}})]


def test_property_read_passes_empty_parameters():
    proxy, recorder = _make_proxy(_Greeter, _Greeter)

    assert proxy.name == "world"
    assert proxy.shout == "WORLD"
    assert proxy.kind() == "greeter"
    assert recorder.calls == [("__getattr__", {})]


def test_property_write_passes_value():
    proxy, recorder = _make_proxy(_Greeter, _Greeter)

    proxy.name = "Ada"

    assert recorder.calls == [("__setattr__", {"value": "Ada"})]
    assert proxy.get_wrapped_value_holder_value().name == "Ada"
    assert proxy.greet("Hello") == "Hello, Ada!"


def test_deletion_passes_name():
    proxy, recorder = _make_proxy(_Greeter, _Greeter)

    del proxy.bar

    assert recorder.calls == [("__delattr__", {"name": "bar"})]
    assert not hasattr(proxy.get_wrapped_value_holder_value(), "bar")
    with pytest.raises(AttributeError):
        proxy.bar


def test_explicit_interface_matches_table():
    proxy, recorder = _make_proxy(_Greeter, _Greeter)

    assert proxy_has(proxy, "bar") is True
    assert recorder.calls == [("__hasattr__", {"name": "bar"})]

    proxy_set(proxy, "name", "Grace")
    assert proxy_get(proxy, "name") == "Grace"
    assert proxy_invoke(proxy, "greet", "Hey") == "Hey, Grace!"
    proxy_delete(proxy, "bar")
    assert proxy_has(proxy, "bar") is False
    assert len(recorder.calls) == 1


def test_invoke_binds_parameters_before_initialization():
    proxy, recorder = _make_proxy(_Greeter, _Greeter)

    assert proxy_invoke(proxy, "greet", "Yo", punctuation=".") == "Yo, world."
    assert recorder.calls == [("greet", {"greeting": "Yo", "punctuation": "."})]


def test_fluent_methods_return_the_proxy():
    proxy, _recorder = _make_proxy(_Greeter, _Greeter)

    assert proxy.rename("Linus") is proxy
    assert proxy_invoke(proxy, "rename", "Guido") is proxy
    assert proxy.name == "Guido"


def test_proxy_reports_wrapped_type_without_initializing():
    proxy, recorder = _make_proxy(_Greeter, _Greeter)

    assert isinstance(proxy, _Greeter)
    assert isinstance(proxy, LazyLoadingValueHolder)
    assert type(proxy) is not _Greeter
    assert recorder.calls == []


def test_special_methods_forward_through_state_machine():
    proxy, recorder = _make_proxy(_Bag, lambda: _Bag(1, 2, 3))

    assert len(proxy) == 3
    assert recorder.calls == [("__len__", {})]

    assert list(proxy) == [1, 2, 3]
    assert 2 in proxy
    assert proxy[0] == 1
    proxy[0] = 10
    assert proxy == _Bag(10, 2, 3)
    with proxy as entered:
        assert entered is proxy
    assert len(recorder.calls) == 1


def test_special_method_parameters_are_named():
    proxy, recorder = _make_proxy(_Bag, lambda: _Bag("a"))

    assert proxy[0] == "a"
    assert recorder.calls == [("__getitem__", {"key": 0})]


def test_management_api_wins_over_colliding_member(caplog):
    class _Colliding:
        def initialize_proxy(self) -> str:
            return "wrapped"

    proxy, recorder = _make_proxy(_Colliding, _Colliding)

    assert proxy.initialize_proxy() is True
    assert proxy_invoke(proxy, "initialize_proxy") == "wrapped"
    assert any("collides with proxy management API" in record.getMessage() for record in caplog.records)


def test_dir_and_repr_do_not_initialize():
    proxy, recorder = _make_proxy(_Greeter, _Greeter)

    names = dir(proxy)
    text = repr(proxy)

    assert "greet" in names
    assert "shout" in names
    assert "uninitialized" in text
    assert recorder.calls == []

    proxy.greet("Hi")
    assert "name" in dir(proxy)
    assert "wrapping" in repr(proxy)


def test_proxy_identity_is_distinct_from_wrapped():
    proxy, _recorder = _make_proxy(_Greeter, _Greeter)
    proxy.greet("Hi")

    assert proxy is not proxy.get_wrapped_value_holder_value()


def test_operators_forward_through_state_machine():
    proxy, recorder = _make_proxy(_Money, lambda: _Money(1050))

    assert proxy % 100 == _Money(50)
    assert recorder.calls == [("__mod__", {"divisor": 100})]

    assert proxy // 100 == _Money(10)
    assert (proxy | _Money(2000)) == _Money(2000)
    assert proxy + 1 == _Money(1051)
    assert 1 + proxy == _Money(1051)
    assert 2000 % proxy == 950
    assert ~proxy == _Money(-1050)
    assert int(proxy) == 1050
    assert len(recorder.calls) == 1


def test_reflected_operator_parameters_are_named():
    proxy, recorder = _make_proxy(_Money, lambda: _Money(7))

    assert 20 % proxy == 6
    assert recorder.calls == [("__rmod__", {"dividend": 20})]


def test_unary_round_applies_default_parameters():
    proxy, recorder = _make_proxy(_Money, lambda: _Money(1049))

    assert round(proxy) == _Money(1049)
    assert recorder.calls == [("__round__", {"ndigits": None})]


def test_repr_initializes_when_wrapped_type_defines_it():
    proxy, recorder = _make_proxy(_Money, lambda: _Money(5))

    assert repr(proxy) == "_Money(5)"
    assert recorder.calls == [("__repr__", {})]


def test_builtin_derived_type_forwards_mapping_protocol():
    proxy, recorder = _make_proxy(_Settings, lambda: _Settings(a=1))

    assert isinstance(proxy, dict)
    assert recorder.calls == []

    assert proxy["a"] == 1
    assert recorder.calls[0][0] == "__getitem__"

    assert len(proxy) == 1
    assert "a" in proxy
    assert list(proxy) == ["a"]
    assert proxy == {"a": 1}
    assert proxy.get("missing", 0) == 0
    assert proxy.pick("a") == {"a": 1}
    assert len(recorder.calls) == 1


def test_builtin_derived_method_reports_its_own_operation():
    proxy, recorder = _make_proxy(_Settings, lambda: _Settings(a=1))

    assert proxy.get("a") == 1
    assert [operation for operation, _parameters in recorder.calls] == ["get"]


def test_async_special_methods_and_coroutines_forward():
    proxy, recorder = _make_proxy(_Session, _Session)

    async def use():
        async with proxy as entered:
            assert entered is proxy
            return await proxy.fetch("user")

    assert asyncio.run(use()) == "user:True"
    assert recorder.calls == [("__aenter__", {})]
    assert proxy.opened is False


def test_async_method_parameters_are_bound_before_initialization():
    proxy, recorder = _make_proxy(_Session, _Session)

    assert asyncio.run(proxy.fetch("k")) == "k:False"
    assert recorder.calls == [("fetch", {"key": "k"})]
