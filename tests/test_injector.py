from tokenwire import Injector, Token, bind_factory, bind_value, inject, provide


def test_get_builds_class_with_declared_dependency():
    class Engine: ...

    @inject(Engine)
    class Car:
        def __init__(self, engine):
            self.engine = engine

    car = Injector().get(Car)

    assert isinstance(car, Car)
    assert isinstance(car.engine, Engine)


def test_get_uses_override_provider_for_every_consumer():
    class Engine: ...

    @inject(Engine)
    class Car:
        def __init__(self, engine):
            self.engine = engine

    @inject(Engine)
    class LittleCar:
        def __init__(self, engine):
            self.engine = engine

    @provide(Engine)
    class MockEngine: ...

    injector = Injector([MockEngine])
    car = injector.get(Car)
    little_car = injector.get(LittleCar)

    assert isinstance(car, Car)
    assert isinstance(car.engine, MockEngine)
    assert isinstance(little_car, LittleCar)
    assert isinstance(little_car.engine, MockEngine)
    assert car.engine is little_car.engine


def test_injected_singleton_is_the_instance_returned_by_get():
    class Engine: ...

    @inject(Engine)
    class Car:
        def __init__(self, engine):
            self.engine = engine

    injector = Injector()

    assert injector.get(Car).engine is injector.get(Engine)


def test_get_returns_same_singleton_on_repeated_calls():
    class Engine: ...

    injector = Injector()

    assert injector.get(Engine) is injector.get(Engine)


def test_dependencies_are_passed_in_declaration_order():
    class Engine: ...

    class Wheels: ...

    @inject(Wheels, Engine)
    class Car:
        def __init__(self, wheels, engine):
            self.wheels = wheels
            self.engine = engine

    car = Injector().get(Car)

    assert isinstance(car.wheels, Wheels)
    assert isinstance(car.engine, Engine)


def test_explicit_token_resolves_to_value_binding():
    db_url = Token("db_url")

    @inject(db_url)
    class Database:
        def __init__(self, url):
            self.url = url

    injector = Injector([bind_value(db_url, "sqlite://")])

    assert injector.get(db_url) == "sqlite://"
    assert injector.get(Database).url == "sqlite://"


def test_tokens_with_same_name_are_distinct():
    first = Token("config")
    second = Token("config")

    injector = Injector([bind_value(first, 1), bind_value(second, 2)])

    assert injector.get(first) == 1
    assert injector.get(second) == 2


def test_factory_binding_receives_resolved_dependencies():
    class Engine: ...

    car = Token("car")

    @inject(Engine)
    def make_car(engine):
        return {"engine": engine}

    injector = Injector([bind_factory(car, make_car)])

    assert injector.get(car)["engine"] is injector.get(Engine)


def test_decorated_factory_provides_its_token():
    class Engine:
        def __init__(self, power):
            self.power = power

    power = Token("power")

    @provide(Engine)
    @inject(power)
    def make_engine(horsepower):
        return Engine(horsepower)

    injector = Injector([bind_value(power, 120), make_engine])

    assert injector.get(Engine).power == 120


def test_declared_function_is_its_own_token():
    class Engine: ...

    @inject(Engine)
    def describe_engine(engine):
        return f"engine: {type(engine).__name__}"

    assert Injector().get(describe_engine) == "engine: Engine"


def test_injector_token_resolves_to_requesting_injector():
    @inject(Injector)
    class ServiceLocator:
        def __init__(self, injector):
            self.injector = injector

    injector = Injector()

    assert injector.get(Injector) is injector
    assert injector.get(ServiceLocator).injector is injector
