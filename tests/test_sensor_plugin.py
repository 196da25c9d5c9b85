import pytest

from sensorwatch.sensor_plugin import SensorData, SensorPlugin


class Reading(SensorData):
    def __init__(self, value):
        self.value = value

    def to_string(self):
        return f"value {self.value}"

    def display_string(self):
        return f"| {self.value} |"


class Dummy(SensorPlugin):
    def __init__(self):
        self.port = ""
        self.cleaned = 0

    @property
    def type_name(self):
        return "DUMMY"

    @property
    def description(self):
        return "Dummy sensor"

    def is_available(self, port):
        return port == "/dev/dummy"

    def initialize(self, port):
        self.port = port

    def read_data(self):
        return Reading(7) if self.port else None

    @property
    def current_port(self):
        return self.port

    @property
    def display_headers(self):
        return ["Time", "Value"]

    def color_code(self, data):
        return 1

    def quality_description(self, data):
        return "Good"

    def cleanup(self):
        self.cleaned += 1
        self.port = ""


def test_sensor_data_is_abstract():
    with pytest.raises(TypeError):
        SensorData()


def test_sensor_plugin_is_abstract():
    with pytest.raises(TypeError):
        SensorPlugin()


def test_str_uses_to_string():
    reading = Reading(3)
    assert SensorData.__str__(reading) == "value 3"
    assert str(reading) == "value 3"


def test_incomplete_plugin_cannot_be_created():
    class Partial(SensorPlugin):
        @property
        def type_name(self):
            return "X"

    with pytest.raises(TypeError):
        SensorPlugin.__new__(Partial)
    with pytest.raises(TypeError):
        Partial()


def test_context_manager_calls_cleanup():
    plugin = Dummy()
    entered = SensorPlugin.__enter__(plugin)
    assert entered is plugin
    entered.initialize("/dev/dummy")
    assert entered.read_data().value == 7
    SensorPlugin.__exit__(plugin, None, None, None)
    assert plugin.cleaned == 1
    assert plugin.current_port == ""
    assert plugin.read_data() is None