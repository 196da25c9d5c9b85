# sensorwatch

These are terminal tools for the SDS011 PM2.5/PM10 particulate matter sensor.
They do three things:

* read the sensor's 10-byte serial data frames;
* show the readings in a colour-coded curses view or as plain console lines;
* look for sensors on the machine's common serial ports.

Air quality is rated on the PM2.5 value, following WHO guidelines:

| PM2.5 (µg/m³) | Rating   | Colour |
|---------------|----------|--------|
| up to 15      | Good     | green  |
| up to 25      | Moderate | yellow |
| above 25      | Poor     | red    |

## Installation

```
pip install sensorwatch
```

Requirements:

* Python 3.10 or later.
* Linux or macOS. The package uses `termios` and the standard `curses` module.
* `pyserial` for serial access.

Your user needs permission to read the serial device. On many Linux systems
this means being in the `dialout` group.

## Usage

### Interactive monitor

```
sensorwatch
```

This starts the interactive monitor. It probes the common serial ports for
your platform and lists every port where an SDS011 answered. You then choose
one sensor to watch. The list is scanned again on every refresh of the menu.

| Key        | Action                          |
|------------|---------------------------------|
| Up / Down  | Move through the sensor list    |
| Enter      | Connect to the selected sensor  |
| r          | Refresh the sensor list         |
| b          | Back to sensor selection        |
| c          | Clear collected data            |
| q          | Quit                            |

While a sensor is connected, the screen shows three things:

* the most recent readings, newest first;
* the average, minimum and maximum over the last 100 readings;
* a status line with the time of the last update.

If curses cannot start, the program falls back to single-sensor mode.

### Single-sensor mode

```
sensorwatch --legacy
sensorwatch --legacy /dev/ttyUSB1
```

This mode reads one sensor on a fixed port. The default port is:

* `/dev/ttyUSB0` on Linux;
* `/dev/cu.usbserial` on macOS.

Press `c` to clear the data and `q` to quit. If the port cannot be opened, the
program prints a checklist and exits with status 1.

### Console output

```
sensorwatch --no-tui
sensorwatch --no-tui /dev/ttyUSB1
```

This prints one line per reading with the time, PM2.5 and PM10, about every
two seconds. A count is printed after every ten readings. Stop it with Ctrl+C.

### Finding sensors

```
sensorwatch-discover
sensorwatch-discover --detailed
```

This command prints the following:

* the registered sensor types;
* whether an SDS011 answers on `/dev/ttyUSB0`;
* every common serial port that exists, with the sensor type found there or
  `Unknown`.

With `--detailed` it also scans `/dev` for USB serial device names and prints
verbose output. Only macOS `cu.*` and `tty.*` names are recognised. When none
are found, it lists the common ports instead.

### Options

```
sensorwatch [options] [serial_port]

  --no-tui    Disable TUI mode and use console output
  --legacy    Use legacy single-sensor mode instead of interactive
  -h, --help  Show this help message
```

The first argument that does not start with `-` is the serial port. Unknown
options are ignored.

## Library use

`sensorwatch.reader.SDS011Reader` wraps a serial port and can be used as a
context manager. Entering the context opens the port, and raises `OSError` if
it cannot. `read_pm_data()` returns `(pm25, pm10)`, or `None` when no valid
frame arrives in ten attempts.

```python
from sensorwatch.reader import SDS011Reader

with SDS011Reader("/dev/ttyUSB0") as reader:
    values = reader.read_pm_data()
    if values is not None:
        pm25, pm10 = values
```

Two frame functions work without any hardware:

* `parse_packet` checks the header, command byte, tail and checksum of a
  10-byte frame. It returns the PM2.5 and PM10 values, or raises `PacketError`.
* `packet_hex` renders a frame as hex bytes.

Other modules:

* `sensorwatch.sds011.classify_pm25` returns the colour code and rating for a
  PM2.5 value.
* `sensorwatch.registry.SensorRegistry` holds `SensorPlugin` prototypes.
  `discover_sensors()` returns a `SensorInfo` for every existing common port.
* `sensorwatch.plugin_manager.PluginManager` keeps `Plugin` objects added with
  `add_plugin()`. It removes duplicates from the devices they detect. It picks
  the best plugin for each device by match score.
* `sensorwatch.sds011_device_plugin.create_plugin()` returns such a plugin for
  the SDS011. It comes with its own sensor and curses display.

## What it does not do

* Plugins are not loaded from files or a plugin directory. A `Plugin` must be
  created in Python and passed to `PluginManager.add_plugin()`.
* The `sensorwatch` command does not use `PluginManager` at all. The
  interactive monitor knows only the SDS011 plugin registered in
  `SensorRegistry`.
* The sensor is only read. No commands are sent to it, such as sleep, work
  period or reporting mode.
* Readings are not stored anywhere beyond the last 100 held in memory.