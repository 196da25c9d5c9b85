[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sensorwatch"
version = "1.0.0"
description = "Read, monitor and discover SDS011 PM2.5/PM10 particulate matter sensors from the terminal"
requires-python = ">=3.10"
dependencies = [
    "pyserial",
]
keywords = [
    "sds011",
    "air quality",
    "particulate matter",
    "pm2.5",
    "pm10",
    "serial",
    "sensor",
    "curses",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Environment :: Console :: Curses",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Science/Research",
    "Operating System :: MacOS",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Atmospheric Science",
    "Topic :: Terminals :: Serial",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
sensorwatch = "sensorwatch.cli:main"
sensorwatch-discover = "sensorwatch.discovery:main"

[tool.hatch.build.targets.wheel]
packages = ["sensorwatch"]

[tool.hatch.build.targets.sdist]
include = [
    "sensorwatch",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
