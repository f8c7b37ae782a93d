[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "igsmrcapture"
version = "0.1.0"
description = "Capture GSM-R mobile terminal serial traffic and modem signals to sliced record files and UDP frames"
requires-python = ">=3.10"
dependencies = []
keywords = ["serial", "tty", "gsm-r", "capture", "modem", "udp", "termios"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Terminals :: Serial",
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
igsmrcapture = "igsmrcapture.app:main"

[tool.hatch.build.targets.wheel]
packages = ["igsmrcapture"]

[tool.pytest.ini_options]
addopts = "-ra"
