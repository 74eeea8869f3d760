[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fcitxbus"
version = "0.1.0"
description = "D-Bus structures, interface proxies, an in-process bus and input context handling for the Fcitx 5 input method framework"
requires-python = ">=3.10"
dependencies = []
keywords = ["fcitx", "input-method", "dbus", "ime", "i18n"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Internationalization",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fcitxbus"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
