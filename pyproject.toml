[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "leftwm"
version = "0.5.0"
description = "Session launcher, configuration checker and configuration tooling for the LeftWM tiling window manager"
requires-python = ">=3.11"
dependencies = []
keywords = ["window-manager", "tiling", "x11", "leftwm", "configuration"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment :: Window Managers",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[project.scripts]
leftwm = "leftwm.watchdog:main"
leftwm-check = "leftwm.check_cli:main"

[tool.hatch.build.targets.wheel]
packages = ["leftwm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
