[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "qthreadlab"
version = "0.1.0"
description = "Threading examples: a progressive Mandelbrot renderer, a block pixelator and two producer/consumer demos"
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = [
    "threading",
    "mandelbrot",
    "producer-consumer",
    "semaphore",
    "condition-variable",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
qthreadlab-mandelbrot = "qthreadlab.mandelbrot_app:main"
qthreadlab-queued = "qthreadlab.queued_app:main"
qthreadlab-semaphores = "qthreadlab.semaphores:main"
qthreadlab-waitconditions = "qthreadlab.waitconditions:main"

[tool.hatch.build.targets.wheel]
packages = ["qthreadlab"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
