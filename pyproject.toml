[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tourkit"
version = "0.1.0"
description = "Interactive programming tour server with exercise helpers and reference solutions"
requires-python = ">=3.10"
dependencies = []
keywords = ["tutorial", "tour", "exercises", "education", "lessons", "wsgi"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tourkit = "tourkit.server:main"
tourkit-binarytrees = "tourkit.solutions.binarytrees:main"
tourkit-webcrawler = "tourkit.solutions.webcrawler:main"
tourkit-handlers = "tourkit.solutions.handlers:main"

[tool.hatch.build.targets.wheel]
packages = ["tourkit"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
