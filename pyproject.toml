[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "androidkit"
version = "0.1.0"
description = "Command line helpers for Android builds: AAR extraction, final R.jar generation and native library zips."
requires-python = ">=3.10"
dependencies = []
keywords = ["android", "build", "aar", "r.jar", "native libraries", "buildozer"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ak-extractaar = "androidkit.extractaar:main"
ak-finalrjar = "androidkit.finalrjar:main"
ak-nativelib = "androidkit.nativelib:main"

[tool.hatch.build.targets.wheel]
packages = ["androidkit"]

[tool.hatch.build.targets.sdist]
include = ["androidkit", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
