[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rpmread"
version = "0.1.0"
description = "Read rpm package files: headers, tags, file lists, dependencies, version comparison and signature checks"
requires-python = ">=3.10"
keywords = ["rpm", "package", "packaging", "rpmvercmp", "gpg", "md5"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Archiving :: Packaging",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
    "cryptography",
]

[project.scripts]
rpmdump = "rpmread.rpmdump:main"
rpminfo = "rpmread.rpminfo:main"

[tool.hatch.build.targets.wheel]
packages = ["rpmread"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
