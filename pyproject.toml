[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "aclgrid"
version = "0.1.0"
description = "Inspect and edit POSIX access control lists of files and directories"
requires-python = ">=3.10"
dependencies = []
keywords = ["acl", "posix", "permissions", "filesystem", "xattr"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
aclgrid = "aclgrid.cli:main"

[tool.setuptools.packages.find]
include = ["aclgrid*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
