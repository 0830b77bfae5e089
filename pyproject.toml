[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "imagor"
version = "1.5.10"
description = "Image endpoint URL parsing, generation, signing, storage key hashing and HTTP source policy"
requires-python = ">=3.10"
dependencies = []
keywords = ["image", "thumbnail", "url", "signing", "hmac", "resize", "storage-key"]
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
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["imagor"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
