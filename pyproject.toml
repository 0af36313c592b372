[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sctplite"
version = "0.1.0"
description = "Building blocks of an SCTP stack: parameters, payload queues, reassembly, retransmission timers and streams"
requires-python = ">=3.10"
dependencies = []
keywords = ["sctp", "networking", "protocol", "webrtc", "datachannel", "rfc4960"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sctplite"]

[tool.pytest.ini_options]
addopts = "-ra"
