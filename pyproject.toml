[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "shorts-cutter"
version = "0.1.0"
description = "Batch video processing tool for creating vertical shorts with FFmpeg"
requires-python = ">=3.10"
dependencies = []
keywords = ["ffmpeg", "video", "shorts", "vertical", "batch"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video :: Conversion",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[project.scripts]
shorts-cutter = "shorts_cutter.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["shorts_cutter"]

[tool.pytest.ini_options]
addopts = "-ra"
