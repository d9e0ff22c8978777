[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "imflip"
version = "0.1.0"
description = "Flip 24-bit BMP images vertically or horizontally, serially, with threads or over row-partitioned ranks, plus a pi integration benchmark."
requires-python = ">=3.10"
dependencies = []
keywords = ["bmp", "image", "flip", "mirror", "threads", "parallel", "benchmark", "pi"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
    "Topic :: System :: Benchmark",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
imflip = "imflip.cli:main"
imflip-distributed = "imflip.distributed:main"
imflip-pi = "imflip.pi:main"

[tool.hatch.build.targets.wheel]
packages = ["imflip"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
strict = true
