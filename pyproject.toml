[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jobshop"
version = "0.1.0"
description = "Greedy job-shop scheduling heuristics: sequential, multi-threaded and experimental variants"
requires-python = ">=3.10"
dependencies = []
keywords = ["job-shop", "scheduling", "makespan", "heuristics", "operations-research"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
jobshop-seq = "jobshop.sequential:main"
jobshop-par = "jobshop.parallel:main"
jobshop-par-experiments = "jobshop.experiments_parallel:main"
jobshop-task-order = "jobshop.task_order:main"
jobshop-seq-experiments = "jobshop.experiments_sequential:main"

[tool.hatch.build.targets.wheel]
packages = ["jobshop"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
