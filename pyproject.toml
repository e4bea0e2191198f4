[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ddnsupdater"
version = "0.1.0"
description = "Drive a dynamic DNS update cycle: detect IP addresses, update DNS records and WAF lists, and summarise the results for monitors and notifiers."
requires-python = ">=3.10"
dependencies = []
keywords = ["ddns", "dns", "dynamic-dns", "ip", "waf"]
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
    "Topic :: Internet :: Name Service (DNS)",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ddnsupdater"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
