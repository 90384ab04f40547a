#!/usr/bin/env python
"""
The setup script for saltapi
"""

# pylint: disable=file-perms,resource-leakage
import setuptools  # isort:skip
import os
import subprocess
import sys

from setuptools import setup

# Change to saltapi source's directory prior to running any command
try:
    SETUP_DIRNAME = os.path.dirname(__file__)
except NameError:
    # We're most likely being frozen and __file__ triggered this NameError
    # Let's work around that
    SETUP_DIRNAME = os.path.dirname(sys.argv[0])

if SETUP_DIRNAME != "":
    os.chdir(SETUP_DIRNAME)

SETUP_DIRNAME = os.path.abspath(SETUP_DIRNAME)

SALTAPI_VERSION_MODULE = os.path.join(SETUP_DIRNAME, "saltapi", "version.py")
SALTAPI_REQS = os.path.join(SETUP_DIRNAME, "requirements", "base.txt")
SALTAPI_PYTEST_REQS = os.path.join(SETUP_DIRNAME, "requirements", "pytest.txt")
SALTAPI_LONG_DESCRIPTION_FILE = os.path.join(SETUP_DIRNAME, "README.rst")

SALTAPI_VERSION = (
    subprocess.check_output([sys.executable, SALTAPI_VERSION_MODULE]).decode().strip()
)


# ----- Helper Functions -------------------------------------------------------------------------------------------->


def _parse_requirements_file(requirements_file):
    parsed_requirements = []
    with open(requirements_file, encoding="utf-8") as rfh:
        for line in rfh.readlines():
            line = line.strip()
            if not line or line.startswith(("#", "-r", "--")):
                continue
            parsed_requirements.append(line)
    return parsed_requirements


def discover_packages():
    modules = []
    for root, _, files in os.walk(os.path.join(SETUP_DIRNAME, "saltapi")):
        if "__init__.py" not in files:
            continue
        modules.append(os.path.relpath(root, SETUP_DIRNAME).replace(os.sep, "."))
    return modules


# <---- Helper Functions ---------------------------------------------------------------------------------------------


with open(SALTAPI_LONG_DESCRIPTION_FILE, encoding="utf-8") as f:
    LONG_DESCRIPTION = f.read()


if __name__ == "__main__":
    setup(
        name="saltapi",
        version=SALTAPI_VERSION,
        description="A thin client for the salt-api REST interface",
        long_description=LONG_DESCRIPTION,
        long_description_content_type="text/x-rst",
        python_requires=">=3.8",
        classifiers=[
            "Programming Language :: Python",
            "Programming Language :: Python :: 3",
            "Programming Language :: Python :: 3 :: Only",
            "Development Status :: 4 - Beta",
            "Environment :: Console",
            "Intended Audience :: Developers",
            "Intended Audience :: System Administrators",
            "License :: OSI Approved :: Apache Software License",
            "Topic :: System :: Clustering",
            "Topic :: System :: Distributed Computing",
        ],
        license="Apache Software License 2.0",
        packages=discover_packages(),
        install_requires=_parse_requirements_file(SALTAPI_REQS),
        extras_require={"tests": _parse_requirements_file(SALTAPI_PYTEST_REQS)},
        entry_points={"console_scripts": ["saltapi = saltapi.cli:salt_api_call"]},
        zip_safe=False,
    )
