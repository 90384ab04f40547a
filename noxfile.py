"""
noxfile
~~~~~~~

Nox configuration script
"""

# pylint: disable=resource-leakage,3rd-party-module-not-gated

import os
import pathlib
import sys

# fmt: off
if __name__ == "__main__":
    sys.stderr.write(
        "Do not execute this file directly. Use nox instead, it will know how to handle this file\n"
    )
    sys.stderr.flush()
    exit(1)
# fmt: on

import nox  # isort:skip

# Be verbose when running under a CI context
CI_RUN = os.environ.get("CI") is not None
PIP_INSTALL_SILENT = CI_RUN is False

# Global Path Definitions
REPO_ROOT = pathlib.Path(os.path.dirname(__file__)).resolve()
ARTIFACTS_DIR = REPO_ROOT / "artifacts"
COVERAGE_OUTPUT_DIR = ARTIFACTS_DIR / "coverage"

# Python versions to run against
_PYTHON_VERSIONS = ("3", "3.9", "3.10", "3.11", "3.12")

# Nox options
#  Reuse existing virtualenvs
nox.options.reuse_existing_virtualenvs = True

# Change current directory to REPO_ROOT
os.chdir(str(REPO_ROOT))

# Prevent Python from writing bytecode
os.environ["PYTHONDONTWRITEBYTECODE"] = "1"


@nox.session(python=_PYTHON_VERSIONS)
@nox.parametrize("coverage", [False, True])
def test(session, coverage):
    """
    Run the test suite
    """
    session.install("-e", ".[tests]", silent=PIP_INSTALL_SILENT)
    cmd_args = ["-ra", "--showlocals", "-vv"] + session.posargs
    if coverage:
        session.install("coverage", silent=PIP_INSTALL_SILENT)
        COVERAGE_OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
        session.run(
            "coverage",
            "run",
            "--source=saltapi",
            "-m",
            "pytest",
            *cmd_args,
            env={"COVERAGE_FILE": str(COVERAGE_OUTPUT_DIR / ".coverage")},
        )
        session.run(
            "coverage",
            "report",
            env={"COVERAGE_FILE": str(COVERAGE_OUTPUT_DIR / ".coverage")},
        )
    else:
        session.run("python", "-m", "pytest", *cmd_args)


@nox.session(python="3")
def lint(session):
    """
    Run PyLint against saltapi and it's test suite.
    """
    session.install("-e", ".[tests]", "pylint", silent=PIP_INSTALL_SILENT)
    flags = ["--disable=I"]
    if session.posargs:
        paths = session.posargs
    else:
        paths = ["setup.py", "noxfile.py", "saltapi/", "tests/"]
    session.run(
        "pylint", *flags, *paths, env={"PYTHONUNBUFFERED": "1"}
    )
