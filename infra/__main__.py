"""Pulumi entry point; see :mod:`cf_provisioner.program`."""

import os
from pathlib import Path

from cf_provisioner.program import run

os.environ.setdefault("CF_PROVISIONER_PROJECT_DIR", str(Path(__file__).resolve().parent.parent))

run()
