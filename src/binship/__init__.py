"""binship - build a release binary and ship it to a remote service directory.

The deployment is three external commands run in strict order:

1. ``cargo build`` for a fixed target triple in release mode
2. ``scp`` of the artifact into the remote host's home directory
3. ``ssh -t`` to move it, elevated, into the service directory

The first failing step stops the run and its exit status becomes the
run's exit status.
"""

from __future__ import annotations

__version__ = "0.1.0"

from binship.config import BuildConfig, DeployConfig, RemoteConfig
from binship.errors import (
    ActivationFailed,
    BinshipError,
    BuildFailed,
    ConfigurationError,
    StepFailedError,
    TransferFailed,
)
from binship.models import DeployResult, StepResult, StepStatus
from binship.runner import DeployRunner, plan_deploy, run_deploy

__all__ = [
    "ActivationFailed",
    "BinshipError",
    "BuildConfig",
    "BuildFailed",
    "ConfigurationError",
    "DeployConfig",
    "DeployResult",
    "DeployRunner",
    "RemoteConfig",
    "StepFailedError",
    "StepResult",
    "StepStatus",
    "TransferFailed",
    "__version__",
    "plan_deploy",
    "run_deploy",
]
