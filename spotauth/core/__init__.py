"""Public façade for the spotauth.core package.

This module exposes logging helpers, filesystem utilities and the base
credential/token models that are safe to import from other packages. Callers
should import these cross-cutting concerns from this façade instead of the
internal submodules.
"""

from .fs_utils import ensure_parent_dir, read_json, remove_file, write_json
from .logging_config import configure_logging
from .logging_utils import (
    log_error,
    log_info,
    log_section,
    log_step,
    log_success,
    log_warning,
)
from .models import ClientCredentials, RedirectTarget, TokenSet

__all__ = [
    "configure_logging",
    "log_section",
    "log_info",
    "log_step",
    "log_success",
    "log_warning",
    "log_error",
    "ensure_parent_dir",
    "write_json",
    "read_json",
    "remove_file",
    "ClientCredentials",
    "RedirectTarget",
    "TokenSet",
]
