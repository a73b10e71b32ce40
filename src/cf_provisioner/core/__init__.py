"""External tool wrappers (process execution, Pulumi, wrangler)."""

from cf_provisioner.core.process import CommandError, cloudflare_env, run_command, run_json
from cf_provisioner.core.pulumi_cli import PulumiCLI
from cf_provisioner.core.wrangler_cli import WranglerCLI, clean_cache

__all__ = [
    "CommandError",
    "PulumiCLI",
    "WranglerCLI",
    "clean_cache",
    "cloudflare_env",
    "run_command",
    "run_json",
]
