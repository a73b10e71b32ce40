"""Pulumi + wrangler provisioning helper for Cloudflare Workers projects."""

__version__ = "0.1.0"
