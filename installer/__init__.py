"""
Zulip production installer.

This package sequences the installation stages of a single-host Zulip
server: preflight checks, system packages, puppet manifests and the
activation of the new deployment.
"""
