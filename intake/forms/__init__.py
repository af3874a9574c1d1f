"""Bundled intake forms - one sub-package per form with spec.yaml and validators."""
