"""Hotfix release flow: version lineage, staging and publishing."""
