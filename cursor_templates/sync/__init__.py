"""Project sync — applying templates to projects and keeping them current.

This package provides:
- Materialization: writing template files and the project marker
- Markers: which template and version a project was built from
- Update checks: semver comparison against the store, with backups on apply
- Init resolution: turning flags or prompts into one materialize request
"""
