"""Publish and tracking pipeline.

- **external**: Collaborators outside the process (publish command, git revision)
- **publish**: Publish-then-record orchestration and add-without-publish
"""
